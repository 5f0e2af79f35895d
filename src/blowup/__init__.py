"""
blowup - Movie post-production housekeeping.

Shifts and repairs SRT subtitle timing, extracts and lists subtitle
streams with ffmpeg, and keeps a community tracker list up to date.
"""

__version__ = "0.1.0";
__author__ = "blowup Project";
__license__ = "MIT";
