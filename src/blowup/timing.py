"""
Millisecond time ranges and the SRT timestamp line.

All durations are plain ``int`` millisecond counts. They are relative
offsets from the start of the media, never wall-clock times, and may be
negative while arithmetic is in progress.
"""
import re
from dataclasses import dataclass

from .errors import ParseTimeError


MS_PER_SECOND = 1000;
MS_PER_MINUTE = 60 * MS_PER_SECOND;
MS_PER_HOUR = 60 * MS_PER_MINUTE;

# SRT hours have two digits, so every timestamp must stay below 100h
MAX_TIMESTAMP_MS = 100 * MS_PER_HOUR;

ARROW = " --> ";

TIMESTAMP_LINE_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2}),(\d{3}) --> (\d{2}):(\d{2}):(\d{2}),(\d{3})",
    re.ASCII
);


def format_timestamp( ms: int ) -> str:
    """
    Render a duration as ``HH:MM:SS,mmm``.

    Negative values get a leading ``-``. The hour field is zero-padded to
    two digits but never clamped, so 101 hours renders as ``101:00:00,000``.

    Args:
        ms: Duration in milliseconds

    Returns:
        Formatted timestamp string
    """
    sign = "-" if ms < 0 else "";
    ms = abs( ms );
    seconds, millis = divmod( ms, 1000 );
    minutes, seconds = divmod( seconds, 60 );
    hours, minutes = divmod( minutes, 60 );
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}";


def _timestamp_from_fields( line: str, hours: str, minutes: str, seconds: str, millis: str ) -> int:
    h, m, s, ms = int( hours ), int( minutes ), int( seconds ), int( millis );
    if h > 99 or m > 59 or s > 59 or ms > 999:
        raise ParseTimeError(
            line,
            f"invalid timestamp: {h:02d}:{m:02d}:{s:02d},{ms:03d}"
        );
    return h * MS_PER_HOUR + m * MS_PER_MINUTE + s * MS_PER_SECOND + ms;


@dataclass
class TimeRange:
    """
    A subtitle display interval ``[begin, end)`` in milliseconds.

    ``end >= begin`` holds on construction. Shifting moves both bounds
    together; the bound setters are only used by overlap repair, which
    validates its plan before touching anything.
    """

    begin: int;
    end: int;

    def __post_init__( self ):
        if self.end < self.begin:
            raise ValueError(
                f"end {format_timestamp( self.end )} precedes begin {format_timestamp( self.begin )}"
            );

    @classmethod
    def parse( cls, line: str ) -> "TimeRange":
        """
        Parse a ``HH:MM:SS,mmm --> HH:MM:SS,mmm`` line.

        The line must match exactly; surrounding whitespace is not
        tolerated.

        Raises:
            ParseTimeError: pattern mismatch, field out of range, or the
                end precedes the begin. Carries the offending line.
        """
        match = TIMESTAMP_LINE_RE.fullmatch( line );
        if not match:
            raise ParseTimeError( line );

        groups = match.groups();
        begin = _timestamp_from_fields( line, *groups[:4] );
        end = _timestamp_from_fields( line, *groups[4:] );
        if end < begin:
            raise ParseTimeError( line, "end time precedes begin time" );

        return cls( begin, end );

    @property
    def duration_ms( self ) -> int:
        return self.end - self.begin;

    def is_valid( self ) -> bool:
        """Both bounds are below the 100 hour ceiling of the format."""
        return self.begin < MAX_TIMESTAMP_MS and self.end < MAX_TIMESTAMP_MS;

    def shift( self, delta_ms: int ):
        self.begin += delta_ms;
        self.end += delta_ms;

    def set_begin( self, begin: int ):
        self.begin = begin;

    def set_end( self, end: int ):
        self.end = end;

    def __str__( self ):
        return f"{format_timestamp( self.begin )}{ARROW}{format_timestamp( self.end )}";
