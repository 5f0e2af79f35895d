"""
Shared pytest setup: import path and a throwaway log directory.
"""
import os
import sys
import tempfile
from pathlib import Path

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

# Keep test runs from writing logs/ into the working tree
os.environ.setdefault( "BLOWUP_LOG_DIR", tempfile.mkdtemp( prefix="blowup-logs-" ) );
