"""
Exception hierarchy for blowup.

Every error raised on purpose derives from BlowupError so the CLI can
report it and exit without a traceback.
"""


class BlowupError( Exception ):
    """Base class for all blowup errors."""


class ConfigError( BlowupError ):
    """Invalid configuration value."""


class InputFileError( BlowupError ):
    """An input file could not be used."""
    
    def __init__( self, path, reason: str ):
        self.path = path;
        self.reason = reason;
        super().__init__( f"{path}: {reason}" );


# --- SRT engine ---

class SrtError( BlowupError ):
    """Base class for SRT parse, repair and adjustment failures."""


class IoError( SrtError ):
    """Stream fault while reading or writing a document. The cause is chained."""
    
    def __init__( self, message: str = "IO error" ):
        super().__init__( message );


class ParseTextError( SrtError ):
    """Malformed index line or entry structure."""
    
    def __init__( self, text: str ):
        self.text = text;
        super().__init__( f"Parse error occurred while read content: {text}" );


class ParseTimeError( SrtError ):
    """Malformed or invalid timestamp line."""
    
    def __init__( self, text: str, reason: str = "" ):
        self.text = text;
        self.reason = reason;
        message = f"Parse time error: {text}";
        if reason:
            message += f" ({reason})";
        super().__init__( message );


class OverlapError( SrtError ):
    """The overlap repair plan cannot be satisfied."""
    
    def __init__( self, previous, current, reason: str ):
        self.previous = previous;
        self.current = current;
        super().__init__(
            f"Failed to fix overlapping entries: {reason}: prev({previous}) curr({current})"
        );


class InvalidTimestamp( SrtError ):
    """An adjusted range reaches the 100 hour ceiling of the format."""
    
    def __init__( self, time_range=None ):
        self.time_range = time_range;
        message = "Generated an invalid timestamp.";
        if time_range is not None:
            message = f"Generated an invalid timestamp: {time_range}";
        super().__init__( message );


# --- external tools ---

class MediaToolError( BlowupError ):
    """ffmpeg/ffprobe could not be executed."""


class ToolNotFound( MediaToolError ):
    
    def __init__( self, tool: str, search_dir=None ):
        self.tool = tool;
        self.search_dir = search_dir;
        where = f"in {search_dir}" if search_dir else "on PATH";
        super().__init__( f"{tool} cli is not found {where}" );


class CommandFailed( MediaToolError ):
    """A tool exited with a non-zero status."""
    
    def __init__( self, cmd: str, exit_status: int, stderr: str ):
        self.cmd = cmd;
        self.exit_status = exit_status;
        self.stderr = stderr;
        super().__init__(
            f"Command [{cmd}] failed with status code: {exit_status}. Stderr: {stderr.strip()}"
        );


class TrackerError( BlowupError ):
    """Tracker list could not be fetched or recorded."""
