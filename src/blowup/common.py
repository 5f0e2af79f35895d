"""
Small filesystem helpers shared by the commands.
"""
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import InputFileError


# Files handed to the compare pager are read whole
READ_SIZE_LIMIT = 1024 * 1024;  # 1MB


def same_path_with( path: Path, suffix: str, sep: str = "_" ) -> Path:
    """
    Same directory and extension, with ``sep + suffix`` appended to the stem.
    
    ``movie.srt`` -> ``movie_mod.srt``
    
    Raises:
        ValueError: the path has no final component
    """
    path = Path( path );
    if not path.name or path.name in ( ".", ".." ):
        raise ValueError( f"The provided path is missing the final element: {path}" );
    return path.with_name( f"{path.stem}{sep}{suffix}{path.suffix}" );


def find_command_path( search_dir: Optional[Path], command: str ) -> Optional[Path]:
    """
    Locate an executable.
    
    With ``search_dir`` only that directory is searched (no recursion);
    otherwise PATH is searched like ``which``.
    
    Returns:
        Full path to the command, or None if it was not found
    """
    if search_dir is None:
        found = shutil.which( command );
        return Path( found ) if found else None;
    
    search_dir = Path( search_dir );
    if not search_dir.is_dir():
        return None;
    
    for entry in search_dir.iterdir():
        if entry.name == command and entry.is_file():
            return entry;
    return None;


def read_files_to_string( paths: Sequence[Path] ) -> List[str]:
    """
    Read each file as UTF-8 text, keeping the input order.
    
    Raises:
        InputFileError: a path is not a regular file, is over 1MB or
            cannot be read
    """
    contents = [];
    for path in paths:
        path = Path( path );
        if not path.is_file():
            raise InputFileError( path, "not a regular file" );
        if path.stat().st_size > READ_SIZE_LIMIT:
            raise InputFileError( path, f"larger than {READ_SIZE_LIMIT} bytes" );
        try:
            contents.append( path.read_text( encoding="utf-8-sig" ) );
        except ( OSError, UnicodeDecodeError ) as e:
            raise InputFileError( path, str( e ) ) from e;
    return contents;
