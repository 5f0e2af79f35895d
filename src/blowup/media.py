"""
ffmpeg/ffprobe integration: locating the binaries, running them, extracting
subtitle streams and listing the subtitle streams of a container.
"""
import json
import os
import subprocess
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import ffmpeg
from rich.console import Console
from rich.table import Table

from .common import find_command_path
from .errors import CommandFailed, InputFileError, MediaToolError, ToolNotFound
from .logging import get_logger


class MediaTool( Enum ):
    FFMPEG = "ffmpeg";
    FFPROBE = "ffprobe";

    @property
    def binary_name( self ) -> str:
        return f"{self.value}.exe" if os.name == "nt" else self.value;


class OutputFormat( Enum ):
    """How list_subtitle_streams results are printed."""

    JSON = "json";
    TABLE = "tab";
    LIST = "list";


@dataclass
class SubtitleStreamInfo:
    """One subtitle stream as reported by ffprobe."""

    index: int;
    codec_name: str;
    duration: int;                  # ffprobe duration_ts
    language: Optional[str] = None;
    title: Optional[str] = None;

    @classmethod
    def from_ffprobe( cls, stream: dict ) -> "SubtitleStreamInfo":
        tags = stream.get( "tags" ) or {};
        return cls(
            index=int( stream["index"] ),
            codec_name=stream.get( "codec_name", "unknown" ),
            duration=int( stream.get( "duration_ts", 0 ) ),
            language=tags.get( "language" ),
            title=tags.get( "title" )
        );


class MediaToolRunner:
    """
    Runs ffmpeg/ffprobe as opaque binaries.

    Binaries are looked up in ``search_dir`` when given (that directory
    only), otherwise on PATH.
    """

    def __init__( self, search_dir: Optional[Path] = None ):
        self.logger = get_logger();
        self.search_dir = Path( search_dir ) if search_dir else None;

    def locate( self, tool: MediaTool ) -> Path:
        """
        Raises:
            ToolNotFound: the binary is not in the search directory / PATH
        """
        path = find_command_path( self.search_dir, tool.binary_name );
        if path is None:
            raise ToolNotFound( tool.binary_name, self.search_dir );
        return path;

    def run( self, tool: MediaTool, args: Sequence[str] ) -> Tuple[str, str]:
        """
        Run a tool to completion.

        Returns:
            (stdout, stderr) decoded as UTF-8

        Raises:
            ToolNotFound: the binary could not be located
            CommandFailed: the tool exited with a non-zero status
            MediaToolError: the process could not be started
        """
        binary = self.locate( tool );
        cmd = [ str( binary ) ] + [ str( arg ) for arg in args ];
        self.logger.debug( f"Running: {' '.join( cmd )}" );

        try:
            result = subprocess.run( cmd, capture_output=True, stdin=subprocess.DEVNULL );
        except OSError as e:
            raise MediaToolError( f"{tool.value} command execution error: {e}" ) from e;

        stdout = result.stdout.decode( "utf-8", errors="replace" );
        stderr = result.stderr.decode( "utf-8", errors="replace" );

        if result.returncode != 0:
            raise CommandFailed( str( binary ), result.returncode, stderr );

        return stdout, stderr;


def extract_subtitle( video_file: Path, subtitle_file: Path, runner: Optional[MediaToolRunner] = None, overwrite: bool = False ) -> Path:
    """
    Copy the first subtitle stream of ``video_file`` into ``subtitle_file``.

    The stream is copied without re-encoding; the container format of the
    output follows its extension.

    Raises:
        InputFileError: the video is missing, or the output exists and
            ``overwrite`` is False
        MediaToolError: ffmpeg could not be run or failed
    """
    runner = runner or MediaToolRunner();
    video_file = Path( video_file );
    subtitle_file = Path( subtitle_file );

    if not video_file.is_file():
        raise InputFileError( video_file, "video file not found" );
    if subtitle_file.exists() and not overwrite:
        raise InputFileError( subtitle_file, "output already exists (use --force to overwrite)" );

    stream = ffmpeg.input( str( video_file ) ).output( str( subtitle_file ), map="0:s:0", c="copy" );
    args = ffmpeg.get_args( stream, overwrite_output=overwrite );

    _, stderr = runner.run( MediaTool.FFMPEG, args );
    logger = get_logger();
    logger.debug( f"ffmpeg output:\n{stderr}" );
    logger.info( f"Extracted subtitle stream to {subtitle_file}" );
    return subtitle_file;


def list_subtitle_streams( video_file: Path, runner: Optional[MediaToolRunner] = None ) -> List[SubtitleStreamInfo]:
    """
    Ask ffprobe for the subtitle streams of a container.

    Returns:
        Stream descriptions in container order, empty if there are none

    Raises:
        InputFileError: the video is missing
        MediaToolError: ffprobe could not be run, failed, or printed
            something that is not ffprobe JSON
    """
    runner = runner or MediaToolRunner();
    video_file = Path( video_file );
    if not video_file.exists():
        raise InputFileError( video_file, "video file not found" );

    args = [
        "-v", "quiet",
        "-print_format", "json",
        "-show_streams",
        "-select_streams", "s",
        "--",
        str( video_file )
    ];
    stdout, _ = runner.run( MediaTool.FFPROBE, args );

    if not stdout.strip():
        return [];

    try:
        output = json.loads( stdout );
        return [ SubtitleStreamInfo.from_ffprobe( stream ) for stream in output.get( "streams", [] ) ];
    except ( ValueError, KeyError, TypeError, AttributeError ) as e:
        raise MediaToolError( f"Unexpected ffprobe output: {e}" ) from e;


def render_streams( streams: List[SubtitleStreamInfo], output_format: OutputFormat, console: Optional[Console] = None ):
    """Print stream descriptions as JSON, a table, or one line per stream."""
    console = console or Console();
    output_format = OutputFormat( output_format );

    if output_format is OutputFormat.JSON:
        console.print_json( data=[ asdict( stream ) for stream in streams ] );
        return;

    if output_format is OutputFormat.TABLE:
        table = Table();
        for column in ( "Index", "Codec Name", "Duration(ms)", "Language", "Title" ):
            table.add_column( column );
        for stream in streams:
            table.add_row(
                str( stream.index ),
                stream.codec_name,
                str( stream.duration ),
                stream.language or "N/A",
                stream.title or "N/A"
            );
        console.print( table );
        return;

    for stream in streams:
        console.print(
            f"Index({stream.index}) Codec Name({stream.codec_name}) Duration({stream.duration}ms) "
            f"Language({stream.language or 'N/A'}) Title({stream.title or 'N/A'})",
            markup=False,
            highlight=False,
            soft_wrap=True
        );
