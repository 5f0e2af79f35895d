"""
CLI entry point for blowup with argument parsing and environment loading.
"""
import argparse
import sys
from pathlib import Path

from . import __version__
from .config import load_settings
from .errors import BlowupError, ConfigError
from .logging import setup_logging
from .media import MediaToolRunner, OutputFormat, extract_subtitle, list_subtitle_streams, render_streams
from .pager import ComparePager
from .srt import OverlapMode
from .subtitles import SubtitleProcessor
from .tracker import TrackerFetcher


class BlowupCLI:
    """
    Command line interface for blowup.

    Settings come from a .env file and the environment; see config.py.
    """

    def __init__( self ):
        self.parser = self._create_parser();
        self.args = None;
        self.logger = None;
        self.settings = None;

    def _create_parser( self ):
        """Create argument parser with all commands."""
        parser = argparse.ArgumentParser(
            prog="blowup",
            description="All about movie: subtitle timing, subtitle streams and tracker lists",
            epilog="Environment variables: BLOWUP_FFMPEG_DIR, BLOWUP_LOG_DIR, BLOWUP_TRACKER_*, GITHUB_TOKEN"
        );
        parser.add_argument( "--version", action="version", version=f"%(prog)s {__version__}" );
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug mode with verbose output"
        );

        commands = parser.add_subparsers( dest="command", required=True, metavar="COMMAND" );

        # blowup sub ...
        sub = commands.add_parser( "sub", help="Handle subtitle files and subtitle streams" );
        sub_commands = sub.add_subparsers( dest="action", required=True, metavar="ACTION" );

        shift = sub_commands.add_parser( "shift", help="Move every timestamp of .srt files by a fixed offset" );
        shift.add_argument( "files", nargs="+", type=Path, metavar="FILE", help="Subtitle file(s) (.srt)" );
        shift.add_argument(
            "--ms",
            type=int,
            required=True,
            dest="delta_ms",
            help="Milliseconds to add to every timestamp (negative moves subtitles earlier)"
        );
        shift.add_argument(
            "--mode",
            choices=[ mode.value for mode in OverlapMode ],
            required=True,
            help="Overlap fix: 1 = later entry starts when the earlier ends, "
                 "2 = earlier entry ends when the later starts"
        );
        shift.add_argument(
            "--jobs", "-j",
            type=int,
            default=1,
            help="Number of files processed in parallel (default: 1)"
        );

        export = sub_commands.add_parser( "export", help="Extract the first subtitle stream of a video" );
        export.add_argument( "video", type=Path, help="Video container (.mkv, .mp4, ...)" );
        export.add_argument( "output", type=Path, nargs="?", help="Output subtitle file (default: <video>.srt)" );
        export.add_argument( "--force", action="store_true", help="Overwrite the output file if it exists" );

        list_streams = sub_commands.add_parser( "list", help="List the subtitle streams of a video" );
        list_streams.add_argument( "video", type=Path, help="Video container (.mkv, .mp4, ...)" );
        list_streams.add_argument(
            "--format", "-f",
            choices=[ fmt.value for fmt in OutputFormat ],
            default=OutputFormat.TABLE.value,
            dest="output_format",
            help="Output format (default: tab)"
        );

        compare = sub_commands.add_parser( "compare", help="Show two .srt files entry by entry" );
        compare.add_argument( "first", type=Path, metavar="FILE1" );
        compare.add_argument( "second", type=Path, metavar="FILE2" );
        compare.add_argument( "--interactive", "-i", action="store_true", help="Page through the entries" );

        # blowup tracker ...
        tracker = commands.add_parser( "tracker", help="Handle all things about tracker list" );
        tracker_commands = tracker.add_subparsers( dest="action", required=True, metavar="ACTION" );
        tracker_commands.add_parser( "update", help="Update the newest tracker list" );

        return parser;

    def _validate_arguments( self ):
        """Validate parsed arguments and settings, returning a list of problems."""
        errors = [];
        args = self.args;

        if self.settings.ffmpeg_dir and not self.settings.ffmpeg_dir.is_dir():
            errors.append( f"BLOWUP_FFMPEG_DIR is not a directory: {self.settings.ffmpeg_dir}" );

        if args.command != "sub":
            return errors;

        if args.action == "shift":
            for subtitle_file in args.files:
                if not subtitle_file.exists():
                    errors.append( f"Subtitle file not found: {subtitle_file}" );
                elif subtitle_file.suffix.lower() != ".srt":
                    errors.append( f"Only .srt subtitle files are supported, got: {subtitle_file}" );
            if args.jobs < 1:
                errors.append( "Number of jobs must be at least 1" );

        elif args.action in ( "export", "list" ):
            if not args.video.exists():
                errors.append( f"Media file not found: {args.video}" );

        elif args.action == "compare":
            for subtitle_file in ( args.first, args.second ):
                if not subtitle_file.exists():
                    errors.append( f"Subtitle file not found: {subtitle_file}" );

        return errors;

    def parse_args( self, argv=None ):
        """Parse command line arguments and validate configuration."""
        self.args = self.parser.parse_args( argv );

        try:
            self.settings = load_settings();
        except ConfigError as e:
            self.logger = setup_logging( debug=self.args.debug );
            self.logger.error( f"Configuration error: {e}" );
            sys.exit( 1 );

        self.logger = setup_logging( debug=self.args.debug, log_dir=self.settings.log_dir );

        errors = self._validate_arguments();
        if errors:
            self.logger.error( "Configuration errors:" );
            for error in errors:
                self.logger.error( f"  - {error}" );
            sys.exit( 1 );

        self.logger.debug( f"blowup v{__version__} starting: {self.args.command} {getattr( self.args, 'action', '' )}" );
        return self.args;

    # --- commands ---

    def run_shift( self ) -> int:
        processor = SubtitleProcessor();
        results = processor.shift_files(
            self.args.files,
            self.args.delta_ms,
            OverlapMode( self.args.mode ),
            jobs=self.args.jobs
        );
        failed = [ result for result in results if not result.ok ];
        if failed:
            self.logger.error( f"{len( failed )} of {len( results )} file(s) could not be shifted" );
            return 1;
        return 0;

    def run_export( self ) -> int:
        output = self.args.output or self.args.video.with_suffix( ".srt" );
        runner = MediaToolRunner( self.settings.ffmpeg_dir );
        extract_subtitle( self.args.video, output, runner=runner, overwrite=self.args.force );
        return 0;

    def run_list( self ) -> int:
        runner = MediaToolRunner( self.settings.ffmpeg_dir );
        streams = list_subtitle_streams( self.args.video, runner=runner );
        if not streams:
            self.logger.info( "No subtitle streams found." );
            return 0;
        render_streams( streams, OutputFormat( self.args.output_format ) );
        return 0;

    def run_compare( self ) -> int:
        first, second = SubtitleProcessor().load_pair( self.args.first, self.args.second );
        if len( first ) != len( second ):
            self.logger.warning( f"Entry counts differ: {len( first )} vs {len( second )}" );
        ComparePager().run( first, second, interactive=self.args.interactive );
        return 0;

    def run_tracker_update( self ) -> int:
        TrackerFetcher.from_settings( self.settings ).update();
        return 0;

    def dispatch( self ) -> int:
        handlers = {
            ( "sub", "shift" ): self.run_shift,
            ( "sub", "export" ): self.run_export,
            ( "sub", "list" ): self.run_list,
            ( "sub", "compare" ): self.run_compare,
            ( "tracker", "update" ): self.run_tracker_update
        };
        return handlers[( self.args.command, self.args.action )]();


def main( argv=None ):
    """Main entry point for the blowup CLI."""
    cli = BlowupCLI();
    args = cli.parse_args( argv );

    try:
        status = cli.dispatch();
    except KeyboardInterrupt:
        cli.logger.warning( "Interrupted by user" );
        sys.exit( 130 );
    except BlowupError as e:
        cli.logger.error( str( e ) );
        sys.exit( 1 );
    except Exception as e:
        cli.logger.error( f"Unexpected error: {e}" );
        if args.debug:
            raise;
        sys.exit( 1 );

    if status:
        sys.exit( status );


if __name__ == "__main__":
    main();
