"""
Basic test cases for blowup CLI functionality.
"""
import pytest
from pathlib import Path
from unittest.mock import Mock, patch
import sys

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from blowup.cli import BlowupCLI, main
from blowup.errors import MediaToolError, TrackerError
from blowup.media import OutputFormat, SubtitleStreamInfo
from blowup.srt import SrtDocument


SAMPLE_SRT = (
    "1\n00:00:00,200 --> 00:00:01,000\nFirst.\n\n"
    "2\n00:00:02,000 --> 00:00:03,000\nSecond.\n\n"
);


@pytest.fixture
def workdir( tmp_path, monkeypatch ):
    """Run from an empty directory so no stray .env is picked up."""
    for name in ( "BLOWUP_FFMPEG_DIR", "BLOWUP_HTTP_TIMEOUT" ):
        monkeypatch.setenv( name, "placeholder" );
        monkeypatch.delenv( name );
    monkeypatch.chdir( tmp_path );
    return tmp_path;


@pytest.fixture
def sample_file( workdir ):
    path = workdir / "movie.srt";
    path.write_text( SAMPLE_SRT, encoding="utf-8" );
    return path;


@pytest.fixture
def video( workdir ):
    path = workdir / "movie.mkv";
    path.write_bytes( b"\x00" );
    return path;


class TestBlowupCLI:
    """Test cases for argument parsing and validation."""
    
    def test_cli_initialization( self ):
        cli = BlowupCLI();
        assert cli.parser is not None;
        assert cli.args is None;
        assert cli.logger is None;
    
    def test_argument_parsing_missing_required( self, workdir ):
        cli = BlowupCLI();
        with pytest.raises( SystemExit ):
            cli.parse_args( [] );
        with pytest.raises( SystemExit ):
            cli.parse_args( [ "sub" ] );
    
    def test_shift_requires_ms_and_mode( self, sample_file ):
        with pytest.raises( SystemExit ):
            BlowupCLI().parse_args( [ "sub", "shift", str( sample_file ), "--mode", "1" ] );
        with pytest.raises( SystemExit ):
            BlowupCLI().parse_args( [ "sub", "shift", str( sample_file ), "--ms", "100" ] );
    
    def test_invalid_mode( self, sample_file ):
        with pytest.raises( SystemExit ):
            BlowupCLI().parse_args( [ "sub", "shift", str( sample_file ), "--ms", "100", "--mode", "3" ] );
    
    def test_shift_arguments( self, sample_file ):
        args = BlowupCLI().parse_args( [
            "--debug", "sub", "shift", str( sample_file ), "--ms", "-500", "--mode", "2", "-j", "4"
        ] );
        assert args.debug == True;
        assert args.files == [ sample_file ];
        assert args.delta_ms == -500;
        assert args.mode == "2";
        assert args.jobs == 4;
    
    def test_shift_rejects_non_srt( self, workdir ):
        path = workdir / "movie.ass";
        path.write_text( "[Script Info]\n" );
        with pytest.raises( SystemExit ) as exc_info:
            BlowupCLI().parse_args( [ "sub", "shift", str( path ), "--ms", "1", "--mode", "1" ] );
        assert exc_info.value.code == 1;
    
    def test_missing_video( self, workdir ):
        with pytest.raises( SystemExit ):
            BlowupCLI().parse_args( [ "sub", "list", str( workdir / "none.mkv" ) ] );
    
    def test_list_format_default( self, video ):
        args = BlowupCLI().parse_args( [ "sub", "list", str( video ) ] );
        assert args.output_format == OutputFormat.TABLE.value;
    
    def test_bad_ffmpeg_dir( self, video, monkeypatch ):
        monkeypatch.setenv( "BLOWUP_FFMPEG_DIR", str( video.parent / "no-such-dir" ) );
        with pytest.raises( SystemExit ) as exc_info:
            BlowupCLI().parse_args( [ "sub", "list", str( video ) ] );
        assert exc_info.value.code == 1;
    
    def test_bad_timeout_setting( self, workdir, monkeypatch ):
        monkeypatch.setenv( "BLOWUP_HTTP_TIMEOUT", "soon" );
        with pytest.raises( SystemExit ) as exc_info:
            BlowupCLI().parse_args( [ "tracker", "update" ] );
        assert exc_info.value.code == 1;


class TestMain:
    """End-to-end runs through main()."""
    
    def test_shift( self, sample_file ):
        main( [ "sub", "shift", str( sample_file ), "--ms", "-500", "--mode", "1" ] );
        
        shifted = SrtDocument.read_file( sample_file.with_name( "movie_mod.srt" ) );
        # the first entry starts before 500ms and is left alone
        assert [ ( e.begin, e.end ) for e in shifted ] == [ ( 200, 1000 ), ( 1500, 2500 ) ];
    
    def test_shift_failure_exit_status( self, workdir, sample_file ):
        broken = workdir / "broken.srt";
        broken.write_text( "nope\n" );
        
        with pytest.raises( SystemExit ) as exc_info:
            main( [ "sub", "shift", str( sample_file ), str( broken ), "--ms", "100", "--mode", "1" ] );
        
        assert exc_info.value.code == 1;
        assert sample_file.with_name( "movie_mod.srt" ).exists();
    
    @patch( "blowup.cli.render_streams" )
    @patch( "blowup.cli.list_subtitle_streams" )
    def test_list( self, mock_list, mock_render, video ):
        streams = [ SubtitleStreamInfo( 2, "subrip", 1000, "eng", None ) ];
        mock_list.return_value = streams;
        
        main( [ "sub", "list", str( video ), "--format", "json" ] );
        
        mock_render.assert_called_once_with( streams, OutputFormat.JSON );
    
    @patch( "blowup.cli.render_streams" )
    @patch( "blowup.cli.list_subtitle_streams" )
    def test_list_without_streams( self, mock_list, mock_render, video ):
        mock_list.return_value = [];
        main( [ "sub", "list", str( video ) ] );
        mock_render.assert_not_called();
    
    @patch( "blowup.cli.list_subtitle_streams" )
    def test_media_error_exit_status( self, mock_list, video ):
        mock_list.side_effect = MediaToolError( "ffprobe exploded" );
        with pytest.raises( SystemExit ) as exc_info:
            main( [ "sub", "list", str( video ) ] );
        assert exc_info.value.code == 1;
    
    @patch( "blowup.cli.extract_subtitle" )
    def test_export_default_output( self, mock_extract, video ):
        main( [ "sub", "export", str( video ) ] );
        
        args, kwargs = mock_extract.call_args;
        assert args == ( video, video.with_suffix( ".srt" ) );
        assert kwargs["overwrite"] is False;
    
    @patch( "blowup.cli.extract_subtitle" )
    def test_export_explicit_output( self, mock_extract, video, workdir ):
        main( [ "sub", "export", str( video ), str( workdir / "out.ass" ), "--force" ] );
        
        args, kwargs = mock_extract.call_args;
        assert args[1] == workdir / "out.ass";
        assert kwargs["overwrite"] is True;
    
    @patch( "blowup.cli.ComparePager" )
    def test_compare( self, mock_pager, sample_file, workdir ):
        other = workdir / "other.srt";
        other.write_text( SAMPLE_SRT );
        
        main( [ "sub", "compare", str( sample_file ), str( other ), "-i" ] );
        
        first, second = mock_pager.return_value.run.call_args[0];
        assert first == second;
        assert mock_pager.return_value.run.call_args[1] == { "interactive": True };
    
    @patch( "blowup.cli.TrackerFetcher" )
    def test_tracker_update( self, mock_fetcher, workdir ):
        main( [ "tracker", "update" ] );
        mock_fetcher.from_settings.return_value.update.assert_called_once_with();
    
    @patch( "blowup.cli.TrackerFetcher" )
    def test_tracker_error_exit_status( self, mock_fetcher, workdir ):
        mock_fetcher.from_settings.return_value.update.side_effect = TrackerError( "rate limited" );
        with pytest.raises( SystemExit ) as exc_info:
            main( [ "tracker", "update" ] );
        assert exc_info.value.code == 1;
    
    def test_keyboard_interrupt( self, workdir ):
        with patch.object( BlowupCLI, "dispatch", side_effect=KeyboardInterrupt ):
            with pytest.raises( SystemExit ) as exc_info:
                main( [ "tracker", "update" ] );
        assert exc_info.value.code == 130;
