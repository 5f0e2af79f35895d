"""
Test cases for the side-by-side compare pager.
"""
import pytest
from pathlib import Path
import sys

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from rich.console import Console

from blowup.pager import PROMPT, ComparePager
from blowup.srt import SrtDocument, SubtitleEntry
from blowup.timing import TimeRange


def create_document( count: int, prefix: str ) -> SrtDocument:
    return SrtDocument(
        SubtitleEntry( i + 1, TimeRange( i * 1000, i * 1000 + 500 ), f"{prefix} line {i + 1}" )
        for i in range( count )
    );


def scripted_keys( *keys ):
    remaining = list( keys );
    def read_key():
        if not remaining:
            raise EOFError;
        return remaining.pop( 0 );
    return read_key;


@pytest.fixture
def console():
    return Console( record=True, width=120 );


class TestComparePager:
    
    def test_non_interactive_shows_all_pairs( self, console ):
        pager = ComparePager( console=console, read_key=scripted_keys() );
        
        shown = pager.run( create_document( 4, "left" ), create_document( 4, "right" ) );
        
        assert shown == 4;
        text = console.export_text();
        assert "left line 4" in text;
        assert "right line 4" in text;
        assert PROMPT not in text;
    
    def test_stops_at_shorter_document( self, console ):
        pager = ComparePager( console=console );
        assert pager.run( create_document( 5, "left" ), create_document( 2, "right" ) ) == 2;
        assert "left line 3" not in console.export_text();
    
    def test_interactive_page_sizes( self, console ):
        pager = ComparePager( console=console, read_key=scripted_keys( "2", "n", "q" ) );
        
        shown = pager.run( create_document( 10, "left" ), create_document( 10, "right" ), interactive=True );
        
        assert shown == 4;
        text = console.export_text();
        assert text.count( PROMPT ) == 3;
        assert "left line 5" not in text;
    
    def test_invalid_key_retries( self, console ):
        pager = ComparePager( console=console, read_key=scripted_keys( "x", "0", "1", "q" ) );
        
        shown = pager.run( create_document( 3, "a" ), create_document( 3, "b" ), interactive=True );
        
        assert shown == 2;
        assert console.export_text().count( "invalid key input, retry" ) == 2;
    
    def test_end_of_input_quits( self, console ):
        pager = ComparePager( console=console, read_key=scripted_keys() );
        assert pager.run( create_document( 3, "a" ), create_document( 3, "b" ), interactive=True ) == 1;
    
    def test_interactive_runs_out_of_pairs( self, console ):
        pager = ComparePager( console=console, read_key=scripted_keys( "9" ) );
        assert pager.run( create_document( 3, "a" ), create_document( 3, "b" ), interactive=True ) == 3;
    
    def test_text_is_not_markup( self, console ):
        left = SrtDocument( [ SubtitleEntry( 1, TimeRange( 0, 1000 ), "[bold]music[/bold]" ) ] );
        right = SrtDocument( [ SubtitleEntry( 1, TimeRange( 0, 1000 ), "[MUSIC PLAYING]" ) ] );
        
        ComparePager( console=console ).run( left, right );
        
        text = console.export_text();
        assert "[bold]music[/bold]" in text;
        assert "[MUSIC PLAYING]" in text;
        assert "00:00:00,000 --> 00:00:01,000" in text;
