"""
Side-by-side comparison of two subtitle documents in the terminal.
"""
from typing import Callable, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .srt import SrtDocument, SubtitleEntry


PROMPT = "> n(next) q(quit) 1~9(show next 1~9)";
PAGE_KEYS = { str( n ): n for n in range( 1, 10 ) };
PAGE_KEYS["n"] = 1;


class ComparePager:
    """
    Prints entry pairs from two documents, one pair per table.

    Entries are paired by position; output stops at the end of the shorter
    document. In interactive mode one pair is shown at a time and the user
    picks how many to show next.
    """

    def __init__( self, console: Optional[Console] = None, read_key: Callable[[], str] = input ):
        self.console = console or Console();
        self.read_key = read_key;

    def render_pair( self, left: SubtitleEntry, right: SubtitleEntry ) -> Table:
        table = Table( show_header=False, show_lines=True );
        table.add_column();
        table.add_column();
        for left_row, right_row in zip( left.to_rows(), right.to_rows() ):
            table.add_row( Text( left_row ), Text( right_row ) );
        return table;

    def run( self, left: SrtDocument, right: SrtDocument, interactive: bool = False ) -> int:
        """
        Show the pairs.

        Returns:
            Number of pairs printed
        """
        pairs = zip( left, right );
        shown = 0;
        pending = 1;

        while True:
            while pending > 0:
                pair = next( pairs, None );
                if pair is None:
                    return shown;
                self.console.print( self.render_pair( *pair ) );
                shown += 1;
                if interactive:
                    pending -= 1;

            self.console.print( PROMPT, markup=False, highlight=False );
            try:
                key = self.read_key().strip();
            except EOFError:
                return shown;

            if key == "q":
                return shown;
            if key in PAGE_KEYS:
                pending = PAGE_KEYS[key];
            else:
                self.console.print( "invalid key input, retry" );
