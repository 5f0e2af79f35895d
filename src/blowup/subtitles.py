"""
Subtitle file operations behind the ``sub`` commands: shifting files,
batch shifting, and loading pairs of files for comparison.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .common import read_files_to_string, same_path_with
from .errors import BlowupError
from .logging import get_logger
from .srt import OverlapMode, SrtDocument


SHIFTED_SUFFIX = "mod";


@dataclass
class ShiftResult:
    """Outcome of shifting one file."""

    source: Path;
    output: Optional[Path] = None;
    error: Optional[BlowupError] = None;

    @property
    def ok( self ) -> bool:
        return self.error is None;


class SubtitleProcessor:
    """
    File-level subtitle operations.

    Shifted output always goes to a new ``<stem>_mod.srt`` file next to the
    source, which is never modified.
    """

    def __init__( self ):
        self.logger = get_logger();

    def shift_file( self, subtitle_file: Path, delta_ms: int, mode: OverlapMode ) -> Path:
        """
        Shift every timestamp of a file by ``delta_ms`` and repair overlaps.

        On any error the adjusted document is discarded and nothing is
        written.

        Returns:
            Path of the written ``_mod`` file

        Raises:
            SrtError: parse, adjustment, repair or write failure
        """
        subtitle_file = Path( subtitle_file );
        output_file = same_path_with( subtitle_file, SHIFTED_SUFFIX, "_" );

        document = SrtDocument.read_file( subtitle_file );
        overlapping = document.check_overlap();
        document.adjust_timestamps( delta_ms, mode );
        document.write_file( output_file );

        self.logger.info(
            f"Shifted {len( document )} entries of {subtitle_file.name} by {delta_ms}ms -> {output_file.name}"
        );
        if overlapping:
            self.logger.debug( f"{subtitle_file.name} had overlapping entries before the shift" );
        return output_file;

    def _shift_one( self, subtitle_file: Path, delta_ms: int, mode: OverlapMode ) -> ShiftResult:
        try:
            return ShiftResult( subtitle_file, output=self.shift_file( subtitle_file, delta_ms, mode ) );
        except BlowupError as e:
            self.logger.error( f"Failed to shift {subtitle_file}: {e}" );
            return ShiftResult( subtitle_file, error=e );

    def shift_files( self, subtitle_files: Sequence[Path], delta_ms: int, mode: OverlapMode, jobs: int = 1 ) -> List[ShiftResult]:
        """
        Shift several independent files, optionally on a thread pool.

        A failure on one file does not stop the others.

        Returns:
            One ShiftResult per input, in input order
        """
        files = [ Path( f ) for f in subtitle_files ];
        if jobs <= 1 or len( files ) <= 1:
            return [ self._shift_one( f, delta_ms, mode ) for f in files ];

        with ThreadPoolExecutor( max_workers=jobs ) as executor:
            futures = [ executor.submit( self._shift_one, f, delta_ms, mode ) for f in files ];
            return [ future.result() for future in futures ];

    def load_pair( self, first: Path, second: Path ) -> Tuple[SrtDocument, SrtDocument]:
        """
        Read and parse two files for side-by-side comparison.

        Raises:
            InputFileError: a file is missing or too large
            SrtError: a file does not parse
        """
        first_text, second_text = read_files_to_string( [ first, second ] );
        return SrtDocument.from_string( first_text ), SrtDocument.from_string( second_text );
