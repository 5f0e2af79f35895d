"""
SubRip (.srt) document model: parsing, serialization, overlap repair and
bulk timestamp adjustment.
"""
import io
import logging
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from .errors import InvalidTimestamp, IoError, OverlapError, ParseTextError
from .timing import TimeRange


# Line separator used inside entry text and between serialized lines
NEWLINE = os.linesep;

INDEX_RE = re.compile( r"\d+", re.ASCII );

logger = logging.getLogger( __name__ );


class OverlapMode( Enum ):
    """
    How to resolve two consecutive entries whose ranges overlap.

    KEEP_FIRST moves the later entry's begin to the earlier entry's end.
    KEEP_SECOND moves the earlier entry's end to the later entry's begin.
    """

    KEEP_FIRST = "1";
    KEEP_SECOND = "2";


@dataclass
class SubtitleEntry:
    """A single cue: index, display range and text."""

    index: int;
    time_range: TimeRange;
    text: str = "";

    @property
    def begin( self ) -> int:
        return self.time_range.begin;

    @property
    def end( self ) -> int:
        return self.time_range.end;

    def to_rows( self ) -> List[str]:
        """Index, timestamp line and text, as shown side by side in the pager."""
        return [ str( self.index ), str( self.time_range ), self.text ];

    def __str__( self ):
        return f"{self.index}{NEWLINE}{self.time_range}{NEWLINE}{self.text}";


def _iter_lines( text: str ) -> Iterator[str]:
    # only \n ends a line; a single trailing \r is dropped
    lines = text.split( "\n" );
    if lines[-1] == "":
        lines.pop();
    for line in lines:
        yield line[:-1] if line.endswith( "\r" ) else line;


class SrtDocument( Sequence ):
    """
    Ordered list of subtitle entries in file order.

    The document behaves as a read-only sequence of SubtitleEntry objects;
    the backing list is never handed out. Entries are mutated in place only
    by adjust_timestamps() and fix_overlap(). If either raises, the
    document is left in an unspecified state and must be discarded.
    """

    def __init__( self, entries: Iterable[SubtitleEntry] = () ):
        self._entries: List[SubtitleEntry] = list( entries );

    def __getitem__( self, position ):
        if isinstance( position, slice ):
            return tuple( self._entries[position] );
        return self._entries[position];

    def __len__( self ):
        return len( self._entries );

    def __eq__( self, other ):
        if not isinstance( other, SrtDocument ):
            return NotImplemented;
        return self._entries == other._entries;

    def __repr__( self ):
        return f"SrtDocument(entries={len( self._entries )})";

    # --- reading ---

    @classmethod
    def read( cls, stream ) -> "SrtDocument":
        """
        Parse a whole SRT stream in one pass.

        Accepts a binary stream (decoded as UTF-8, a leading BOM is ignored)
        or a text stream. Blank lines between entries are skipped and the
        last entry does not need a trailing blank line.

        Raises:
            IoError: the stream could not be read or decoded
            ParseTextError: bad index line or missing timestamp line
            ParseTimeError: bad timestamp line
        """
        try:
            raw = stream.read();
        except ( OSError, UnicodeDecodeError ) as e:
            raise IoError( f"IO error: {e}" ) from e;

        if isinstance( raw, bytes ):
            try:
                raw = raw.decode( "utf-8-sig" );
            except UnicodeDecodeError as e:
                raise IoError( f"IO error: stream is not valid UTF-8 ({e})" ) from e;
        elif raw.startswith( "\ufeff" ):
            raw = raw[1:];

        lines = _iter_lines( raw );
        entries = [];

        for line in lines:
            index_line = line.strip();
            if not index_line:
                continue;
            if not INDEX_RE.fullmatch( index_line ):
                raise ParseTextError( index_line );
            index = int( index_line );

            timestamp_line = next( lines, None );
            if timestamp_line is None:
                raise ParseTextError( "missing timestamp line" );
            time_range = TimeRange.parse( timestamp_line );

            text_lines = [];
            for text_line in lines:
                if not text_line.strip():
                    break;
                text_lines.append( text_line );

            entries.append( SubtitleEntry( index, time_range, NEWLINE.join( text_lines ) ) );

        logger.debug( f"Parsed {len( entries )} subtitle entries" );
        return cls( entries );

    @classmethod
    def from_string( cls, text: str ) -> "SrtDocument":
        return cls.read( io.StringIO( text ) );

    @classmethod
    def from_bytes( cls, data: bytes ) -> "SrtDocument":
        return cls.read( io.BytesIO( data ) );

    @classmethod
    def read_file( cls, path: Path ) -> "SrtDocument":
        try:
            with open( path, "rb" ) as f:
                return cls.read( f );
        except OSError as e:
            raise IoError( f"IO error: {e}" ) from e;

    # --- writing ---

    def write( self, stream ):
        """
        Serialize every entry to ``stream`` and flush it.

        Each entry is written as index line, timestamp line, text and one
        blank separator line. Binary streams receive UTF-8 bytes.

        Raises:
            IoError: the stream could not be written or flushed
        """
        is_text = isinstance( stream, io.TextIOBase );
        try:
            for entry in self._entries:
                block = f"{entry.index}{NEWLINE}{entry.time_range}{NEWLINE}";
                if entry.text:
                    block += f"{entry.text}{NEWLINE}";
                block += NEWLINE;
                stream.write( block if is_text else block.encode( "utf-8" ) );
            stream.flush();
        except OSError as e:
            raise IoError( f"IO error: {e}" ) from e;

    def to_string( self ) -> str:
        buffer = io.StringIO( newline="" );
        self.write( buffer );
        return buffer.getvalue();

    def to_bytes( self ) -> bytes:
        buffer = io.BytesIO();
        self.write( buffer );
        return buffer.getvalue();

    def write_file( self, path: Path ):
        try:
            with open( path, "wb" ) as f:
                self.write( f );
        except OSError as e:
            raise IoError( f"IO error: {e}" ) from e;

    # --- timing ---

    def check_overlap( self ) -> bool:
        """
        True if any entry begins before the entry right before it ends.

        Only adjacent pairs are compared, in file order.
        """
        for previous, current in zip( self._entries, self._entries[1:] ):
            if current.time_range.begin < previous.time_range.end:
                return True;
        return False;

    def _plan_overlap_fix( self, mode: OverlapMode ) -> List[Tuple[int, int, bool]]:
        # (position, new value, True if the value is a new begin)
        plan = [];

        for i in range( 1, len( self._entries ) ):
            previous = self._entries[i - 1].time_range;
            current = self._entries[i].time_range;
            if current.begin >= previous.end:
                continue;

            if mode is OverlapMode.KEEP_FIRST:
                new_begin = previous.end;
                if new_begin > current.end:
                    raise OverlapError(
                        replace( previous ), replace( current ),
                        "fixing current entry would result in negative duration"
                    );
                plan.append( ( i, new_begin, True ) );
            else:
                new_end = current.begin;
                if new_end < previous.begin:
                    raise OverlapError(
                        replace( previous ), replace( current ),
                        "fixing previous entry would result in negative duration"
                    );
                plan.append( ( i - 1, new_end, False ) );

        return plan;

    def fix_overlap( self, mode: OverlapMode ):
        """
        Remove overlaps between consecutive entries.

        Every overlapping pair is planned against the values the document
        had before this call, so a chain of three overlapping entries is not
        cascaded. Nothing is changed unless the whole plan is valid.
        Zero-length results are allowed.

        Raises:
            OverlapError: a correction would give an entry negative duration
        """
        mode = OverlapMode( mode );
        if not self.check_overlap():
            return;

        plan = self._plan_overlap_fix( mode );

        for position, value, is_begin in plan:
            time_range = self._entries[position].time_range;
            if is_begin:
                time_range.set_begin( value );
            else:
                time_range.set_end( value );

        logger.debug( f"Fixed {len( plan )} overlapping entries ({mode.name})" );

    def adjust_timestamps( self, delta_ms: int, mode: OverlapMode ):
        """
        Shift every entry by ``delta_ms`` milliseconds, then repair overlaps.

        With a negative delta, an entry that would start before zero is left
        untouched rather than clamped. The check against the 100 hour
        ceiling happens right after each entry is shifted.

        Raises:
            InvalidTimestamp: an entry reached the 100 hour ceiling. Entries
                shifted before it stay shifted.
            OverlapError: see fix_overlap()
        """
        mode = OverlapMode( mode );
        skipped = 0;

        for entry in self._entries:
            time_range = entry.time_range;
            if delta_ms >= 0 or time_range.begin >= -delta_ms:
                time_range.shift( delta_ms );
            else:
                skipped += 1;

            if not time_range.is_valid():
                raise InvalidTimestamp( replace( time_range ) );

        if skipped:
            logger.warning( f"{skipped} entries start before {-delta_ms}ms and were not shifted" );

        self.fix_overlap( mode );
