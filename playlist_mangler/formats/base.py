"""
Format provider base class.

A format provider is the only place where a dialect's grammar lives. It
turns text into a playlist-info value and entries, and entries back into
text. Everything else (reading files and URIs, atomic saves, binding the
result to a guarded Playlist) is shared here.

Implementing A Dialect:
    1. Write three small types satisfying EntryMetadata, Entry and
       PlaylistInfo (see playlist_mangler.playlist.capabilities).
    2. Subclass PlaylistFormat and implement the abstract methods.
    3. Register the class in playlist_mangler.formats.FORMATS.

Usage:
    fmt = ExtM3UFormat(config)
    playlist = fmt.from_path("mix.m3u8")
    entry = fmt.parse_entry("#EXTINF:215,Artist - Song\\nmusic/song.mp3")
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, Iterable, Sequence, TypeVar

from playlist_mangler.core.config import Config
from playlist_mangler.core.exceptions import FormatError
from playlist_mangler.core.logger import get_logger
from playlist_mangler.playlist.capabilities import Entry, EntryMetadata, PlaylistInfo
from playlist_mangler.playlist.container import Playlist
from playlist_mangler.utils import atomic_write_text, read_text_resource

logger = get_logger(__name__)


P = TypeVar("P", bound=PlaylistInfo)
M = TypeVar("M", bound=EntryMetadata)
E = TypeVar("E", bound=Entry)


class PlaylistFormat(ABC, Generic[P, M, E]):
    """
    Reads and writes one playlist dialect.

    Attributes:
        name: Short registry name of the dialect (e.g. "extm3u").
        extensions: File suffixes that select this dialect when the text
            itself does not name one (see formats.detect_format).
        config: Library configuration (encoding, newline, guard policy).
    """

    name: str = ""
    extensions: tuple[str, ...] = ()

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config.default()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    # =========================================================================
    # Grammar (implemented per dialect)
    # =========================================================================

    @abstractmethod
    def parse(self, text: str, reference: str = "") -> tuple[P, list[E]]:
        """
        Parse a whole document.

        Args:
            text: The decoded playlist document.
            reference: Filename or URI the document came from.

        Returns:
            The playlist info and the entries in document order.

        Raises:
            FormatError: If the text violates the dialect's grammar.
        """

    @abstractmethod
    def serialize(self, info: P, entries: Sequence[E]) -> list[str]:
        """
        Render playlist info and entries as document lines (no terminators).

        Raises:
            FormatError: If a value cannot be represented in this dialect.
        """

    @abstractmethod
    def parse_entry(self, text: str, index: int = 0) -> E:
        """Parse one logical entry. index is used as the inferred position."""

    @abstractmethod
    def parse_entry_metadata(self, text: str) -> M:
        """Parse the metadata part of one entry."""

    @abstractmethod
    def parse_playlist_info(self, text: str, reference: str = "") -> P:
        """Parse the playlist-level header of a document."""

    @abstractmethod
    def rename_info(self, info: P, new_name: str) -> P:
        """Return info pointing at new_name, everything else unchanged."""

    @abstractmethod
    def adopt_entry(self, entry: Entry, index: int) -> E:
        """Re-express an entry of any dialect as an entry of this one."""

    @abstractmethod
    def adopt_info(self, info: PlaylistInfo) -> P:
        """Re-express playlist info of any dialect as info of this one."""

    # =========================================================================
    # Construction
    # =========================================================================

    def from_parts(self, info: P, entries: Iterable[E]) -> Playlist[P, M, E]:
        """Bind info and entries into a playlist, bypassing parsing."""
        return Playlist.from_parts(
            info,
            entries,
            format=self,
            guard=self.config.guard.make_guard()
        )

    def from_text(self, text: str, reference: str = "") -> Playlist[P, M, E]:
        """
        Parse a document that is already in memory.

        Raises:
            FormatError: If the text violates the dialect's grammar.
        """
        info, entries = self.parse(text, reference)
        logger.debug(f"Parsed {len(entries)} entries from {reference or '<text>'} as {self.name}")
        return self.from_parts(info, entries)

    def from_uri(self, uri: str) -> Playlist[P, M, E]:
        """
        Read and parse a playlist from a path, file:// URI or http(s) URL.

        Raises:
            ResourceError: If the resource cannot be read.
            FormatError: If the content violates the dialect's grammar.
        """
        text = read_text_resource(str(uri), self.config.io)
        return self.from_text(text, str(uri))

    def from_path(self, path: str | Path) -> Playlist[P, M, E]:
        """
        Read and parse a playlist file.

        Raises:
            ResourceError: If the file cannot be read.
            FormatError: If the content violates the dialect's grammar.
        """
        return self.from_uri(str(Path(path)))

    # =========================================================================
    # Output
    # =========================================================================

    def render(self, info: P, entries: Sequence[E]) -> str:
        """Serialize to a complete document using the configured newline."""
        lines = self.serialize(info, entries)
        if not lines:
            return ""
        newline = self.config.io.newline
        return newline.join(lines) + newline

    def write(self, info: P, entries: Sequence[E], path: str | Path) -> Path:
        """
        Serialize and atomically write a document.

        The text is fully rendered before the destination is touched, so a
        FormatError leaves the file alone, and the write itself goes through
        a temporary file.

        Raises:
            FormatError: If a value cannot be represented in this dialect.
            ResourceError: If writing fails.
        """
        text = self.render(info, entries)
        written = atomic_write_text(Path(path), text, self.config.io.encoding)
        logger.debug(f"Saved {len(entries)} entries to {written} as {self.name}")
        return written

    # =========================================================================
    # Shared grammar helpers
    # =========================================================================

    @staticmethod
    def check_line(value: str, what: str) -> str:
        """
        Ensure a value fits on a single line.

        Raises:
            FormatError: If value contains a line break.
        """
        if "\n" in value or "\r" in value:
            raise FormatError(f"{what} cannot contain a line break", line=value)
        return value
