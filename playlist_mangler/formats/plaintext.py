"""
Plain file listings.

The barest playlist dialect is the output of `ls -1`: one reference per
line, nothing else. It is also the body of classic (non-extended) M3U, and
a reasonable fallback for files of unknown type.

Grammar:
    document  := (reference? NEWLINE)*
    reference := any text without line breaks; surrounding whitespace and
                 blank lines are ignored

There is no metadata in the file. Every entry's title is its base filename
and the playlist title is the playlist's base filename.
"""

from dataclasses import dataclass, replace
from typing import Hashable, Sequence

from playlist_mangler.core.exceptions import FormatError
from playlist_mangler.core.guard import MetadataSlot
from playlist_mangler.formats.base import PlaylistFormat
from playlist_mangler.playlist.capabilities import (
    Entry,
    PlaylistInfo,
    entry_info,
    entry_title,
    fallback_title,
)


@dataclass(frozen=True, eq=False)
class PlainMetadata:
    """
    Derived metadata for a plain entry.

    Holds a relation to its owning entry (position and reference), never the
    entry object itself. Two values are equal only when they describe the
    same owner: equal info text and the same owner position.

    Attributes:
        owner_num: Position of the owning entry.
        owner_ref: Reference of the owning entry.
    """
    owner_num: int
    owner_ref: str

    def title(self) -> str:
        return fallback_title(self.owner_ref)

    def length(self) -> int | None:
        return None

    def info(self) -> str:
        return ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainMetadata):
            return NotImplemented
        return self.info() == other.info() and self.owner_num == other.owner_num

    def __hash__(self) -> int:
        return hash((self.info(), self.owner_num))


class PlainEntry:
    """
    One line of a plain listing.

    Attributes:
        num: Position the entry was read at (0-based).
        fname: Reference as written in the file.
    """

    def __init__(self, num: int, fname: str, metadata: PlainMetadata | None = None) -> None:
        self.num = num
        self.fname = fname
        self._metadata: MetadataSlot[PlainMetadata] = MetadataSlot(metadata)

    def entry_num(self) -> int:
        return self.num

    def filename(self) -> str:
        return self.fname

    def metadata(self) -> PlainMetadata | None:
        return self._metadata.get()

    def write_metadata(self, metadata: PlainMetadata) -> None:
        self._metadata.set(metadata)

    def title(self) -> str:
        return entry_title(self)

    def copy(self) -> "PlainEntry":
        return PlainEntry(self.num, self.fname, self.metadata())

    def dedup_key(self) -> Hashable:
        return (self.fname, entry_info(self))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainEntry):
            return NotImplemented
        return self.dedup_key() == other.dedup_key()

    # Mutable (metadata can be rewritten), so not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PlainEntry({self.num}, {self.fname!r})"


@dataclass(frozen=True)
class PlainInfo:
    """
    Playlist info of a plain listing: only where the file lives.

    Attributes:
        reference: Filename or URI of the playlist.
    """
    reference: str

    def title(self) -> str | None:
        return fallback_title(self.reference) or None

    def filename(self) -> str:
        return self.reference

    def with_filename(self, new_name: str) -> "PlainInfo":
        return replace(self, reference=new_name)


class PlainTextFormat(PlaylistFormat[PlainInfo, PlainMetadata, PlainEntry]):
    """Format provider for plain file listings."""

    name = "plain"
    extensions = (".txt", ".lst")

    def parse(self, text: str, reference: str = "") -> tuple[PlainInfo, list[PlainEntry]]:
        entries: list[PlainEntry] = []
        for raw_line in text.lstrip("\ufeff").splitlines():
            line = raw_line.strip()
            if not line:
                continue
            entries.append(PlainEntry(len(entries), line))
        return self.parse_playlist_info(text, reference), entries

    def serialize(self, info: PlainInfo, entries: Sequence[PlainEntry]) -> list[str]:
        lines: list[str] = []
        for entry in entries:
            fname = self.check_line(entry.filename(), "Reference")
            if fname != fname.strip() or not fname:
                raise FormatError(
                    f"{self.name} references cannot be empty or padded with whitespace",
                    line=fname
                )
            lines.append(fname)
        return lines

    def parse_entry(self, text: str, index: int = 0) -> PlainEntry:
        line = text.strip()
        if not line:
            raise FormatError("Empty reference", line=text)
        self.check_line(line, "Reference")
        return PlainEntry(index, line)

    def parse_entry_metadata(self, text: str, index: int = 0) -> PlainMetadata:
        """
        Derive metadata from a reference line.

        Plain listings carry no metadata; the result only knows its owner
        (index and reference) so that title() can fall back to the base
        filename.
        """
        entry = self.parse_entry(text, index)
        return PlainMetadata(owner_num=entry.num, owner_ref=entry.fname)

    def parse_playlist_info(self, text: str, reference: str = "") -> PlainInfo:
        return PlainInfo(reference=reference)

    def rename_info(self, info: PlainInfo, new_name: str) -> PlainInfo:
        return info.with_filename(new_name)

    def adopt_entry(self, entry: Entry, index: int) -> PlainEntry:
        # Nothing but the reference survives in a plain listing.
        return PlainEntry(index, entry.filename())

    def adopt_info(self, info: PlaylistInfo) -> PlainInfo:
        return PlainInfo(reference=info.filename())
