"""
Extended M3U (EXTM3U).

There is no official specification; this follows what is found in the
wild.

Grammar:
    document  := "#EXTM3U" NEWLINE line*
    line      := extinf | playlist | comment | reference | blank
    extinf    := "#EXTINF:" integer "," title
    playlist  := "#PLAYLIST:" title
    comment   := "#" any text (ignored)
    reference := any line not starting with "#"

Every line starting with '#EXTINF' must match the extinf rule; a
malformed one is an error, never a comment. An '#EXTINF' line describes
the next reference line. Blank lines and comments may sit between them,
but another '#EXTINF' or the end of the document may not. A negative
duration (customarily -1) means "unknown".

Example:
    #EXTM3U
    #PLAYLIST:Road Trip
    #EXTINF:215,Artist - Song
    music/song.mp3
"""

import re
from dataclasses import dataclass, replace
from typing import Hashable, Sequence

from playlist_mangler.core.exceptions import FormatError
from playlist_mangler.core.guard import MetadataSlot
from playlist_mangler.formats.base import PlaylistFormat
from playlist_mangler.playlist.capabilities import (
    Entry,
    EntryMetadata,
    PlaylistInfo,
    entry_info,
    entry_title,
    fallback_title,
)
from playlist_mangler.utils import format_duration


HEADER = "#EXTM3U"
EXTINF_TAG = "#EXTINF"
EXTINF_PREFIX = f"{EXTINF_TAG}:"
PLAYLIST_PREFIX = "#PLAYLIST:"

_EXTINF_RE = re.compile(r"^#EXTINF:\s*(?P<duration>[-+]?\d+)\s*,(?P<title>.*)$")


@dataclass(frozen=True)
class ExtInfMetadata:
    """
    Metadata from an '#EXTINF' line.

    Attributes:
        duration: Length in whole seconds, None when unknown.
        explicit_title: Title text after the comma, "" if empty.
        owner: Reference of the entry the line describes. Used only for the
               fallback title; set when the metadata is attached.
    """
    duration: int | None = None
    explicit_title: str = ""
    owner: str = ""

    def title(self) -> str:
        return self.explicit_title or fallback_title(self.owner)

    def length(self) -> int | None:
        return self.duration

    def info(self) -> str:
        """Title plus length, e.g. "Artist - Song (3:35)"."""
        if self.duration is None:
            return self.title()
        return f"{self.title()} ({format_duration(self.duration)})"

    def bound_to(self, reference: str) -> "ExtInfMetadata":
        return replace(self, owner=reference)


class ExtM3UEntry:
    """
    One reference of an extended M3U document, with its '#EXTINF' data.

    Attributes:
        num: Position the entry was read at (0-based).
        fname: Reference as written in the file.
    """

    def __init__(self, num: int, fname: str, metadata: ExtInfMetadata | None = None) -> None:
        self.num = num
        self.fname = fname
        self._metadata: MetadataSlot[ExtInfMetadata] = MetadataSlot(self._bind(metadata))

    def _bind(self, metadata: ExtInfMetadata | None) -> ExtInfMetadata | None:
        if isinstance(metadata, ExtInfMetadata) and metadata.owner != self.fname:
            return metadata.bound_to(self.fname)
        return metadata

    def entry_num(self) -> int:
        return self.num

    def filename(self) -> str:
        return self.fname

    def metadata(self) -> ExtInfMetadata | None:
        return self._metadata.get()

    def write_metadata(self, metadata: ExtInfMetadata) -> None:
        self._metadata.set(self._bind(metadata))

    def title(self) -> str:
        return entry_title(self)

    def copy(self) -> "ExtM3UEntry":
        return ExtM3UEntry(self.num, self.fname, self.metadata())

    def dedup_key(self) -> Hashable:
        return (self.fname, entry_info(self))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtM3UEntry):
            return NotImplemented
        return self.dedup_key() == other.dedup_key()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ExtM3UEntry({self.num}, {self.fname!r}, {self.metadata()!r})"


@dataclass(frozen=True)
class ExtM3UInfo:
    """
    Playlist info of an extended M3U document.

    Attributes:
        reference: Filename or URI of the playlist.
        explicit_title: Title from '#PLAYLIST:', if present.
    """
    reference: str
    explicit_title: str | None = None

    def title(self) -> str | None:
        return self.explicit_title or fallback_title(self.reference) or None

    def filename(self) -> str:
        return self.reference

    def with_filename(self, new_name: str) -> "ExtM3UInfo":
        return replace(self, reference=new_name)


def _explicit_title(metadata_title: str | None, reference: str) -> str:
    """Drop a title that is only the fallback for reference."""
    if not metadata_title or metadata_title == fallback_title(reference):
        return ""
    return metadata_title


class ExtM3UFormat(PlaylistFormat[ExtM3UInfo, ExtInfMetadata, ExtM3UEntry]):
    """Format provider for extended M3U / M3U8."""

    name = "extm3u"
    # Picked by its "#EXTM3U" header, never by suffix alone.
    extensions = ()

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse(self, text: str, reference: str = "") -> tuple[ExtM3UInfo, list[ExtM3UEntry]]:
        lines = text.lstrip("\ufeff").splitlines()
        if not lines or lines[0].strip() != HEADER:
            raise FormatError(
                f"Extended M3U must start with {HEADER}",
                line_number=1,
                line=lines[0] if lines else ""
            )

        title: str | None = None
        entries: list[ExtM3UEntry] = []
        # (metadata, line_number, line) of an EXTINF waiting for its reference
        pending: tuple[ExtInfMetadata, int, str] | None = None

        for line_number, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if not line:
                continue

            if line.startswith(EXTINF_TAG):
                if pending is not None:
                    raise FormatError(
                        "EXTINF line is not followed by a reference line",
                        line_number=pending[1],
                        line=pending[2]
                    )
                pending = (self._parse_extinf(line, line_number), line_number, line)
            elif line.startswith(PLAYLIST_PREFIX):
                title = line[len(PLAYLIST_PREFIX):].strip() or None
            elif line.startswith("#"):
                continue
            else:
                metadata = pending[0] if pending is not None else None
                entries.append(ExtM3UEntry(len(entries), line, metadata))
                pending = None

        if pending is not None:
            raise FormatError(
                "EXTINF line is not followed by a reference line",
                line_number=pending[1],
                line=pending[2]
            )

        return ExtM3UInfo(reference=reference, explicit_title=title), entries

    def _parse_extinf(self, line: str, line_number: int | None = None) -> ExtInfMetadata:
        match = _EXTINF_RE.match(line.strip())
        if match is None:
            raise FormatError(
                "EXTINF needs an integer duration followed by a comma",
                line_number=line_number,
                line=line
            )
        duration = int(match.group("duration"))
        return ExtInfMetadata(
            duration=duration if duration >= 0 else None,
            explicit_title=match.group("title").strip()
        )

    def parse_entry(self, text: str, index: int = 0) -> ExtM3UEntry:
        """
        Parse one entry: an optional '#EXTINF' line and a reference line.

        Raises:
            FormatError: If the EXTINF line is malformed, the reference is
                         missing, or there is more than one reference.
        """
        metadata: ExtInfMetadata | None = None
        reference: str | None = None
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            if line.startswith(EXTINF_TAG):
                if metadata is not None or reference is not None:
                    raise FormatError("Unexpected EXTINF line in entry", line=line)
                metadata = self._parse_extinf(line)
            elif line.startswith("#"):
                continue
            elif reference is not None:
                raise FormatError("Entry has more than one reference line", line=line)
            else:
                reference = line

        if reference is None:
            raise FormatError("Entry has no reference line", line=text)
        return ExtM3UEntry(index, reference, metadata)

    def parse_entry_metadata(self, text: str) -> ExtInfMetadata:
        return self._parse_extinf(text.strip())

    def parse_playlist_info(self, text: str, reference: str = "") -> ExtM3UInfo:
        """
        Parse the header block of a document.

        Reads the '#EXTM3U' header and any '#PLAYLIST:' directive. Lines
        after the header are otherwise ignored.
        """
        lines = text.lstrip("\ufeff").splitlines()
        if not lines or lines[0].strip() != HEADER:
            raise FormatError(
                f"Extended M3U must start with {HEADER}",
                line_number=1,
                line=lines[0] if lines else ""
            )
        title = None
        for line in lines[1:]:
            line = line.strip()
            if line.startswith(PLAYLIST_PREFIX):
                title = line[len(PLAYLIST_PREFIX):].strip() or None
        return ExtM3UInfo(reference=reference, explicit_title=title)

    # =========================================================================
    # Serialization
    # =========================================================================

    def format_extinf(self, metadata: EntryMetadata, reference: str) -> str:
        """Render metadata as an '#EXTINF' line."""
        length = metadata.length()
        duration = length if length is not None and length >= 0 else -1
        if isinstance(metadata, ExtInfMetadata):
            title = metadata.explicit_title
        else:
            title = _explicit_title(metadata.title(), reference)
        self.check_line(title, "EXTINF title")
        return f"{EXTINF_PREFIX}{duration},{title}"

    def serialize(self, info: ExtM3UInfo, entries: Sequence[ExtM3UEntry]) -> list[str]:
        lines = [HEADER]
        if info.explicit_title:
            lines.append(PLAYLIST_PREFIX + self.check_line(info.explicit_title, "Playlist title"))

        for entry in entries:
            fname = self.check_line(entry.filename(), "Reference")
            if not fname or fname != fname.strip() or fname.startswith("#"):
                raise FormatError(
                    "Reference cannot be empty, padded with whitespace or start with '#'",
                    line=fname
                )
            metadata = entry.metadata()
            if metadata is not None:
                lines.append(self.format_extinf(metadata, fname))
            lines.append(fname)
        return lines

    # =========================================================================
    # Renaming / conversion
    # =========================================================================

    def rename_info(self, info: ExtM3UInfo, new_name: str) -> ExtM3UInfo:
        return info.with_filename(new_name)

    def adopt_entry(self, entry: Entry, index: int) -> ExtM3UEntry:
        if isinstance(entry, ExtM3UEntry):
            adopted = entry.copy()
            adopted.num = index
            return adopted

        fname = entry.filename()
        metadata = entry.metadata()
        if metadata is None:
            return ExtM3UEntry(index, fname)

        explicit = _explicit_title(metadata.title(), fname)
        length = metadata.length()
        if not explicit and length is None:
            # Nothing an EXTINF line could add.
            return ExtM3UEntry(index, fname)
        return ExtM3UEntry(index, fname, ExtInfMetadata(length, explicit, fname))

    def adopt_info(self, info: PlaylistInfo) -> ExtM3UInfo:
        explicit = getattr(info, "explicit_title", None)
        if explicit is None:
            explicit = _explicit_title(info.title(), info.filename()) or None
        return ExtM3UInfo(reference=info.filename(), explicit_title=explicit)
