"""
Capability contracts shared by every playlist dialect.

A dialect takes part in the generic Playlist container by providing three
small types that satisfy these protocols. The types do not share a base
class; any object with the right methods qualifies.

    EntryMetadata   per-entry description (title, length, info text)
    Entry           per-entry identity (position, reference, metadata)
    PlaylistInfo    per-playlist description (title, reference)

Equality:
    Unless a dialect says otherwise, two entries are equal when they have
    the same reference and the same metadata info text (an entry without
    metadata has empty info text). Entries that can express their equality
    as a hashable key implement dedup_key(); see KeyedEntry.

Fallback title:
    When no explicit title exists, the title is the final path segment of
    the owning entry's reference ("music/song.mp3" -> "song.mp3").
"""

from typing import Hashable, Protocol, TypeVar, runtime_checkable

from playlist_mangler.utils import base_name


@runtime_checkable
class EntryMetadata(Protocol):
    """
    Minimal descriptive data for one playlist entry.

    Values are immutable; an entry's metadata is replaced wholesale through
    Entry.write_metadata(). None of these methods may raise: missing data is
    an empty string or None.
    """

    def title(self) -> str:
        """Explicit title, or the fallback title derived from the entry's reference."""
        ...

    def length(self) -> int | None:
        """Duration in whole seconds, if known."""
        ...

    def info(self) -> str:
        """Everything known about the entry as one human-readable line."""
        ...


M = TypeVar("M", bound=EntryMetadata)


@runtime_checkable
class Entry(Protocol[M]):
    """
    Identity and content of one playlist entry.

    An entry is owned by exactly one Playlist. copy() must return an
    independent entry (its own metadata storage) so that merged or
    converted playlists never share mutable state with their inputs.
    """

    def entry_num(self) -> int:
        """Ordinal declared by the format, or the index the entry was read at."""
        ...

    def filename(self) -> str:
        """Filename or URI the entry points to. May be relative."""
        ...

    def metadata(self) -> M | None:
        """Snapshot of the current metadata, if any."""
        ...

    def write_metadata(self, metadata: M) -> None:
        """Replace the stored metadata in one step."""
        ...

    def copy(self) -> "Entry[M]":
        ...


@runtime_checkable
class KeyedEntry(Entry[M], Protocol):
    """
    An entry whose equality is fully described by a hashable key.

    Entries that satisfy this let dedup_entries() group in near-linear time
    instead of comparing every pair.
    """

    def dedup_key(self) -> Hashable:
        ...


@runtime_checkable
class PlaylistInfo(Protocol):
    """
    Descriptive data for a whole playlist.

    There is no setter. Renaming goes through Playlist.rename() because the
    container also has to know where it will be saved.
    """

    def title(self) -> str | None:
        """Explicit title, or the playlist's base filename when absent."""
        ...

    def filename(self) -> str:
        """Filename or URI of the playlist itself. May be relative."""
        ...


def fallback_title(reference: str) -> str:
    """Title to use when none was parsed: the reference's final path segment."""
    return base_name(reference)


def entry_title(entry: Entry) -> str:
    """
    Display title of an entry.

    Uses the metadata title when present, the fallback title otherwise.
    """
    metadata = entry.metadata()
    if metadata is not None:
        title = metadata.title()
        if title:
            return title
    return fallback_title(entry.filename())


def entry_info(entry: Entry) -> str:
    """Metadata info text of an entry, or '' when it has no metadata."""
    metadata = entry.metadata()
    return metadata.info() if metadata is not None else ""


def default_entry_key(entry: Entry) -> tuple[str, str]:
    """Default equality key: (reference, metadata info text)."""
    return (entry.filename(), entry_info(entry))
