"""
Generic playlist container.

Playlist holds an ordered list of entries and one playlist-info value for
any dialect whose types satisfy the capability protocols. It never looks at
file grammar; parsing and serialization are delegated to the format
provider the playlist is bound to.

Shared Access:
    A Playlist may be reachable through several references at once. Every
    read or write of the entry list or the info value happens inside the
    playlist's ReadWriteGuard, so no holder ever sees a half-applied
    mutation. Entries returned by entries()/get_entry() are the live
    objects; their metadata can be swapped with write_metadata() at any
    time without touching the guard.

Usage:
    playlist = ExtM3UFormat().from_path("mix.m3u8")
    playlist.add_entry(entry)
    removed = playlist.dedup_entries()
    combined = playlist.merge(other)
    combined.save_to("combined.m3u8")
"""

import copy
from pathlib import Path
from typing import TYPE_CHECKING, Generic, Iterable, Iterator, TypeVar

from playlist_mangler.core.guard import ReadWriteGuard
from playlist_mangler.core.logger import get_logger
from playlist_mangler.playlist.capabilities import Entry, EntryMetadata, PlaylistInfo
from playlist_mangler.playlist.dedup import dedup_entries as _dedup_entries
from playlist_mangler.playlist.dedup import merge_entries

if TYPE_CHECKING:
    from playlist_mangler.formats.base import PlaylistFormat

logger = get_logger(__name__)


P = TypeVar("P", bound=PlaylistInfo)
M = TypeVar("M", bound=EntryMetadata)
E = TypeVar("E", bound=Entry)


class Playlist(Generic[P, M, E]):
    """
    Ordered, guarded collection of entries plus playlist info.

    Attributes:
        format: The format provider that produced this playlist and that
                save()/save_to() serialize with. May be None for playlists
                built by hand; such playlists cannot be saved.
    """

    def __init__(
        self,
        info: P,
        entries: Iterable[E] = (),
        format: "PlaylistFormat[P, M, E] | None" = None,
        guard: ReadWriteGuard | None = None
    ) -> None:
        self.format = format
        self._info = info
        self._entries: list[E] = list(entries)
        self._guard = guard if guard is not None else ReadWriteGuard()

    @classmethod
    def from_parts(
        cls,
        info: P,
        entries: Iterable[E],
        format: "PlaylistFormat[P, M, E] | None" = None,
        guard: ReadWriteGuard | None = None
    ) -> "Playlist[P, M, E]":
        """Create a playlist from an info value and entries, without parsing."""
        return cls(info, entries, format=format, guard=guard)

    def __repr__(self) -> str:
        format_name = getattr(self.format, "name", None)
        with self._guard.read("repr"):
            return (
                f"<Playlist {self._info.filename()!r} format={format_name} "
                f"entries={len(self._entries)}>"
            )

    def _sibling_guard(self) -> ReadWriteGuard:
        return ReadWriteGuard(blocking=self._guard.blocking, timeout=self._guard.timeout)

    # =========================================================================
    # Structural Operations
    # =========================================================================

    def add_entry(self, entry: E) -> None:
        """Append an entry to the end of the playlist."""
        with self._guard.write("add_entry"):
            self._entries.append(entry)

    def add_entry_at(self, entry: E, index: int) -> None:
        """
        Insert an entry at a position, shifting later entries right.

        Args:
            entry: The entry to insert.
            index: Position for the new entry, 0 <= index <= count().
                   index == count() appends.

        Raises:
            IndexError: If index is negative or greater than count().
        """
        with self._guard.write("add_entry_at"):
            if index < 0 or index > len(self._entries):
                raise IndexError(
                    f"insert index {index} out of range for playlist of {len(self._entries)} entries"
                )
            self._entries.insert(index, entry)

    def remove_entry(self, index: int) -> E:
        """
        Remove and return the entry at a position, shifting later entries left.

        Raises:
            IndexError: If index is negative or not less than count().
        """
        with self._guard.write("remove_entry"):
            if index < 0 or index >= len(self._entries):
                raise IndexError(
                    f"remove index {index} out of range for playlist of {len(self._entries)} entries"
                )
            return self._entries.pop(index)

    def count(self) -> int:
        """Number of entries currently in the playlist."""
        with self._guard.read("count"):
            return len(self._entries)

    def __len__(self) -> int:
        return self.count()

    def entries(self) -> list[E]:
        """Snapshot of the entry order. The list is new; the entries are live."""
        with self._guard.read("entries"):
            return list(self._entries)

    def __iter__(self) -> Iterator[E]:
        return iter(self.entries())

    def get_entry(self, index: int) -> E:
        """
        Return the live entry at a position.

        Raises:
            IndexError: If index is negative or not less than count().
        """
        with self._guard.read("get_entry"):
            if index < 0 or index >= len(self._entries):
                raise IndexError(
                    f"entry index {index} out of range for playlist of {len(self._entries)} entries"
                )
            return self._entries[index]

    # =========================================================================
    # Playlist Info
    # =========================================================================

    def get_metadata(self) -> P:
        """Return a copy of the current playlist info."""
        with self._guard.read("get_metadata"):
            return copy.copy(self._info)

    def rename(self, new_name: str | Path) -> None:
        """
        Change where this playlist lives. Nothing is written to disk.

        The next save() goes to the new location, and a title that falls
        back to the base filename follows the new name.

        Raises:
            TypeError: If the playlist has no format provider and its info
                       value has no with_filename() method.
        """
        new_name = str(new_name)
        with self._guard.write("rename"):
            old_name = self._info.filename()
            if self.format is not None:
                self._info = self.format.rename_info(self._info, new_name)
            else:
                with_filename = getattr(self._info, "with_filename", None)
                if with_filename is None:
                    raise TypeError(
                        f"{type(self._info).__name__} cannot be renamed without a format provider"
                    )
                self._info = with_filename(new_name)
        logger.debug(f"Renamed playlist {old_name!r} -> {new_name!r}")

    # =========================================================================
    # Dedup / Merge
    # =========================================================================

    def dedup_entries(self) -> int:
        """
        Remove entries equal to an earlier entry.

        The first entry of each equality class survives and survivors keep
        their relative order.

        Returns:
            Number of entries removed.
        """
        with self._guard.write("dedup_entries"):
            return _dedup_entries(self._entries)

    def merge(self, other: "Playlist[P, M, E]") -> "Playlist[P, M, E]":
        """
        Build a new playlist with this playlist's entries followed by other's.

        The result gets a copy of this playlist's info and copies of every
        entry; both inputs are left unchanged. No deduplication is done.

        Raises:
            TypeError: If the two playlists are bound to different formats.
                       Use convert() first.
        """
        if (
            self.format is not None
            and other.format is not None
            and type(self.format) is not type(other.format)
        ):
            raise TypeError(
                f"Cannot merge a {other.format.name} playlist into a {self.format.name} "
                f"playlist; convert it first"
            )

        # Snapshot one playlist at a time; holding both guards could deadlock
        # against a concurrent merge in the opposite direction.
        with self._guard.read("merge"):
            info = copy.copy(self._info)
            first = list(self._entries)
        with other._guard.read("merge"):
            second = list(other._entries)

        merged = type(self)(
            info,
            merge_entries(first, second),
            format=self.format,
            guard=self._sibling_guard()
        )
        logger.debug(
            f"Merged {len(first)} + {len(second)} entries into {info.filename()!r}"
        )
        return merged

    def convert(self, target: "PlaylistFormat") -> "Playlist":
        """
        Re-express this playlist in another dialect.

        Args:
            target: Format provider of the dialect to convert to.

        Returns:
            A new playlist bound to target, with the same reference, title,
            entry order and whatever metadata the target dialect can carry.
        """
        with self._guard.read("convert"):
            info = self._info
            entries = list(self._entries)

        return target.from_parts(
            target.adopt_info(info),
            [target.adopt_entry(entry, index) for index, entry in enumerate(entries)],
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def _require_format(self, operation: str) -> "PlaylistFormat[P, M, E]":
        if self.format is None:
            raise TypeError(f"Playlist has no format provider; cannot {operation}")
        return self.format

    def _snapshot(self, operation: str) -> tuple[P, list[E]]:
        with self._guard.read(operation):
            return self._info, list(self._entries)

    def save(self, path: str | Path | None = None) -> Path:
        """
        Serialize the playlist to its own location, or to path.

        When path is given and differs from the current location, the
        playlist is renamed to it after the write succeeds.

        Returns:
            The path that was written.

        Raises:
            ResourceError: If writing fails. The destination is unchanged.
        """
        fmt = self._require_format("save")
        info, entries = self._snapshot("save")
        target = str(path) if path is not None else info.filename()
        written = fmt.write(info, entries, target)
        if path is not None and target != info.filename():
            self.rename(target)
        return written

    def save_to(self, path: str | Path) -> Path:
        """
        Write a copy of the playlist to path without changing its location.

        Returns:
            The path that was written.

        Raises:
            ResourceError: If writing fails. The destination is unchanged.
        """
        fmt = self._require_format("save")
        info, entries = self._snapshot("save_to")
        return fmt.write(info, entries, str(path))
