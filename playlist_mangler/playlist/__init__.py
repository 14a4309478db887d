"""
Format-independent playlist model.

    capabilities: Protocols every dialect's types satisfy
    container:    Guarded, generic Playlist container
    dedup:        Dedup and merge algorithms on entry lists
"""

from playlist_mangler.playlist.capabilities import (
    Entry,
    EntryMetadata,
    KeyedEntry,
    PlaylistInfo,
    default_entry_key,
    entry_info,
    entry_title,
    fallback_title,
)
from playlist_mangler.playlist.container import Playlist
from playlist_mangler.playlist.dedup import dedup_entries, merge_entries

__all__ = [
    "Entry",
    "EntryMetadata",
    "KeyedEntry",
    "PlaylistInfo",
    "Playlist",
    "default_entry_key",
    "entry_info",
    "entry_title",
    "fallback_title",
    "dedup_entries",
    "merge_entries",
]
