"""
playlist-mangler: read, reshape and write playlist files.

This package parses textual playlist dialects into one shared in-memory
model, lets you mutate them uniformly, and writes them back out.

Architecture:
    playlist/   Format-independent model
        - capabilities: EntryMetadata, Entry and PlaylistInfo protocols
        - container: guarded generic Playlist (add, remove, dedup, merge)
    formats/    One provider per dialect; the only place grammar lives
        - plaintext: one reference per line
        - m3u: classic M3U
        - extm3u: extended M3U with #EXTINF metadata
    core/       Configuration, guards, logging, exceptions
    utils/      Reference helpers, resource reading, atomic writes
    cli.py      Command-line interface (plm)

Usage:
    Command Line:
        plm info road_trip.m3u8
        plm dedup road_trip.m3u8
        plm merge a.m3u8 b.m3u8 -o both.m3u8 --dedup
        plm convert listing.txt --to extm3u -o listing.m3u8

    Python API:
        from playlist_mangler import ExtM3UFormat, open_playlist

        playlist = open_playlist("road_trip.m3u8")
        other = ExtM3UFormat().from_path("more.m3u8")

        combined = playlist.merge(other)
        removed = combined.dedup_entries()
        combined.save_to("combined.m3u8")

Configuration:
    Optional playlist_mangler.yaml in the current directory:

        io:
          encoding: utf-8
        guard:
          blocking: true
          timeout: null
        logging:
          directory: null
          level: INFO

Dependencies:
    - pyyaml: Configuration file parsing
    - requests: Fetching http(s) playlists
    - click / rich-click: CLI framework and colors
    - tqdm: Progress bars and tqdm-safe console logging
"""

__version__ = "0.1.0"
__author__ = "playlist-mangler"
__license__ = "MIT"

from playlist_mangler.core import (
    Config,
    ConfigError,
    ContentionError,
    FormatError,
    PlaylistManglerError,
    ReadWriteGuard,
    ResourceError,
    get_logger,
    load_config,
    setup_logging,
)
from playlist_mangler.formats import (
    ExtInfMetadata,
    ExtM3UEntry,
    ExtM3UFormat,
    ExtM3UInfo,
    M3UFormat,
    PlainEntry,
    PlainInfo,
    PlainMetadata,
    PlainTextFormat,
    PlaylistFormat,
    detect_format,
    get_format,
    open_playlist,
)
from playlist_mangler.playlist import Entry, EntryMetadata, Playlist, PlaylistInfo

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "ReadWriteGuard",
    "setup_logging",
    "get_logger",
    # Exceptions
    "PlaylistManglerError",
    "ConfigError",
    "ContentionError",
    "FormatError",
    "ResourceError",
    # Model
    "Playlist",
    "Entry",
    "EntryMetadata",
    "PlaylistInfo",
    # Formats
    "PlaylistFormat",
    "PlainTextFormat",
    "PlainEntry",
    "PlainInfo",
    "PlainMetadata",
    "M3UFormat",
    "ExtM3UFormat",
    "ExtM3UEntry",
    "ExtM3UInfo",
    "ExtInfMetadata",
    "get_format",
    "detect_format",
    "open_playlist",
]
