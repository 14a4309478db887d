"""
Playlist dialects.

This package contains one format provider per supported dialect plus
helpers to pick the right one:

    plain   PlainTextFormat   one reference per line
    m3u     M3UFormat         plain listing under an M3U name
    extm3u  ExtM3UFormat      '#EXTM3U' header, '#EXTINF' metadata

Usage:
    from playlist_mangler.formats import open_playlist, get_format

    playlist = open_playlist("road_trip.m3u8")       # dialect detected
    listing = get_format("plain").from_path("ls.txt")
"""

from pathlib import Path

from playlist_mangler.core.config import Config
from playlist_mangler.core.exceptions import PlaylistManglerError
from playlist_mangler.core.logger import get_logger
from playlist_mangler.formats.base import PlaylistFormat
from playlist_mangler.formats.extm3u import (
    HEADER,
    ExtInfMetadata,
    ExtM3UEntry,
    ExtM3UFormat,
    ExtM3UInfo,
)
from playlist_mangler.formats.m3u import M3UFormat
from playlist_mangler.formats.plaintext import (
    PlainEntry,
    PlainInfo,
    PlainMetadata,
    PlainTextFormat,
)
from playlist_mangler.playlist.container import Playlist
from playlist_mangler.utils import base_name, read_text_resource

logger = get_logger(__name__)


FORMATS: dict[str, type[PlaylistFormat]] = {
    PlainTextFormat.name: PlainTextFormat,
    M3UFormat.name: M3UFormat,
    ExtM3UFormat.name: ExtM3UFormat,
}


def get_format(name: str, config: Config | None = None) -> PlaylistFormat:
    """
    Create the format provider registered under name.

    Raises:
        PlaylistManglerError: If no dialect has that name.
    """
    try:
        format_class = FORMATS[name.lower()]
    except KeyError:
        raise PlaylistManglerError(
            f"Unknown playlist format '{name}' (known: {', '.join(FORMATS)})",
            details={"format": name}
        ) from None
    return format_class(config)


def detect_format(text: str, reference: str = "") -> str:
    """
    Guess the dialect of a document.

    Rules:
        1. First line is '#EXTM3U'                      -> "extm3u"
        2. Reference suffix is in a dialect's extensions -> that dialect
           (.m3u / .m3u8 -> "m3u", .txt / .lst -> "plain")
        3. Anything else                                -> "plain"

    Returns:
        A key of FORMATS.
    """
    first_line = text.lstrip("\ufeff").split("\n", 1)[0].strip()
    if first_line == HEADER:
        return ExtM3UFormat.name

    suffix = Path(base_name(reference)).suffix.lower()
    for name, format_class in FORMATS.items():
        if suffix and suffix in format_class.extensions:
            return name
    return PlainTextFormat.name


def open_playlist(
    reference: str | Path,
    config: Config | None = None,
    format_name: str | None = None
) -> Playlist:
    """
    Read a playlist, detecting its dialect unless format_name is given.

    Args:
        reference: Filesystem path, file:// URI or http(s) URL.
        config: Library configuration. Defaults to Config.default().
        format_name: Force a dialect instead of detecting it.

    Raises:
        ResourceError: If the resource cannot be read.
        FormatError: If the content violates the dialect's grammar.
    """
    config = config or Config.default()
    reference = str(reference)
    text = read_text_resource(reference, config.io)
    name = format_name or detect_format(text, reference)
    logger.debug(f"Opening {reference} as {name}")
    return get_format(name, config).from_text(text, reference)


__all__ = [
    "FORMATS",
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
