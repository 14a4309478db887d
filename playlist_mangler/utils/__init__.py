"""
Utility functions for playlist-mangler.

This module provides the reference and file helpers that format providers
share:
    - base_name: final path segment of a filename or URI
    - format_duration: seconds as m:ss / h:mm:ss
    - is_remote / uri_to_path: classify and resolve references
    - read_text_resource: read a playlist from a path, file:// or http(s)://
    - atomic_write_text: all-or-nothing file writes

The playlist container never calls these itself; only format providers do
I/O.

Usage:
    from playlist_mangler.utils import base_name, read_text_resource

    base_name("music/song.mp3")  # "song.mp3"
"""

import os
import tempfile
from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests

from playlist_mangler.core.config import IOConfig
from playlist_mangler.core.exceptions import ResourceError
from playlist_mangler.core.logger import get_logger

logger = get_logger(__name__)


_REMOTE_SCHEMES = ("http", "https")


def _scheme(reference: str) -> str:
    scheme = urlparse(reference).scheme.lower()
    # "C:\\Music\\a.mp3" parses with scheme "c"; that is a Windows drive.
    if len(scheme) == 1:
        return ""
    return scheme


def is_remote(reference: str) -> bool:
    """Return True if the reference is an http(s) URL."""
    return _scheme(reference) in _REMOTE_SCHEMES


def uri_to_path(reference: str) -> Path:
    """
    Convert a file:// URI or plain path string to a local Path.

    Args:
        reference: A filesystem path or a file:// URI.

    Returns:
        The local path the reference points to.

    Raises:
        ResourceError: If the reference uses a scheme other than file.
    """
    scheme = _scheme(reference)
    if not scheme:
        return Path(reference)
    if scheme == "file":
        parsed = urlparse(reference)
        return Path(url2pathname(unquote(parsed.path)))
    raise ResourceError(
        f"Unsupported URI scheme '{scheme}'",
        reference=reference,
        details={"scheme": scheme}
    )


def base_name(reference: str) -> str:
    """
    Return the final path segment of a filename or URI.

    Directory components are stripped for both '/' and '\\\\' separators.
    URIs are percent-decoded and their query/fragment ignored.

    Examples:
        base_name("music/song.mp3")                 # "song.mp3"
        base_name("C:\\\\Music\\\\song.flac")           # "song.flac"
        base_name("http://host/a%20b.mp3?x=1")      # "a b.mp3"
        base_name("")                               # ""
    """
    if not reference:
        return ""
    if _scheme(reference):
        parsed = urlparse(reference)
        path = unquote(parsed.path) or parsed.netloc
    else:
        path = reference
    path = path.rstrip("/\\")
    return path.replace("\\", "/").rsplit("/", 1)[-1]


def format_duration(seconds: int) -> str:
    """
    Format a duration in seconds as m:ss or h:mm:ss.

    Examples:
        format_duration(215)   # "3:35"
        format_duration(3661)  # "1:01:01"
        format_duration(-10)   # "0:00"
    """
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _decode(data: bytes, encoding: str, reference: str) -> str:
    # Tolerate a UTF-8 BOM, which many M3U8 writers emit.
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ResourceError(
            f"Could not decode {reference} as {encoding}: {e}",
            reference=reference,
            details={"encoding": encoding, "original_error": str(e)}
        ) from e


def read_text_resource(reference: str, io_config: IOConfig | None = None) -> str:
    """
    Read a playlist document as text.

    Args:
        reference: Filesystem path, file:// URI or http(s):// URL.
        io_config: Encoding and timeout settings. Defaults to IOConfig().

    Returns:
        The decoded document.

    Raises:
        ResourceError: If the resource cannot be opened, fetched or decoded.
    """
    io_config = io_config or IOConfig()

    if is_remote(reference):
        logger.debug(f"Fetching playlist {reference}")
        try:
            response = requests.get(reference, timeout=io_config.request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ResourceError(
                f"Failed to fetch playlist: {e}",
                reference=reference,
                details={"original_error": str(e)}
            ) from e
        return _decode(response.content, io_config.encoding, reference)

    path = uri_to_path(reference)
    logger.debug(f"Reading playlist {path}")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ResourceError(
            f"Failed to read playlist: {e.strerror or e}",
            reference=reference,
            details={"path": str(path), "original_error": str(e)}
        ) from e
    return _decode(data, io_config.encoding, reference)


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> Path:
    """
    Write text to a file so that readers see either the old or the new file.

    The content goes to a temporary file in the destination directory,
    is flushed to disk and then moved over the destination with
    os.replace(). On any failure the temporary file is removed and the
    destination keeps its previous content.

    Args:
        path: Destination file.
        text: Content to write.
        encoding: Text encoding.

    Returns:
        The destination path.

    Raises:
        ResourceError: If the content cannot be encoded or written.
    """
    path = Path(path)
    try:
        data = text.encode(encoding)
    except (UnicodeEncodeError, LookupError) as e:
        raise ResourceError(
            f"Could not encode playlist as {encoding}: {e}",
            reference=str(path),
            details={"encoding": encoding, "original_error": str(e)}
        ) from e

    directory = path.parent if str(path.parent) else Path(".")
    temp_name = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=directory
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, path)
        temp_name = None
    except OSError as e:
        raise ResourceError(
            f"Failed to write playlist: {e.strerror or e}",
            reference=str(path),
            details={"path": str(path), "original_error": str(e)}
        ) from e
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)

    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return path
