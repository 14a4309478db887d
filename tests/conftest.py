"""Test configuration and fixtures"""

import tempfile
from pathlib import Path

import pytest

from playlist_mangler.formats import ExtM3UFormat, PlainTextFormat


EXTM3U_SAMPLE = (
    "#EXTM3U\n"
    "#PLAYLIST:Road Trip\n"
    "#EXTINF:215,Artist - Song\n"
    "music/song.mp3\n"
    "#EXTINF:-1,\n"
    "http://radio.example/stream\n"
    "music/plain.flac\n"
)

PLAIN_SAMPLE = (
    "music/a.mp3\n"
    "music/b.mp3\n"
    "\n"
    "  music/c.mp3  \n"
)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def extm3u_text():
    """Extended M3U document with a title, two EXTINF lines and a bare reference"""
    return EXTM3U_SAMPLE


@pytest.fixture
def plain_text():
    """Plain listing with a blank line and a padded reference"""
    return PLAIN_SAMPLE


@pytest.fixture
def extm3u_playlist(extm3u_text):
    """Parsed extended M3U playlist living at road_trip.m3u8"""
    return ExtM3UFormat().from_text(extm3u_text, "road_trip.m3u8")


@pytest.fixture
def plain_playlist(plain_text):
    """Parsed plain listing living at listing.txt"""
    return PlainTextFormat().from_text(plain_text, "listing.txt")


@pytest.fixture
def write_playlist(temp_dir):
    """Write text to a file in temp_dir and return its path"""
    def _write(name: str, text: str) -> Path:
        path = temp_dir / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
