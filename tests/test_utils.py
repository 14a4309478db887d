# tests/test_utils.py
"""Test utilities and helpers"""

import os
from unittest.mock import Mock, patch

import pytest
import requests

from playlist_mangler.core import IOConfig, ResourceError
from playlist_mangler.formats import ExtM3UFormat
from playlist_mangler.utils import (
    atomic_write_text,
    base_name,
    format_duration,
    is_remote,
    read_text_resource,
    uri_to_path,
)


class TestHelpers:
    """Test helper functions"""

    def test_base_name(self):
        """Test final path segment extraction"""
        assert base_name("music/song.mp3") == "song.mp3"
        assert base_name("song.mp3") == "song.mp3"
        assert base_name("C:\\Music\\song.flac") == "song.flac"
        assert base_name("http://host/dir/a%20b.mp3?x=1#t") == "a b.mp3"
        assert base_name("file:///music/song.ogg") == "song.ogg"
        assert base_name("music/dir/") == "dir"
        assert base_name("") == ""

    def test_format_duration(self):
        """Test duration formatting"""
        assert format_duration(90) == "1:30"
        assert format_duration(215) == "3:35"
        assert format_duration(3661) == "1:01:01"
        assert format_duration(0) == "0:00"
        assert format_duration(-10) == "0:00"

    def test_is_remote(self):
        """Test URL classification"""
        assert is_remote("http://host/a.m3u")
        assert is_remote("HTTPS://host/a.m3u")
        assert not is_remote("file:///a.m3u")
        assert not is_remote("C:\\a.m3u")
        assert not is_remote("a.m3u")

    def test_uri_to_path(self, temp_dir):
        """Test path and file:// resolution"""
        path = temp_dir / "a b.m3u"
        assert uri_to_path(str(path)) == path
        assert uri_to_path(path.as_uri()) == path

        with pytest.raises(ResourceError) as exc_info:
            uri_to_path("ftp://host/a.m3u")
        assert exc_info.value.details["scheme"] == "ftp"


class TestReadTextResource:
    """Test reading playlists from paths and URLs"""

    def test_read_file(self, write_playlist):
        """Test reading a local file, BOM stripped"""
        path = write_playlist("a.m3u", "\ufeffa.mp3\n")
        assert read_text_resource(str(path)) == "a.mp3\n"
        assert read_text_resource(path.as_uri()) == "a.mp3\n"

    def test_missing_file(self, temp_dir):
        """Test that unreadable files raise ResourceError"""
        missing = str(temp_dir / "missing.m3u")
        with pytest.raises(ResourceError) as exc_info:
            read_text_resource(missing)
        assert exc_info.value.reference == missing

    def test_undecodable(self, temp_dir):
        """Test bytes that do not match the configured encoding"""
        path = temp_dir / "latin.m3u"
        path.write_bytes("café.mp3\n".encode("latin-1"))

        with pytest.raises(ResourceError):
            read_text_resource(str(path))
        assert read_text_resource(str(path), IOConfig(encoding="latin-1")) == "café.mp3\n"

    @patch("playlist_mangler.utils.requests.get")
    def test_fetch_http(self, mock_get):
        """Test fetching a remote playlist"""
        response = Mock()
        response.content = b"#EXTM3U\n#EXTINF:5,Remote\nhttp://host/r.mp3\n"
        response.raise_for_status.return_value = None
        mock_get.return_value = response

        playlist = ExtM3UFormat(None).from_uri("http://host/list.m3u8")

        mock_get.assert_called_once_with("http://host/list.m3u8", timeout=10.0)
        assert playlist.get_entry(0).metadata().title() == "Remote"
        assert playlist.get_metadata().title() == "list.m3u8"

    @patch("playlist_mangler.utils.requests.get")
    def test_fetch_http_error(self, mock_get):
        """Test that HTTP failures become ResourceError"""
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ResourceError) as exc_info:
            read_text_resource("https://host/list.m3u8")
        assert "refused" in exc_info.value.message


class TestAtomicWrite:
    """Test atomic_write_text"""

    def test_write_and_replace(self, temp_dir):
        """Test creating then overwriting a file"""
        path = temp_dir / "out.m3u"
        atomic_write_text(path, "one\n")
        atomic_write_text(path, "two\n")
        assert path.read_text(encoding="utf-8") == "two\n"
        assert os.listdir(temp_dir) == ["out.m3u"]

    def test_creates_parent_directories(self, temp_dir):
        """Test writing into a directory that does not exist yet"""
        path = temp_dir / "a" / "b" / "out.m3u"
        assert atomic_write_text(path, "x\n") == path
        assert path.exists()

    def test_failure_keeps_previous_content(self, temp_dir):
        """Test that a failed replace leaves the destination and no temp file"""
        path = temp_dir / "out.m3u"
        path.write_text("old\n", encoding="utf-8")

        with patch("playlist_mangler.utils.os.replace", side_effect=OSError(13, "Permission denied")):
            with pytest.raises(ResourceError):
                atomic_write_text(path, "new\n")

        assert path.read_text(encoding="utf-8") == "old\n"
        assert os.listdir(temp_dir) == ["out.m3u"]

    def test_unencodable_text(self, temp_dir):
        """Test text that the encoding cannot represent"""
        path = temp_dir / "out.m3u"
        with pytest.raises(ResourceError):
            atomic_write_text(path, "日本.mp3\n", encoding="ascii")
        assert not path.exists()
