# tests/test_guard.py
"""Test reader/writer guards and shared playlists"""

import copy
import threading
from contextlib import contextmanager

import pytest

from playlist_mangler.core import (
    Config,
    ContentionError,
    GuardConfig,
    MetadataSlot,
    ReadWriteGuard,
)
from playlist_mangler.formats import ExtInfMetadata, PlainEntry, PlainInfo, PlainTextFormat
from playlist_mangler.playlist import Playlist


@contextmanager
def held_elsewhere(guard, mode):
    """Hold guard in another thread for the duration of the block"""
    acquired = threading.Event()
    release = threading.Event()

    def hold():
        with getattr(guard, mode)("holder"):
            acquired.set()
            release.wait(5)

    thread = threading.Thread(target=hold)
    thread.start()
    assert acquired.wait(5)
    try:
        yield
    finally:
        release.set()
        thread.join(5)


class TestReadWriteGuard:
    """Test ReadWriteGuard acquisition rules"""

    def test_same_thread_reentry(self):
        """Test nested read/read, write/write and write/read"""
        guard = ReadWriteGuard(blocking=False)
        with guard.read():
            with guard.read():
                pass
        with guard.write():
            with guard.write():
                with guard.read():
                    pass
        # Fully released: another thread can write
        with held_elsewhere(guard, "write"):
            pass

    def test_read_then_write_same_thread(self):
        """Test that upgrading a read fails instead of deadlocking"""
        guard = ReadWriteGuard()
        with guard.read("outer"):
            with pytest.raises(ContentionError) as exc_info:
                with guard.write("upgrade"):
                    pass
        assert exc_info.value.operation == "upgrade"
        assert exc_info.value.mode == "write"

    def test_concurrent_readers(self):
        """Test that readers do not exclude each other"""
        guard = ReadWriteGuard(blocking=False)
        with held_elsewhere(guard, "read"):
            with guard.read():
                pass

    def test_fail_fast_write_while_read(self):
        """Test non-blocking writer against a reader"""
        guard = ReadWriteGuard(blocking=False)
        with held_elsewhere(guard, "read"):
            with pytest.raises(ContentionError) as exc_info:
                with guard.write("add_entry"):
                    pass
        assert exc_info.value.details["operation"] == "add_entry"

    def test_fail_fast_read_while_write(self):
        """Test non-blocking reader against a writer"""
        guard = ReadWriteGuard(blocking=False)
        with held_elsewhere(guard, "write"):
            with pytest.raises(ContentionError):
                with guard.read("count"):
                    pass

    def test_timeout(self):
        """Test blocking acquisition with a time limit"""
        guard = ReadWriteGuard(blocking=True, timeout=0.05)
        with held_elsewhere(guard, "write"):
            with pytest.raises(ContentionError) as exc_info:
                with guard.write("rename"):
                    pass
        assert exc_info.value.details["timeout"] == 0.05

        # Usable again once the holder is gone
        with guard.write():
            pass

    def test_released_on_exception(self):
        """Test that an exception inside the block releases the guard"""
        guard = ReadWriteGuard(blocking=False)
        with pytest.raises(RuntimeError):
            with guard.write():
                raise RuntimeError("boom")
        with held_elsewhere(guard, "write"):
            pass

    def test_blocking_writer_waits(self):
        """Test that a blocking writer proceeds once the reader leaves"""
        guard = ReadWriteGuard(blocking=True, timeout=5)
        order = []
        reader_in = threading.Event()
        let_go = threading.Event()

        def reader():
            with guard.read():
                reader_in.set()
                let_go.wait(5)
                order.append("read done")

        thread = threading.Thread(target=reader)
        thread.start()
        assert reader_in.wait(5)

        timer = threading.Timer(0.05, let_go.set)
        timer.start()
        with guard.write():
            order.append("write")
        thread.join(5)

        assert order == ["read done", "write"]


class TestSharedPlaylist:
    """Test a playlist reached from several threads"""

    def test_concurrent_appends(self):
        """Test that no append is lost"""
        playlist = Playlist(PlainInfo("shared.txt"))

        def worker(offset):
            for i in range(200):
                playlist.add_entry(PlainEntry(offset + i, f"{offset + i}.mp3"))

        threads = [threading.Thread(target=worker, args=(n * 1000,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert playlist.count() == 1600
        assert playlist.dedup_entries() == 0

    def test_fail_fast_policy_from_config(self):
        """Test that the configured guard policy reaches parsed playlists"""
        config = Config(guard=GuardConfig(blocking=False))
        playlist = PlainTextFormat(config).from_text("a.mp3\n", "a.txt")

        with held_elsewhere(playlist._guard, "read"):
            with pytest.raises(ContentionError):
                playlist.add_entry(PlainEntry(1, "b.mp3"))
            # Reads still go through
            assert playlist.count() == 1

        playlist.add_entry(PlainEntry(1, "b.mp3"))
        assert playlist.count() == 2

    def test_merge_keeps_guard_policy(self):
        """Test that a merged playlist uses the receiver's guard policy"""
        guard = ReadWriteGuard(blocking=False)
        playlist = Playlist(PlainInfo("a.txt"), [PlainEntry(0, "a.mp3")], guard=guard)
        merged = playlist.merge(playlist)
        assert merged._guard is not guard
        assert merged._guard.blocking is False


class TestMetadataSlot:
    """Test the metadata holder used by entries"""

    def test_get_set(self):
        """Test replacing the stored value"""
        slot = MetadataSlot(ExtInfMetadata(1, "a"))
        slot.set(ExtInfMetadata(2, "b"))
        assert slot.get() == ExtInfMetadata(2, "b")

    def test_copy_is_independent(self):
        """Test that copies have their own storage"""
        slot = MetadataSlot(ExtInfMetadata(1, "a"))
        clone = copy.copy(slot)
        clone.set(None)
        assert slot.get() == ExtInfMetadata(1, "a")
        assert clone.get() is None
