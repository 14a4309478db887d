"""
Reader/writer guards for shared playlist state.

A Playlist can be reached through many references at once: one holder may
read entry metadata while another appends entries. Every access to the
entry sequence or the playlist info therefore goes through a ReadWriteGuard:

    - Any number of readers may hold the guard together.
    - A writer holds it alone; readers and other writers wait (or fail).
    - The guard is released on every exit path, including exceptions.

Acquisition Policy:
    blocking=True, timeout=None   Wait as long as needed.
    blocking=True, timeout=2.5    Wait up to 2.5s, then ContentionError.
    blocking=False                ContentionError immediately if busy.

Same-thread Rules:
    - A thread holding the write guard may re-enter for read or write.
    - A thread holding a read guard may re-enter for read.
    - A thread holding a read guard that asks for write gets ContentionError
      straight away, since waiting would never finish.

Waiting writers block new readers from other threads, so a steady stream
of readers cannot starve a writer.

Usage:
    guard = ReadWriteGuard()

    with guard.read("count"):
        size = len(entries)

    with guard.write("add_entry"):
        entries.append(entry)
"""

import threading
import time
from contextlib import contextmanager
from typing import Generator, Generic, TypeVar

from playlist_mangler.core.exceptions import ContentionError


T = TypeVar("T")


class ReadWriteGuard:
    """
    Scoped shared/exclusive guard built on threading.Condition.

    Attributes:
        blocking: Whether acquisition waits for the guard to become free.
        timeout: Maximum seconds to wait when blocking (None = no limit).
    """

    def __init__(self, blocking: bool = True, timeout: float | None = None) -> None:
        self.blocking = blocking
        self.timeout = timeout
        self._cond = threading.Condition(threading.Lock())
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._write_depth = 0
        self._waiting_writers = 0

    def __repr__(self) -> str:
        return (
            f"ReadWriteGuard(blocking={self.blocking}, timeout={self.timeout}, "
            f"readers={sum(self._readers.values())}, writer={self._writer is not None})"
        )

    @contextmanager
    def read(self, operation: str = "read") -> Generator[None, None, None]:
        """
        Hold the guard in shared mode for the duration of the block.

        Args:
            operation: Name reported in ContentionError and logs.

        Raises:
            ContentionError: If the guard could not be acquired under the
                             configured policy.
        """
        self._acquire_read(operation)
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def write(self, operation: str = "write") -> Generator[None, None, None]:
        """
        Hold the guard in exclusive mode for the duration of the block.

        Args:
            operation: Name reported in ContentionError and logs.

        Raises:
            ContentionError: If the guard could not be acquired under the
                             configured policy, or if the calling thread
                             already holds it for reading.
        """
        self._acquire_write(operation)
        try:
            yield
        finally:
            self._release_write()

    def _deadline(self) -> float | None:
        if self.timeout is None:
            return None
        return time.monotonic() + self.timeout

    def _wait(self, deadline: float | None, operation: str, mode: str) -> None:
        """Wait on the condition once. Caller holds self._cond."""
        if not self.blocking:
            raise ContentionError(
                f"Playlist is busy; '{operation}' refused ({mode})",
                operation=operation,
                mode=mode
            )
        if deadline is None:
            self._cond.wait()
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0 or not self._cond.wait(remaining):
            raise ContentionError(
                f"Timed out after {self.timeout}s waiting to {mode} for '{operation}'",
                operation=operation,
                mode=mode,
                details={"timeout": self.timeout}
            )

    def _acquire_read(self, operation: str) -> None:
        me = threading.get_ident()
        deadline = self._deadline()
        with self._cond:
            # Re-entry by the writer or by a thread already reading.
            if self._writer == me or me in self._readers:
                self._readers[me] = self._readers.get(me, 0) + 1
                return
            while self._writer is not None or self._waiting_writers:
                self._wait(deadline, operation, "read")
            self._readers[me] = 1

    def _release_read(self) -> None:
        me = threading.get_ident()
        with self._cond:
            count = self._readers.get(me, 0) - 1
            if count <= 0:
                self._readers.pop(me, None)
            else:
                self._readers[me] = count
            if not self._readers:
                self._cond.notify_all()

    def _acquire_write(self, operation: str) -> None:
        me = threading.get_ident()
        deadline = self._deadline()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                return
            if me in self._readers:
                raise ContentionError(
                    f"'{operation}' needs write access while this thread is reading",
                    operation=operation,
                    mode="write"
                )
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._wait(deadline, operation, "write")
            finally:
                self._waiting_writers -= 1
                if self._writer is None:
                    # Let readers proceed if we gave up.
                    self._cond.notify_all()
            self._writer = me
            self._write_depth = 1

    def _release_write(self) -> None:
        with self._cond:
            self._write_depth -= 1
            if self._write_depth == 0:
                self._writer = None
                self._cond.notify_all()


class MetadataSlot(Generic[T]):
    """
    Holder for a single immutable value that is swapped wholesale.

    Entries keep their metadata in a slot so that write_metadata() and
    metadata() never observe a half-replaced value. The stored value itself
    must be immutable (frozen dataclasses in the bundled formats).
    """

    __slots__ = ("_lock", "_value")

    def __init__(self, value: T | None = None) -> None:
        self._lock = threading.Lock()
        self._value = value

    def get(self) -> T | None:
        with self._lock:
            return self._value

    def set(self, value: T | None) -> None:
        with self._lock:
            self._value = value

    def __copy__(self) -> "MetadataSlot[T]":
        return MetadataSlot(self.get())

    def __repr__(self) -> str:
        return f"MetadataSlot({self.get()!r})"
