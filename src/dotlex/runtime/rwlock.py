"""Readers-writer lock guarding Localization state.

Lookups (translate, has, get_translations) share the lock; mutations
(load_translations, set_locale, listener registration) take it exclusively.
Pending writers block new readers so a steady stream of lookups cannot
starve a load. A thread may nest read sections.

Mixing modes on one thread is rejected with RuntimeError: taking the write
side inside a read section, the read side inside a write section, or the
write side twice. Localization therefore runs callbacks only after leaving
its locked section.

Python 3.13+.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = ["RWLock"]


class RWLock:
    """Shared/exclusive lock with writer preference.

    Example:
        >>> lock = RWLock()
        >>> with lock.read(), lock.read():
        ...     pass
        >>> with lock.write():
        ...     pass
    """

    __slots__ = ("_cond", "_pending_writers", "_readers", "_writer")

    def __init__(self) -> None:
        self._cond = threading.Condition()
        # owning thread id -> nesting depth
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._pending_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block.

        Raises:
            RuntimeError: If the calling thread holds the write side
        """
        me = threading.get_ident()
        with self._cond:
            depth = self._readers.get(me, 0)
            if depth == 0:
                if self._writer == me:
                    msg = "read() called while this thread holds write()"
                    raise RuntimeError(msg)
                self._cond.wait_for(
                    lambda: self._writer is None and self._pending_writers == 0
                )
            self._readers[me] = depth + 1
        try:
            yield
        finally:
            with self._cond:
                remaining = self._readers[me] - 1
                if remaining:
                    self._readers[me] = remaining
                else:
                    del self._readers[me]
                    if not self._readers:
                        self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock exclusively for the duration of the block.

        Raises:
            RuntimeError: If the calling thread already holds either side
        """
        me = threading.get_ident()
        with self._cond:
            if me in self._readers:
                msg = "write() called while this thread holds read()"
                raise RuntimeError(msg)
            if self._writer == me:
                msg = "write() called while this thread already holds write()"
                raise RuntimeError(msg)
            self._pending_writers += 1
            try:
                self._cond.wait_for(lambda: self._writer is None and not self._readers)
            finally:
                self._pending_writers -= 1
            self._writer = me
        try:
            yield
        finally:
            with self._cond:
                self._writer = None
                self._cond.notify_all()

    @property
    def reader_count(self) -> int:
        """Number of threads inside a read section."""
        with self._cond:
            return len(self._readers)

    @property
    def writer_active(self) -> bool:
        """True while some thread is inside a write section."""
        with self._cond:
            return self._writer is not None
