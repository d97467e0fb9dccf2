"""Tests for the readers-writer lock guarding Localization state.

Verifies that:
- Readers share the lock and may re-enter it
- Writers are exclusive
- Upgrades, downgrades and write reentrancy are rejected
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from dotlex.runtime.rwlock import RWLock


class TestRWLockReaders:
    """Shared read access."""

    def test_reentrant_read(self) -> None:
        """A thread may nest read acquisitions."""
        lock = RWLock()
        with lock.read(), lock.read():
            assert lock.reader_count == 1
        assert lock.reader_count == 0

    def test_concurrent_readers(self) -> None:
        """Several threads hold the read lock at once."""
        lock = RWLock()
        barrier = threading.Barrier(3)
        peak: list[int] = []

        def reader() -> None:
            with lock.read():
                barrier.wait(timeout=5)
                peak.append(lock.reader_count)

        with ThreadPoolExecutor(max_workers=3) as executor:
            for future in [executor.submit(reader) for _ in range(3)]:
                future.result()

        assert max(peak) == 3


class TestRWLockWriters:
    """Exclusive write access."""

    def test_writer_flag(self) -> None:
        """writer_active reflects the write lock."""
        lock = RWLock()
        with lock.write():
            assert lock.writer_active
        assert not lock.writer_active

    def test_writer_waits_for_reader(self) -> None:
        """A writer cannot enter while a reader holds the lock."""
        lock = RWLock()
        order: list[str] = []
        reader_in = threading.Event()
        release_reader = threading.Event()

        def reader() -> None:
            with lock.read():
                reader_in.set()
                release_reader.wait(timeout=5)
                order.append("reader-done")

        def writer() -> None:
            reader_in.wait(timeout=5)
            with lock.write():
                order.append("writer")

        threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
        for thread in threads:
            thread.start()
        reader_in.wait(timeout=5)
        release_reader.set()
        for thread in threads:
            thread.join(timeout=5)

        assert order == ["reader-done", "writer"]

    def test_counter_consistency_under_writes(self) -> None:
        """Concurrent writers never interleave."""
        lock = RWLock()
        counter = {"value": 0}

        def increment() -> None:
            for _ in range(200):
                with lock.write():
                    current = counter["value"]
                    counter["value"] = current + 1

        threads = [threading.Thread(target=increment) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter["value"] == 800


class TestRWLockMisuse:
    """Rejected acquisition patterns."""

    def test_upgrade_rejected(self) -> None:
        """Acquiring write while holding read raises."""
        lock = RWLock()
        with lock.read(), pytest.raises(RuntimeError, match="holds read"):
            with lock.write():
                pass

    def test_downgrade_rejected(self) -> None:
        """Acquiring read while holding write raises."""
        lock = RWLock()
        with lock.write(), pytest.raises(RuntimeError, match=r"^read\(\) called"):
            with lock.read():
                pass

    def test_write_reentrancy_rejected(self) -> None:
        """Nested write acquisition raises."""
        lock = RWLock()
        with lock.write(), pytest.raises(RuntimeError, match="already holds write"):
            with lock.write():
                pass
