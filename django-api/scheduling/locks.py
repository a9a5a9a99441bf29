"""Process-local keyed locks.

Used to serialize mutations per event and per room within one process.
Cross-process serialization is the database's job (see DjangoBookingLedger).
"""

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class KeyedLocks:
    """A lazily populated registry of one re-entrant lock per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        """Acquire the locks for keys in a stable order."""
        ordered = sorted(set(keys), key=repr)
        acquired: list[threading.RLock] = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
