"""Per-key mutual exclusion.

One threading.Lock per key, created on first use and dropped again once no
thread holds or waits on it. Threads working on different keys never share
a lock; the registry guard is only held while looking up or releasing an
entry, never while the caller's operation runs.
"""

from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from threading import Lock
from typing import TypeVar

T = TypeVar("T")


class _Entry:
    __slots__ = ("lock", "refs")

    def __init__(self) -> None:
        self.lock = Lock()
        self.refs = 0  # holders + waiters


class KeyedLock:
    def __init__(self) -> None:
        self._entries: dict[Hashable, _Entry] = {}
        self._guard = Lock()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for `key` for the duration of the with-block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.refs += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.refs -= 1
                if entry.refs == 0:
                    del self._entries[key]

    def with_lock(self, key: Hashable, operation: Callable[[], T]) -> T:
        """Run `operation` while holding the lock for `key`; return its result."""
        with self.hold(key):
            return operation()

    def active_keys(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._entries)
