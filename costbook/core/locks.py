"""
Per-recipe locking for read-compute-write sequences.

Cost recomputation reads a recipe's ingredient lines, computes totals and
writes them back. Mutations of the same recipe must not interleave, so store
operations hold the recipe's lock for their whole duration.
"""
from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Hashable, Iterator


class KeyedLock:
    """Registry of re-entrant locks, one per key."""

    def __init__(self) -> None:
        self._locks: Dict[Hashable, RLock] = {}
        self._guard = Lock()

    def _get(self, key: Hashable) -> RLock:
        with self._guard:
            return self._locks.setdefault(key, RLock())

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._get(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()

    def discard(self, key: Hashable) -> None:
        """Forget the lock for a deleted recipe."""
        with self._guard:
            self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)


recipe_locks = KeyedLock()
