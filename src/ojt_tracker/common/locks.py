from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from ..core.exceptions import OperationInProgressError


class UserLocks:
    """Per-user single-flight guard.

    ``hold`` never blocks: if another operation for the same user is in
    flight, it raises ``OperationInProgressError`` instead of queueing.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def is_held(self, key: str) -> bool:
        return self._lock_for(key).locked()

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        if not lock.acquire(blocking=False):
            raise OperationInProgressError("Another time in/out is still being recorded")
        try:
            yield
        finally:
            lock.release()
