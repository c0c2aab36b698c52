"""In-memory query cache with per-entry TTL.

Keeps copies of slowly-changing lists between page/view activations so a
navigation does not re-issue the same read. The cache is never
authoritative: a miss means "go fetch", writers invalidate the keys they
touched, and ``clear_all`` runs on logout so the next session starts cold.
Expired entries are dropped lazily on ``get``; there is no size bound.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..core.constants import DEFAULT_CACHE_TTL_MS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    data: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class QueryCache:
    def __init__(
        self,
        default_ttl_ms: int = DEFAULT_CACHE_TTL_MS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl_ms = int(default_ttl_ms)
        self._clock = clock
        self._lock = threading.RLock()
        self._store: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._store[key]
                logger.debug("cache expired key=%s", key)
                return None
            return entry.data

    def set(self, key: str, data: Any, ttl_ms: Optional[int] = None) -> None:
        ttl = self.default_ttl_ms if ttl_ms is None else int(ttl_ms)
        with self._lock:
            self._store[key] = CacheEntry(key=key, data=data, expires_at=self._clock() + ttl / 1000.0)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._store.clear()
        logger.debug("cache cleared")

    def get_or_load(self, key: str, loader: Callable[[], Any], ttl_ms: Optional[int] = None) -> Any:
        """Read-through: return the cached value or load, store and return it.

        ``None`` results are not cached (they are indistinguishable from a miss).
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache hit key=%s", key)
            return cached

        logger.debug("cache miss key=%s", key)
        data = loader()
        if data is not None:
            self.set(key, data, ttl_ms)
        return data

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
