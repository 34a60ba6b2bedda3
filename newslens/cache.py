"""In-memory TTL caches for query results and alias sets."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

RESULT_TTL_SECONDS = 10 * 60
ALIAS_TTL_SECONDS = 30 * 60


@dataclass
class CacheEntry(Generic[T]):
    value: T
    created_at: float


class TTLCache(Generic[T]):
    """Process-local map whose entries expire a fixed time after insertion.

    Expiry is lazy: a stale entry is removed when it is next read, and nothing
    sweeps the map in the background. Reads and writes are serialised by a
    lock; concurrent writes to one key are last-writer-wins.

    Two callers missing the same key at the same time will both compute and
    both `put`. There is no single-flight; that duplicate work is accepted.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("%s miss: %s", self.name, key)
                return None
            if self._clock() - entry.created_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug("%s expired: %s", self.name, key)
                return None
            logger.debug("%s hit: %s", self.name, key)
            return entry.value

    def put(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries


def result_cache_key(query: str, days: int, lang: str) -> str:
    return f"{query}|{days}|{lang}"
