"""In-process cache store."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class CacheEntry:
    """A stored value and the clock time it expires at."""

    value: str
    expires_at: float


class MemoryCacheStore:
    """Thread-safe in-memory store with an injectable clock.

    Example:
        >>> store = MemoryCacheStore()
        >>> store.set("k", "v", ttl_seconds=60)
        >>> store.get("k")
        'v'
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Source of the current time in seconds.
        """
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._log = logger.bind(component="MemoryCacheStore")

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                self._log.debug("Cache entry expired", key=key)
                return None
            return entry.value

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, expires_at=self._clock() + ttl_seconds
            )

    def replace(self, key: str, value: str, ttl_seconds: float) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                value=value, expires_at=self._clock() + ttl_seconds
            )

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
