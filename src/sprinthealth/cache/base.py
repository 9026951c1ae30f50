"""Protocol definition for report cache stores."""

from __future__ import annotations

from typing import Protocol


class CacheStore(Protocol):
    """Keyed string store with per-entry time-to-live.

    Implementations must tolerate concurrent reads and writes without
    corrupting individual entries.
    """

    def get(self, key: str) -> str | None:
        """Get a live entry.

        Args:
            key: Cache key.

        Returns:
            The stored value, or None if missing or expired.
        """
        ...

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        """Store a value, replacing any existing entry.

        Args:
            key: Cache key.
            value: Serialized value.
            ttl_seconds: Lifetime of the entry.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove an entry; missing keys are ignored.

        Args:
            key: Cache key.
        """
        ...

    def replace(self, key: str, value: str, ttl_seconds: float) -> None:
        """Evict an entry and insert its successor as one step.

        Readers, including those in other processes sharing the store, see
        either the old value or the new one, never a missing key.

        Args:
            key: Cache key.
            value: Serialized value.
            ttl_seconds: Lifetime of the new entry.
        """
        ...
