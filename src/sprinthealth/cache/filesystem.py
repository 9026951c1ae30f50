"""File-backed cache store shared between processes."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

import structlog

from sprinthealth.exceptions import CacheError

logger = structlog.get_logger()


class FileCacheStore:
    """Stores one JSON file per key under a directory.

    Files are written to a temporary name and then renamed into place, so a
    concurrent reader sees either the old entry or the new one.

    Example:
        >>> store = FileCacheStore(Path.home() / ".sprinthealth" / "cache")
        >>> store.set("project:p1:health_report", "{}", ttl_seconds=14400)
    """

    def __init__(self, directory: Path, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            directory: Directory holding the cache files.
            clock: Source of the current time in seconds.
        """
        self.directory = directory
        self._clock = clock
        self._log = logger.bind(component="FileCacheStore", directory=str(directory))

    def path_for(self, key: str) -> Path:
        """Path of the file holding a key."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]
        return self.directory / f"{digest}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            self._log.warning("Unreadable cache entry", key=key, error=str(e))
            return None

        if not isinstance(data, dict) or data.get("key") != key:
            self._log.warning("Malformed cache entry", key=key)
            return None

        if data.get("expires_at", 0) <= self._clock():
            self._log.debug("Cache entry expired", key=key)
            path.unlink(missing_ok=True)
            return None

        value = data.get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        payload = {
            "key": key,
            "value": value,
            "expires_at": self._clock() + ttl_seconds,
        }
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(json.dumps(payload))
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            msg = f"Failed to write cache entry '{key}': {e}"
            raise CacheError(msg, key=key, path=path) from e

    def replace(self, key: str, value: str, ttl_seconds: float) -> None:
        # os.replace swaps the file in a single rename; unlinking first would
        # expose a missing entry to other processes.
        self.set(key, value, ttl_seconds)

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            msg = f"Failed to delete cache entry '{key}': {e}"
            raise CacheError(msg, key=key, path=self.path_for(key)) from e
