"""Report caching."""

from sprinthealth.cache.base import CacheStore
from sprinthealth.cache.filesystem import FileCacheStore
from sprinthealth.cache.manager import ReportCache, ReportSession
from sprinthealth.cache.memory import MemoryCacheStore

__all__ = [
    "CacheStore",
    "FileCacheStore",
    "MemoryCacheStore",
    "ReportCache",
    "ReportSession",
]
