"""Cached access to health reports."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from sprinthealth.statistics.report import StatisticsReport

if TYPE_CHECKING:
    from sprinthealth.cache.base import CacheStore
    from sprinthealth.statistics.builder import ReportBuilder

logger = structlog.get_logger()


class ReportCache:
    """Get-or-compute access to reports with a forced refresh path.

    Concurrent misses for the same project may each build the report; the
    build is deterministic, so the redundant work stores the same value.

    Example:
        >>> cache = ReportCache(builder, MemoryCacheStore())
        >>> cache.get("p1") is not None
        True
        >>> cache.force_refresh("p1").score
        100
    """

    def __init__(
        self,
        builder: ReportBuilder,
        store: CacheStore,
        ttl_seconds: float | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            builder: Computes reports on a miss or refresh.
            store: Backing store for serialized reports.
            ttl_seconds: Entry lifetime, defaults to the builder's config.
        """
        self.builder = builder
        self.store = store
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else builder.config.cache_ttl_seconds
        )
        self._log = logger.bind(component="ReportCache")

    @staticmethod
    def cache_key(project_id: str) -> str:
        """Cache key of a project's report."""
        return f"project:{project_id}:health_report"

    def _read(self, key: str) -> StatisticsReport | None:
        cached = self.store.get(key)
        if cached is None:
            return None
        try:
            return StatisticsReport.from_json(cached)
        except ValidationError as e:
            self._log.warning("Discarding unreadable cached report", key=key, error=str(e))
            return None

    def get(self, project_id: str) -> StatisticsReport:
        """Get the cached report, computing and storing it on a miss.

        Args:
            project_id: Project identifier.

        Returns:
            The live cached report or a freshly built one.

        Raises:
            ReportBuildError: If the build fails.
            CacheError: If the store cannot be written.
        """
        key = self.cache_key(project_id)
        report = self._read(key)
        if report is not None:
            self._log.debug("Cache hit", project_id=project_id)
            return report

        self._log.info("Cache miss", project_id=project_id)
        report = self.builder.build(project_id)
        self.store.set(key, report.to_json(), self.ttl_seconds)
        return report

    def force_refresh(self, project_id: str) -> StatisticsReport:
        """Rebuild a report and replace the cached entry.

        The old entry stays readable while the new report is computed. It is
        then evicted and the replacement inserted in one store operation, so
        readers sharing the store never find the key missing.

        Args:
            project_id: Project identifier.

        Returns:
            The freshly built report.

        Raises:
            ReportBuildError: If the build fails; the old entry is kept.
            CacheError: If the store cannot be written.
        """
        key = self.cache_key(project_id)
        self._log.info("Refreshing cached report", project_id=project_id)

        report = self.builder.build(project_id)
        self.store.replace(key, report.to_json(), self.ttl_seconds)
        return report

    def session(self) -> ReportSession:
        """Start a unit of work with its own report memo."""
        return ReportSession(self)


class ReportSession:
    """Per-unit-of-work memo in front of a ReportCache.

    Memoized reports never expire; create a new session for each request.
    """

    def __init__(self, cache: ReportCache) -> None:
        self._cache = cache
        self._memo: dict[str, StatisticsReport] = {}

    def get(self, project_id: str, force: bool = False) -> StatisticsReport:
        """Get a project's report, refreshing it when ``force`` is set."""
        if force:
            self._memo[project_id] = self._cache.force_refresh(project_id)
        elif project_id not in self._memo:
            self._memo[project_id] = self._cache.get(project_id)
        return self._memo[project_id]
