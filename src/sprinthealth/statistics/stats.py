"""Named numeric stats exported alongside the diagnostics."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

import structlog

from sprinthealth.context import ProjectContext
from sprinthealth.exceptions import ReportBuildError
from sprinthealth.statistics.metrics import SprintMetrics

logger = structlog.get_logger()

StatExtractor = Callable[[ProjectContext, SprintMetrics], float | None]


def sprints(context: ProjectContext, metrics: SprintMetrics) -> int:
    return len(context.past_sprints)


def velocity(context: ProjectContext, metrics: SprintMetrics) -> float | None:
    if not metrics.velocity:
        return None
    return metrics.velocity_mean


def velocity_stddev(context: ProjectContext, metrics: SprintMetrics) -> float | None:
    return metrics.velocity_spread


def sizing_stddev(context: ProjectContext, metrics: SprintMetrics) -> float | None:
    return metrics.hours_per_point_spread


def hours_per_point(context: ProjectContext, metrics: SprintMetrics) -> float | None:
    return metrics.hours_per_point_mean


STAT_EXTRACTORS: dict[str, StatExtractor] = {
    "hours_per_point": hours_per_point,
    "sizing_stddev": sizing_stddev,
    "sprints": sprints,
    "velocity": velocity,
    "velocity_stddev": velocity_stddev,
}


def is_reportable(value: float | int | None) -> bool:
    """Whether a stat value is present and finite."""
    return value is not None and math.isfinite(value)


class StatRegistry:
    """Named stat extractors, run in sorted name order."""

    def __init__(self, extractors: Mapping[str, StatExtractor] | None = None) -> None:
        """Initialize the registry.

        Args:
            extractors: Extractor table, defaults to STAT_EXTRACTORS.
        """
        self._extractors = dict(STAT_EXTRACTORS if extractors is None else extractors)
        self._log = logger.bind(component="StatRegistry")

    def available(self) -> list[str]:
        """All stat names, sorted."""
        return sorted(self._extractors)

    def run(self, context: ProjectContext, metrics: SprintMetrics) -> dict[str, float]:
        """Extract all stats, dropping absent and non-finite values.

        Raises:
            ReportBuildError: If an extractor raises.
        """
        values: dict[str, float] = {}
        for name in self.available():
            try:
                value = self._extractors[name](context, metrics)
            except Exception as e:
                msg = f"Stat '{name}' failed: {e}"
                raise ReportBuildError(
                    msg, project_id=context.project_id, rule=name, kind="stat"
                ) from e
            if is_reportable(value):
                values[name] = value
            else:
                self._log.debug("Omitted stat", stat=name, value=value)
        return values
