"""Throughput, velocity and sizing metrics derived from sprint history."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sprinthealth.context import ProjectContext
from sprinthealth.models import Burndown, Tracker


def stddev_like(values: Sequence[float]) -> float:
    """Spread measure used by the stability and consistency diagnostics.

    This is sqrt(1 / (n * S)) where S is the sum of squared deviations from
    the mean, not the conventional standard deviation. The diagnostic
    thresholds are calibrated against this scale.

    Args:
        values: Samples.

    Returns:
        The spread; NaN for no samples, +inf when all samples are equal.
    """
    n = len(values)
    if n == 0:
        return math.nan

    average = sum(values) / float(n)
    squares = sum((v - average) ** 2 for v in values)
    if squares == 0:
        return math.inf

    variance = 1.0 / (n * squares)
    return math.sqrt(variance)


def mean(values: Sequence[float]) -> float | None:
    """Arithmetic mean, None for no samples."""
    if not values:
        return None
    return sum(values) / len(values)


@dataclass(frozen=True)
class SprintMetrics:
    """Derived metrics for a project.

    Attributes:
        points_per_day: Committed points per sprint day over past sprints.
        velocity: Accepted points at the end of each past sprint.
        velocity_mean: Mean of velocity, None without samples.
        velocity_spread: stddev_like of velocity, None without samples.
        hours_per_point: Hours-per-point ratios of sprint stories.
        hours_per_point_mean: Mean of hours_per_point, None without samples.
        hours_per_point_spread: stddev_like of hours_per_point (NaN without samples).
    """

    points_per_day: float | None = None
    velocity: tuple[float, ...] = ()
    velocity_mean: float | None = None
    velocity_spread: float | None = None
    hours_per_point: tuple[float, ...] = ()
    hours_per_point_mean: float | None = None
    hours_per_point_spread: float = math.nan

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "points_per_day": self.points_per_day,
            "velocity": list(self.velocity),
            "velocity_mean": self.velocity_mean,
            "velocity_spread": self.velocity_spread,
            "hours_per_point": list(self.hours_per_point),
            "hours_per_point_mean": self.hours_per_point_mean,
            "hours_per_point_spread": self.hours_per_point_spread,
        }


def _points_per_day(context: ProjectContext) -> float | None:
    if not context.past_sprints:
        return None

    committed = []
    days = 0
    for sprint in context.past_sprints:
        if sprint.burndown is None:
            continue
        start = Burndown.first(sprint.burndown.points_committed)
        if start is not None:
            committed.append(start)
        days += sprint.days()

    if days == 0:
        return None
    return sum(committed) / days


def _velocity(context: ProjectContext) -> list[float]:
    samples = []
    for sprint in context.past_sprints:
        if sprint.burndown is None:
            continue
        accepted = Burndown.last(sprint.burndown.points_accepted)
        if accepted is not None:
            samples.append(accepted)
    return samples


def _hours_per_point(context: ProjectContext) -> list[float]:
    samples = []
    for sprint in context.all_sprints:
        for story in context.items_in(sprint):
            if story.tracker != Tracker.STORY or story.burndown is None:
                continue
            hours = Burndown.first(story.burndown.hours_remaining)
            points = Burndown.first(story.burndown.points_remaining)
            if hours is None or points is None or points == 0:
                continue
            samples.append(hours / float(points))
    return samples


def compute_metrics(context: ProjectContext) -> SprintMetrics:
    """Compute derived metrics for a project context.

    Missing snapshots are excluded from the aggregates rather than counted
    as zero.

    Args:
        context: The project context.

    Returns:
        SprintMetrics for the context.
    """
    velocity = _velocity(context)
    hours_per_point = _hours_per_point(context)

    return SprintMetrics(
        points_per_day=_points_per_day(context),
        velocity=tuple(velocity),
        velocity_mean=mean(velocity),
        velocity_spread=stddev_like(velocity) if velocity else None,
        hours_per_point=tuple(hours_per_point),
        hours_per_point_mean=mean(hours_per_point),
        hours_per_point_spread=stddev_like(hours_per_point),
    )
