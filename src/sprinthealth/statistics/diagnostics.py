"""Diagnostic rules and the registry that runs them."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

import structlog

from sprinthealth.config import HealthConfig
from sprinthealth.context import ProjectContext
from sprinthealth.exceptions import ReportBuildError
from sprinthealth.models import Burndown, Tracker
from sprinthealth.statistics.metrics import SprintMetrics, stddev_like

logger = structlog.get_logger()

YIELD_SPREAD_LIMIT = 10
VELOCITY_SPREAD_LIMIT = 4
SIZING_SPREAD_LIMIT = 4


class Outcome(str, Enum):
    """Result of a diagnostic rule."""

    PASS = "pass"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class DiagnosticOutcome:
    """Outcome of a single named rule."""

    name: str
    outcome: Outcome


Rule = Callable[[ProjectContext, SprintMetrics], Outcome]


def _verdict(passed: bool) -> Outcome:
    return Outcome.PASS if passed else Outcome.FAIL


def product_backlog_filled(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """An active project has stories in its product backlog."""
    return _verdict(not context.project.is_active or len(context.product_backlog) != 0)


def product_backlog_sized(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Every story at the top of the product backlog has points."""
    return _verdict(all(s.story_points is not None for s in context.product_backlog))


def sprints_sized(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Every story in recent sprints has points."""
    return _verdict(
        not any(
            item.tracker == Tracker.STORY and item.story_points is None
            for item in context.sprint_items
        )
    )


def sprints_estimated(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Every task in recent sprints has an hour estimate."""
    return _verdict(
        not any(
            item.tracker == Tracker.TASK and item.estimated_hours is None
            for item in context.sprint_items
        )
    )


def sprint_notes_available(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Every past sprint has notes."""
    return _verdict(all(s.has_notes for s in context.past_sprints))


def active(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """An active project has an active sprint with recent activity."""
    if not context.project.is_active:
        return Outcome.PASS
    sprint = context.active_sprint
    return _verdict(sprint is not None and sprint.has_activity)


def sprint_yield(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Share of committed points accepted per sprint is stable.

    Not applicable until some past sprint has committed points.
    """
    ratios = []
    for sprint in context.past_sprints:
        if sprint.burndown is None:
            continue
        committed = Burndown.last(sprint.burndown.points_committed)
        accepted = Burndown.last(sprint.burndown.points_accepted)
        if committed is None or accepted is None or committed <= 0:
            continue
        ratios.append(min((accepted * 100.0) / committed, 100.0))

    if not ratios:
        return Outcome.NOT_APPLICABLE
    return _verdict(stddev_like(ratios) < YIELD_SPREAD_LIMIT)


def committed_velocity_stable(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Velocity does not vary much between sprints.

    Not applicable to a project without sprints. Once any sprint exists, an
    undefined spread fails.
    """
    if not context.all_sprints:
        return Outcome.NOT_APPLICABLE
    spread = metrics.velocity_spread
    return _verdict(spread is not None and spread < VELOCITY_SPREAD_LIMIT)


def sizing_consistent(context: ProjectContext, metrics: SprintMetrics) -> Outcome:
    """Hours per story point do not vary much between stories."""
    if not metrics.hours_per_point:
        return Outcome.NOT_APPLICABLE
    return _verdict(metrics.hours_per_point_spread < SIZING_SPREAD_LIMIT)


DIAGNOSTIC_RULES: dict[str, Rule] = {
    "active": active,
    "committed_velocity_stable": committed_velocity_stable,
    "product_backlog_filled": product_backlog_filled,
    "product_backlog_sized": product_backlog_sized,
    "sizing_consistent": sizing_consistent,
    "sprint_notes_available": sprint_notes_available,
    "sprints_estimated": sprints_estimated,
    "sprints_sized": sprints_sized,
    "yield": sprint_yield,
}


class DiagnosticRegistry:
    """Named diagnostic rules, run in sorted name order.

    Example:
        >>> registry = DiagnosticRegistry()
        >>> succeeded, failed = registry.run(context, metrics)
    """

    def __init__(self, rules: Mapping[str, Rule] | None = None) -> None:
        """Initialize the registry.

        Args:
            rules: Rule table, defaults to DIAGNOSTIC_RULES.
        """
        self._rules = dict(DIAGNOSTIC_RULES if rules is None else rules)
        self._log = logger.bind(component="DiagnosticRegistry")

    def available(self) -> list[str]:
        """All rule names, sorted."""
        return sorted(self._rules)

    def active(self, config: HealthConfig | None = None) -> list[str]:
        """Rule names not disabled by configuration, sorted.

        Disabled names that match no rule are ignored.
        """
        if config is None:
            return self.available()
        return [name for name in self.available() if not config.is_rule_disabled(name)]

    def evaluate(
        self, context: ProjectContext, metrics: SprintMetrics
    ) -> list[DiagnosticOutcome]:
        """Evaluate every active rule, including not-applicable outcomes.

        Args:
            context: The project context.
            metrics: Metrics computed from the context.

        Returns:
            Outcomes in rule name order.

        Raises:
            ReportBuildError: If a rule raises.
        """
        outcomes = []
        names = [n for n in self.available() if n not in context.disabled_rules]
        for name in names:
            try:
                outcome = self._rules[name](context, metrics)
            except Exception as e:
                msg = f"Diagnostic '{name}' failed: {e}"
                raise ReportBuildError(
                    msg, project_id=context.project_id, rule=name, kind="diagnostic"
                ) from e
            outcomes.append(DiagnosticOutcome(name=name, outcome=outcome))

        self._log.debug(
            "Evaluated diagnostics",
            project_id=context.project_id,
            evaluated=len(outcomes),
            disabled=sorted(set(self._rules) & context.disabled_rules),
        )
        return outcomes

    def run(
        self, context: ProjectContext, metrics: SprintMetrics
    ) -> tuple[list[str], list[str]]:
        """Run the active rules and partition them by outcome.

        Returns:
            Tuple of (succeeded, failed) rule names; not-applicable rules
            appear in neither.
        """
        succeeded: list[str] = []
        failed: list[str] = []
        for result in self.evaluate(context, metrics):
            if result.outcome == Outcome.PASS:
                succeeded.append(result.name)
            elif result.outcome == Outcome.FAIL:
                failed.append(result.name)
        return succeeded, failed
