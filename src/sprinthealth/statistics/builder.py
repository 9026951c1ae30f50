"""Report build pipeline: context, metrics, diagnostics, stats and score."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any

import structlog

from sprinthealth.config import HealthConfig
from sprinthealth.context import ProjectContext, build_context
from sprinthealth.statistics.diagnostics import DiagnosticOutcome, DiagnosticRegistry, Outcome
from sprinthealth.statistics.metrics import SprintMetrics, compute_metrics
from sprinthealth.statistics.report import StatisticsReport
from sprinthealth.statistics.score import compute_score
from sprinthealth.statistics.stats import StatRegistry

if TYPE_CHECKING:
    from sprinthealth.providers.base import (
        BacklogProvider,
        BurndownProvider,
        ProjectProvider,
        SprintProvider,
    )
    from sprinthealth.providers.snapshot import SnapshotStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class Evaluation:
    """A report together with the inputs and outcomes it was built from.

    Attributes:
        context: The project context.
        metrics: Metrics computed from the context.
        outcomes: Every evaluated rule, including not-applicable ones.
        report: The resulting report.
    """

    context: ProjectContext
    metrics: SprintMetrics
    outcomes: tuple[DiagnosticOutcome, ...]
    report: StatisticsReport

    @property
    def no_active_sprint(self) -> bool:
        """Informational: the project has no sprint running today."""
        return self.context.active_sprint is None

    @property
    def not_applicable(self) -> list[str]:
        """Names of rules that deemed themselves irrelevant."""
        return [o.name for o in self.outcomes if o.outcome == Outcome.NOT_APPLICABLE]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "project_id": self.context.project_id,
            "today": self.context.today.isoformat(),
            "no_active_sprint": self.no_active_sprint,
            "metrics": self.metrics.to_dict(),
            "outcomes": {o.name: o.outcome.value for o in self.outcomes},
            "report": self.report.to_dict(),
        }


class ReportBuilder:
    """Builds StatisticsReports from the data providers.

    Every build reads fresh data; caching is the job of ReportCache.

    Example:
        >>> builder = ReportBuilder.from_store(store, HealthConfig())
        >>> builder.build("p1").score
        100
    """

    def __init__(
        self,
        *,
        projects: ProjectProvider,
        sprints: SprintProvider,
        burndowns: BurndownProvider,
        backlog: BacklogProvider,
        config: HealthConfig | None = None,
        diagnostics: DiagnosticRegistry | None = None,
        stats: StatRegistry | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the builder.

        Args:
            projects: Project lookup.
            sprints: Sprint retrieval.
            burndowns: Burndown retrieval.
            backlog: Backlog retrieval.
            config: Health configuration.
            diagnostics: Diagnostic rules to run.
            stats: Stat extractors to run.
            today: Source of the reference date.
        """
        self.config = config or HealthConfig.default()
        self.diagnostics = diagnostics or DiagnosticRegistry()
        self.stats = stats or StatRegistry()
        self._projects = projects
        self._sprints = sprints
        self._burndowns = burndowns
        self._backlog = backlog
        self._today = today
        self._log = logger.bind(component="ReportBuilder")

    @classmethod
    def from_store(
        cls,
        store: SnapshotStore,
        config: HealthConfig | None = None,
        **kwargs: Any,
    ) -> ReportBuilder:
        """Create a builder that reads everything from one snapshot store."""
        return cls(
            projects=store,
            sprints=store,
            burndowns=store,
            backlog=store,
            config=config,
            **kwargs,
        )

    def context(self, project_id: str) -> ProjectContext:
        """Assemble the project context for today."""
        return build_context(
            project_id,
            projects=self._projects,
            sprints=self._sprints,
            burndowns=self._burndowns,
            backlog=self._backlog,
            config=self.config,
            today=self._today(),
            rule_names=self.diagnostics.available(),
        )

    def evaluate_context(self, context: ProjectContext) -> Evaluation:
        """Run metrics, diagnostics, stats and scoring over a context.

        Raises:
            ReportBuildError: If a rule or stat extractor raises.
        """
        metrics = compute_metrics(context)
        outcomes = self.diagnostics.evaluate(context, metrics)

        succeeded = [o.name for o in outcomes if o.outcome == Outcome.PASS]
        failed = [o.name for o in outcomes if o.outcome == Outcome.FAIL]
        values = self.stats.run(context, metrics)

        report = StatisticsReport(
            succeeded=tuple(succeeded),
            failed=tuple(failed),
            values=values,
            score=compute_score(succeeded, failed),
        )
        return Evaluation(
            context=context,
            metrics=metrics,
            outcomes=tuple(outcomes),
            report=report,
        )

    def evaluate(self, project_id: str) -> Evaluation:
        """Build a report for a project and keep the intermediate results."""
        return self.evaluate_context(self.context(project_id))

    def build(self, project_id: str) -> StatisticsReport:
        """Build a fresh report for a project.

        Args:
            project_id: Project identifier.

        Returns:
            The computed StatisticsReport.

        Raises:
            ReportBuildError: If a rule or stat extractor raises.
            ProviderError: If project data cannot be loaded.
        """
        log = self._log.bind(project_id=project_id)
        log.info("Building health report")

        report = self.evaluate(project_id).report

        log.info(
            "Built health report",
            score=report.score,
            succeeded=len(report.succeeded),
            failed=len(report.failed),
        )
        return report
