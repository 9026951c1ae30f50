"""Health report computation: metrics, diagnostics, stats and score."""

from sprinthealth.statistics.builder import Evaluation, ReportBuilder
from sprinthealth.statistics.diagnostics import (
    DIAGNOSTIC_RULES,
    DiagnosticOutcome,
    DiagnosticRegistry,
    Outcome,
)
from sprinthealth.statistics.metrics import SprintMetrics, compute_metrics, stddev_like
from sprinthealth.statistics.report import StatisticsReport
from sprinthealth.statistics.score import compute_score
from sprinthealth.statistics.stats import STAT_EXTRACTORS, StatRegistry

__all__ = [
    # Builder
    "Evaluation",
    "ReportBuilder",
    # Diagnostics
    "DIAGNOSTIC_RULES",
    "DiagnosticOutcome",
    "DiagnosticRegistry",
    "Outcome",
    # Metrics
    "SprintMetrics",
    "compute_metrics",
    "stddev_like",
    # Report
    "StatisticsReport",
    # Score
    "compute_score",
    # Stats
    "STAT_EXTRACTORS",
    "StatRegistry",
]
