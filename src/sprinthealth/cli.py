"""CLI interface for sprinthealth."""

from __future__ import annotations

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import structlog
import typer

from sprinthealth import __version__
from sprinthealth.cache import FileCacheStore, ReportCache
from sprinthealth.config import HealthConfig, HealthSettings
from sprinthealth.exceptions import SprintHealthError
from sprinthealth.providers import SnapshotStore
from sprinthealth.statistics import DiagnosticRegistry, ReportBuilder

logger = structlog.get_logger()


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog console output on stderr.

    Only warnings and errors are shown unless ``verbose`` is set, so that
    ``--json`` output on stdout stays parseable.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


app = typer.Typer(
    name="sprinthealth",
    help="Sprint health reports for iterative projects",
    no_args_is_help=True,
)

DataOption = Annotated[
    Path,
    typer.Option(
        "--data",
        "-d",
        help="Project snapshot YAML file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="HealthConfig YAML file (defaults to $SPRINTHEALTH_CONFIG)",
        dir_okay=False,
        resolve_path=True,
    ),
]
TodayOption = Annotated[
    str | None,
    typer.Option("--today", help="Reference date (YYYY-MM-DD), defaults to today"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sprinthealth version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging on stderr."),
    ] = False,
) -> None:
    """sprinthealth - sprint health reports."""
    configure_logging(verbose)


def _load_config(settings: HealthSettings, config_path: Path | None) -> HealthConfig:
    if config_path is not None:
        return HealthConfig.load(config_path)
    return settings.load_config()


def _parse_today(today: str | None) -> date:
    if today is None:
        return date.today()
    try:
        return date.fromisoformat(today)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid date '{today}', expected YYYY-MM-DD") from e


def _builder(data: Path, config: HealthConfig, today: str | None) -> ReportBuilder:
    day = _parse_today(today)
    return ReportBuilder.from_store(SnapshotStore.load(data), config, today=lambda: day)


@app.command()
def report(
    project_id: Annotated[str, typer.Argument(help="Project to report on")],
    data: DataOption,
    config_path: ConfigOption = None,
    cache_dir: Annotated[
        Path | None,
        typer.Option(
            "--cache-dir",
            help="Report cache directory (defaults to $SPRINTHEALTH_CACHE_DIR)",
            file_okay=False,
            resolve_path=True,
        ),
    ] = None,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", "-r", help="Recompute and replace the cached report"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON instead of human-readable format"),
    ] = False,
    today: TodayOption = None,
) -> None:
    """Show the cached health report of a project, computing it if needed."""
    log = logger.bind(command="report", project_id=project_id)

    try:
        settings = HealthSettings()
        config = _load_config(settings, config_path)
        store = FileCacheStore(cache_dir or settings.cache_dir)
        cache = ReportCache(_builder(data, config, today), store)
        result = cache.force_refresh(project_id) if refresh else cache.get(project_id)
    except SprintHealthError as e:
        log.error("Failed to build report", error=str(e))
        raise typer.Exit(1) from e

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"Project: {project_id}")
    typer.echo(f"Score: {result.score}%")
    typer.echo("")
    for name in result.succeeded:
        typer.echo(f"  PASS  {name}")
    for name in result.failed:
        typer.echo(f"  FAIL  {name}")
    if result.values:
        typer.echo("")
        for name, value in result.values.items():
            typer.echo(f"  {name}: {value:g}")


@app.command()
def explain(
    project_id: Annotated[str, typer.Argument(help="Project to explain")],
    data: DataOption,
    config_path: ConfigOption = None,
    today: TodayOption = None,
) -> None:
    """Compute a report without the cache and show every intermediate result."""
    log = logger.bind(command="explain", project_id=project_id)

    try:
        config = _load_config(HealthSettings(), config_path)
        evaluation = _builder(data, config, today).evaluate(project_id)
    except SprintHealthError as e:
        log.error("Failed to evaluate project", error=str(e))
        raise typer.Exit(1) from e

    typer.echo(json.dumps(evaluation.to_dict(), indent=2))


@app.command()
def rules(config_path: ConfigOption = None) -> None:
    """List diagnostic rules and whether they are enabled."""
    try:
        config = _load_config(HealthSettings(), config_path)
    except SprintHealthError as e:
        logger.error("Failed to load config", error=str(e))
        raise typer.Exit(1) from e

    registry = DiagnosticRegistry()
    enabled = set(registry.active(config))
    for name in registry.available():
        state = "enabled" if name in enabled else "disabled"
        typer.echo(f"{name}: {state}")


if __name__ == "__main__":
    app()
