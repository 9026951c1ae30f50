"""Project context assembly for health report computation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

import structlog

from sprinthealth.models import ProjectInfo, Sprint, Story

if TYPE_CHECKING:
    from sprinthealth.config import HealthConfig
    from sprinthealth.providers.base import (
        BacklogProvider,
        BurndownProvider,
        ProjectProvider,
        SprintProvider,
    )

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProjectContext:
    """Everything a health report is computed from.

    Attributes:
        project: Project identity and status.
        today: Reference date.
        active_sprint: Open sprint covering today, if any.
        past_sprints: Ended sprints with burndown data, most recent first.
        product_backlog: Top of the product backlog.
        sprint_items: Stories and tasks assigned to the past and active sprints.
        disabled_rules: Names of administratively disabled diagnostic rules.
    """

    project: ProjectInfo
    today: date
    active_sprint: Sprint | None = None
    past_sprints: tuple[Sprint, ...] = ()
    product_backlog: tuple[Story, ...] = ()
    sprint_items: tuple[Story, ...] = ()
    disabled_rules: frozenset[str] = field(default_factory=frozenset)

    @property
    def project_id(self) -> str:
        """Identifier of the project."""
        return self.project.id

    @property
    def all_sprints(self) -> tuple[Sprint, ...]:
        """Past sprints followed by the active sprint, if any."""
        if self.active_sprint is None:
            return self.past_sprints
        return (*self.past_sprints, self.active_sprint)

    def items_in(self, sprint: Sprint) -> list[Story]:
        """Items assigned to the given sprint."""
        return [item for item in self.sprint_items if item.sprint_id == sprint.id]


def _with_burndown(sprint: Sprint, burndowns: BurndownProvider) -> Sprint:
    return sprint.model_copy(update={"burndown": burndowns.burndown(sprint)})


def build_context(
    project_id: str,
    *,
    projects: ProjectProvider,
    sprints: SprintProvider,
    burndowns: BurndownProvider,
    backlog: BacklogProvider,
    config: HealthConfig,
    today: date,
    rule_names: list[str] | None = None,
) -> ProjectContext:
    """Assemble a ProjectContext from the data providers.

    Past sprints are limited before sprints without burndown data are
    dropped, so fewer than ``past_sprint_limit`` sprints may remain.

    Args:
        project_id: Project identifier.
        projects: Project lookup.
        sprints: Sprint retrieval.
        burndowns: Burndown retrieval.
        backlog: Backlog retrieval.
        config: Health configuration.
        today: Reference date.
        rule_names: Known rule names, used to resolve disabled rules.

    Returns:
        A fresh ProjectContext.
    """
    log = logger.bind(component="context", project_id=project_id)

    project = projects.get_project(project_id)

    active = sprints.active_sprint(project_id, today)
    if active is not None:
        active = _with_burndown(active, burndowns)

    candidates = sprints.past_sprints(project_id, today, config.past_sprint_limit)
    past = [_with_burndown(s, burndowns) for s in candidates]
    past = [s for s in past if s.has_burndown]

    product_backlog = backlog.product_backlog(project_id, config.product_backlog_limit)

    sprint_ids = [s.id for s in past]
    if active is not None:
        sprint_ids.append(active.id)
    items = backlog.sprint_items(sprint_ids) if sprint_ids else []

    disabled = frozenset(
        name for name in (rule_names or []) if config.is_rule_disabled(name)
    )

    log.debug(
        "Built project context",
        active_sprint=active.id if active else None,
        past_sprints=len(past),
        skipped_without_burndown=len(candidates) - len(past),
        backlog_items=len(product_backlog),
        disabled_rules=sorted(disabled),
    )

    return ProjectContext(
        project=project,
        today=today,
        active_sprint=active,
        past_sprints=tuple(past),
        product_backlog=tuple(product_backlog),
        sprint_items=tuple(items),
        disabled_rules=disabled,
    )
