"""Snapshot-backed provider implementation.

A snapshot is a YAML (or in-memory) description of projects, sprints and
stories. It implements every provider protocol and is used by the CLI and
the test suite.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from sprinthealth.exceptions import ProviderError
from sprinthealth.models import Burndown, ProjectInfo, Sprint, SprintStatus, Story, Tracker

logger = structlog.get_logger()


class Snapshot(BaseModel):
    """All project data available to the snapshot store.

    Attributes:
        projects: Known projects.
        sprints: Sprints of all projects, burndowns inline.
        stories: Stories and tasks of all projects.
    """

    projects: list[ProjectInfo] = Field(default_factory=list)
    sprints: list[Sprint] = Field(default_factory=list)
    stories: list[Story] = Field(default_factory=list)


class SnapshotStore:
    """Serves project data from a Snapshot.

    Example:
        >>> store = SnapshotStore.load(Path("snapshot.yaml"))
        >>> store.get_project("p1").status
        <ProjectStatus.ACTIVE: 'active'>
    """

    def __init__(self, snapshot: Snapshot) -> None:
        """Initialize the store.

        Args:
            snapshot: The data to serve.
        """
        self._snapshot = snapshot
        self._projects = {p.id: p for p in snapshot.projects}
        self._log = logger.bind(component="SnapshotStore")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotStore:
        """Create a store from raw snapshot data.

        Raises:
            ProviderError: If the data does not match the snapshot schema.
        """
        try:
            return cls(Snapshot.model_validate(data))
        except ValidationError as e:
            msg = f"Invalid snapshot: {e}"
            raise ProviderError(msg) from e

    @classmethod
    def load(cls, path: Path) -> SnapshotStore:
        """Load a snapshot from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            SnapshotStore serving the file's data.

        Raises:
            ProviderError: If the file is missing or invalid.
        """
        if not path.exists():
            msg = f"Snapshot file not found: {path}"
            raise ProviderError(msg, source=path)

        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in snapshot: {e}"
            raise ProviderError(msg, source=path) from e

        if not isinstance(data, dict):
            msg = "Snapshot YAML must be a mapping"
            raise ProviderError(msg, source=path)

        try:
            return cls(Snapshot.model_validate(data))
        except ValidationError as e:
            msg = f"Invalid snapshot: {e}"
            raise ProviderError(msg, source=path) from e

    def get_project(self, project_id: str) -> ProjectInfo:
        project = self._projects.get(project_id)
        if project is None:
            msg = f"Project '{project_id}' not found"
            raise ProviderError(msg, project_id=project_id)
        return project

    def active_sprint(self, project_id: str, today: date) -> Sprint | None:
        for sprint in self._project_sprints(project_id):
            if sprint.status == SprintStatus.OPEN and sprint.covers(today):
                return sprint
        return None

    def past_sprints(self, project_id: str, today: date, limit: int) -> list[Sprint]:
        past = [
            s
            for s in self._project_sprints(project_id)
            if s.start_date is not None
            and s.end_date is not None
            and s.end_date < today
        ]
        past.sort(key=lambda s: s.end_date, reverse=True)
        return past[:limit]

    def burndown(self, sprint: Sprint) -> Burndown | None:
        return sprint.burndown

    def product_backlog(self, project_id: str, limit: int) -> list[Story]:
        backlog = [
            s
            for s in self._snapshot.stories
            if s.project_id == project_id
            and s.sprint_id is None
            and s.tracker == Tracker.STORY
        ]
        backlog.sort(key=lambda s: s.position)
        return backlog[:limit]

    def sprint_items(self, sprint_ids: list[str]) -> list[Story]:
        wanted = set(sprint_ids)
        return [s for s in self._snapshot.stories if s.sprint_id in wanted]

    def _project_sprints(self, project_id: str) -> list[Sprint]:
        return [s for s in self._snapshot.sprints if s.project_id == project_id]
