"""Protocol definitions for the data providers a report is built from."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sprinthealth.models import Burndown, ProjectInfo, Sprint, Story


class ProjectProvider(Protocol):
    """Looks up project identity and status."""

    def get_project(self, project_id: str) -> ProjectInfo:
        """Get a project.

        Args:
            project_id: Project identifier.

        Returns:
            ProjectInfo for the project.

        Raises:
            ProviderError: If the project does not exist.
        """
        ...


class SprintProvider(Protocol):
    """Sprint retrieval.

    Implementations can be filesystem-based, database-backed, etc.
    The report builder depends only on this interface.
    """

    def active_sprint(self, project_id: str, today: date) -> Sprint | None:
        """Get the open sprint whose dates include today.

        Args:
            project_id: Project identifier.
            today: Reference date.

        Returns:
            The active Sprint, or None.
        """
        ...

    def past_sprints(self, project_id: str, today: date, limit: int) -> list[Sprint]:
        """Get sprints that ended before today.

        Only sprints with both dates set are returned, ordered by end date
        descending and limited to ``limit`` entries.

        Args:
            project_id: Project identifier.
            today: Reference date.
            limit: Maximum number of sprints.

        Returns:
            List of Sprint objects.
        """
        ...


class BurndownProvider(Protocol):
    """Progress series retrieval."""

    def burndown(self, sprint: Sprint) -> Burndown | None:
        """Get the burndown of a sprint.

        Args:
            sprint: The sprint.

        Returns:
            Burndown, or None when no data was recorded.
        """
        ...


class BacklogProvider(Protocol):
    """Backlog item retrieval."""

    def product_backlog(self, project_id: str, limit: int) -> list[Story]:
        """Get the top of the prioritized product backlog.

        Args:
            project_id: Project identifier.
            limit: Number of stories to return.

        Returns:
            Stories ordered by priority.
        """
        ...

    def sprint_items(self, sprint_ids: list[str]) -> list[Story]:
        """Get stories and tasks assigned to the given sprints.

        Args:
            sprint_ids: Sprint identifiers.

        Returns:
            All items assigned to any of the sprints.
        """
        ...
