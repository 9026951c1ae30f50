"""Pydantic schemas for sprint, story and project data."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class SprintStatus(str, Enum):
    """Status of a sprint."""

    OPEN = "open"
    LOCKED = "locked"
    CLOSED = "closed"


class ProjectStatus(str, Enum):
    """Status of a project."""

    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"


class Tracker(str, Enum):
    """Tracker classification of a backlog item."""

    STORY = "story"
    TASK = "task"


class Burndown(BaseModel):
    """Day-indexed progress snapshots, counting up from the sprint start.

    Index 0 is the snapshot at sprint start, the last index is the latest
    (or final) snapshot. Individual snapshots may be missing (None).

    Attributes:
        points_committed: Story points committed per day.
        points_accepted: Story points accepted per day.
        hours_remaining: Remaining task hours per day.
        points_remaining: Story points remaining per day.
    """

    points_committed: list[float | None] = Field(default_factory=list)
    points_accepted: list[float | None] = Field(default_factory=list)
    hours_remaining: list[float | None] = Field(default_factory=list)
    points_remaining: list[float | None] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_equal_length(self) -> Burndown:
        """Ensure all series cover the same days."""
        lengths = {
            len(self.points_committed),
            len(self.points_accepted),
            len(self.hours_remaining),
            len(self.points_remaining),
        }
        if len(lengths) > 1:
            msg = "Burndown series must have equal length"
            raise ValueError(msg)
        return self

    @property
    def is_empty(self) -> bool:
        """Whether the burndown has no snapshots at all."""
        return len(self.points_committed) == 0

    @staticmethod
    def first(series: list[float | None]) -> float | None:
        """Start-of-sprint value of a series, None when absent."""
        return series[0] if series else None

    @staticmethod
    def last(series: list[float | None]) -> float | None:
        """Latest value of a series, None when absent."""
        return series[-1] if series else None


class Sprint(BaseModel):
    """A time-boxed sprint and its burndown.

    Attributes:
        id: Sprint identifier.
        project_id: Owning project.
        name: Display name.
        start_date: First day of the sprint.
        end_date: Last day of the sprint (None until scheduled).
        status: Sprint status.
        burndown: Progress snapshots, None when no data was recorded.
        has_notes: Whether sprint notes (wiki page) exist.
        has_activity: Whether there was recent activity in the sprint.
    """

    id: str
    project_id: str = ""
    name: str = ""
    start_date: date | None = None
    end_date: date | None = None
    status: SprintStatus = SprintStatus.OPEN
    burndown: Burndown | None = None
    has_notes: bool = False
    has_activity: bool = False

    @property
    def has_burndown(self) -> bool:
        """Whether the sprint has usable progress data."""
        return self.burndown is not None and not self.burndown.is_empty

    def days(self) -> int:
        """Number of calendar days in the sprint, both ends inclusive."""
        if self.start_date is None or self.end_date is None:
            return 0
        return max((self.end_date - self.start_date).days + 1, 0)

    def covers(self, day: date) -> bool:
        """Whether the given day falls within the sprint dates."""
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= day <= self.end_date


class Story(BaseModel):
    """A backlog item (story or task).

    Attributes:
        id: Item identifier.
        project_id: Owning project.
        subject: Short title.
        tracker: Story or task.
        sprint_id: Sprint the item is assigned to, None for the product backlog.
        position: Priority position in the product backlog (lower is higher).
        story_points: Point estimate, None when unsized.
        estimated_hours: Hour estimate, None when unestimated.
        burndown: Per-item progress; hours_remaining and points_remaining are used.
    """

    id: str
    project_id: str = ""
    subject: str = ""
    tracker: Tracker = Tracker.STORY
    sprint_id: str | None = None
    position: int = 0
    story_points: float | None = None
    estimated_hours: float | None = None
    burndown: Burndown | None = None


class ProjectInfo(BaseModel):
    """Identity and status of a project."""

    id: str
    name: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        """Whether the project is active."""
        return self.status == ProjectStatus.ACTIVE
