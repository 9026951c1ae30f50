"""Pytest fixtures for sprinthealth tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest
import yaml

from sprinthealth.config import HealthConfig
from sprinthealth.providers import SnapshotStore
from sprinthealth.statistics import ReportBuilder

TODAY = date(2024, 3, 20)


def sprint_burndown(committed: float, accepted: float, hours: float = 0) -> dict[str, Any]:
    """Two-day sprint burndown: start snapshot and final snapshot."""
    return {
        "points_committed": [committed, committed],
        "points_accepted": [0, accepted],
        "hours_remaining": [hours, 0],
        "points_remaining": [committed, committed - accepted],
    }


def story_burndown(hours: float | None, points: float | None) -> dict[str, Any]:
    """Single-snapshot story burndown."""
    return {
        "points_committed": [None],
        "points_accepted": [None],
        "hours_remaining": [hours],
        "points_remaining": [points],
    }


@pytest.fixture
def today() -> date:
    """Reference date used across tests."""
    return TODAY


@pytest.fixture
def snapshot_data() -> dict[str, Any]:
    """Snapshot of an active project with three usable past sprints.

    - s0 has no burndown and is skipped
    - s3 has no sprint notes
    - b2 in the product backlog is unsized
    """
    return {
        "projects": [{"id": "p1", "name": "Webshop", "status": "active"}],
        "sprints": [
            {
                "id": "s0",
                "project_id": "p1",
                "start_date": "2024-01-22",
                "end_date": "2024-02-02",
                "status": "closed",
                "has_notes": True,
            },
            {
                "id": "s1",
                "project_id": "p1",
                "start_date": "2024-02-05",
                "end_date": "2024-02-16",
                "status": "closed",
                "has_notes": True,
                "burndown": sprint_burndown(20, 18, hours=40),
            },
            {
                "id": "s2",
                "project_id": "p1",
                "start_date": "2024-02-19",
                "end_date": "2024-03-01",
                "status": "closed",
                "has_notes": True,
                "burndown": sprint_burndown(22, 22, hours=44),
            },
            {
                "id": "s3",
                "project_id": "p1",
                "start_date": "2024-03-04",
                "end_date": "2024-03-15",
                "status": "closed",
                "has_notes": False,
                "burndown": sprint_burndown(21, 20, hours=42),
            },
            {
                "id": "s4",
                "project_id": "p1",
                "start_date": "2024-03-18",
                "end_date": "2024-03-29",
                "status": "open",
                "has_activity": True,
                "burndown": {
                    "points_committed": [18],
                    "points_accepted": [0],
                    "hours_remaining": [30],
                    "points_remaining": [18],
                },
            },
        ],
        "stories": [
            {"id": "b1", "project_id": "p1", "position": 1, "story_points": 3},
            {"id": "b2", "project_id": "p1", "position": 2},
            {
                "id": "st1",
                "project_id": "p1",
                "sprint_id": "s1",
                "story_points": 5,
                "burndown": story_burndown(10, 5),
            },
            {
                "id": "st2",
                "project_id": "p1",
                "sprint_id": "s2",
                "story_points": 3,
                "burndown": story_burndown(9, 3),
            },
            {
                "id": "st3",
                "project_id": "p1",
                "sprint_id": "s3",
                "story_points": 8,
                "burndown": story_burndown(20, 8),
            },
            {
                "id": "t1",
                "project_id": "p1",
                "sprint_id": "s4",
                "tracker": "task",
                "estimated_hours": 4,
            },
        ],
    }


@pytest.fixture
def store(snapshot_data: dict[str, Any]) -> SnapshotStore:
    """SnapshotStore over the sample snapshot."""
    return SnapshotStore.from_dict(snapshot_data)


@pytest.fixture
def builder(store: SnapshotStore, today: date) -> ReportBuilder:
    """ReportBuilder over the sample snapshot with a fixed date."""
    return ReportBuilder.from_store(store, HealthConfig(), today=lambda: today)


@pytest.fixture
def snapshot_file(tmp_path: Path, snapshot_data: dict[str, Any]) -> Path:
    """The sample snapshot written to a YAML file."""
    path = tmp_path / "snapshot.yaml"
    path.write_text(yaml.safe_dump(snapshot_data))
    return path
