"""Data providers for health report computation."""

from sprinthealth.providers.base import (
    BacklogProvider,
    BurndownProvider,
    ProjectProvider,
    SprintProvider,
)
from sprinthealth.providers.snapshot import Snapshot, SnapshotStore

__all__ = [
    # Protocols
    "BacklogProvider",
    "BurndownProvider",
    "ProjectProvider",
    "SprintProvider",
    # Snapshot
    "Snapshot",
    "SnapshotStore",
]
