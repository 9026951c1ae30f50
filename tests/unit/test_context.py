"""Unit tests for snapshot providers and context assembly."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest

from sprinthealth.config import HealthConfig
from sprinthealth.context import build_context
from sprinthealth.exceptions import ProviderError
from sprinthealth.models import Burndown, Sprint
from sprinthealth.providers import SnapshotStore
from sprinthealth.statistics import DiagnosticRegistry


def context_for(store: SnapshotStore, today: date, config: HealthConfig | None = None):
    return build_context(
        "p1",
        projects=store,
        sprints=store,
        burndowns=store,
        backlog=store,
        config=config or HealthConfig(),
        today=today,
        rule_names=DiagnosticRegistry().available(),
    )


class TestBurndown:
    """Tests for Burndown."""

    def test_unequal_lengths_rejected(self) -> None:
        with pytest.raises(ValueError):
            Burndown(points_committed=[1, 2], points_accepted=[1])

    def test_first_and_last(self) -> None:
        assert Burndown.first([3, None, 5]) == 3
        assert Burndown.last([3, None, 5]) == 5
        assert Burndown.first([]) is None
        assert Burndown.last([]) is None

    def test_is_empty(self) -> None:
        assert Burndown().is_empty
        assert not Sprint(id="s", burndown=Burndown()).has_burndown


class TestSprint:
    """Tests for Sprint."""

    def test_days_inclusive(self) -> None:
        sprint = Sprint(id="s", start_date=date(2024, 3, 4), end_date=date(2024, 3, 15))
        assert sprint.days() == 12

    def test_days_without_end(self) -> None:
        assert Sprint(id="s", start_date=date(2024, 3, 4)).days() == 0

    def test_covers(self) -> None:
        sprint = Sprint(id="s", start_date=date(2024, 3, 4), end_date=date(2024, 3, 15))
        assert sprint.covers(date(2024, 3, 15))
        assert not sprint.covers(date(2024, 3, 16))


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_unknown_project(self, store: SnapshotStore) -> None:
        with pytest.raises(ProviderError):
            store.get_project("nope")

    def test_active_sprint(self, store: SnapshotStore, today: date) -> None:
        sprint = store.active_sprint("p1", today)
        assert sprint is not None
        assert sprint.id == "s4"

    def test_no_active_sprint_after_end(self, store: SnapshotStore) -> None:
        assert store.active_sprint("p1", date(2024, 4, 1)) is None

    def test_past_sprints_ordered_and_limited(self, store: SnapshotStore, today: date) -> None:
        assert [s.id for s in store.past_sprints("p1", today, 5)] == ["s3", "s2", "s1", "s0"]
        assert [s.id for s in store.past_sprints("p1", today, 2)] == ["s3", "s2"]

    def test_product_backlog_by_position(self, store: SnapshotStore) -> None:
        assert [s.id for s in store.product_backlog("p1", 10)] == ["b1", "b2"]
        assert [s.id for s in store.product_backlog("p1", 1)] == ["b1"]

    def test_sprint_items(self, store: SnapshotStore) -> None:
        assert {s.id for s in store.sprint_items(["s1", "s4"])} == {"st1", "t1"}

    def test_invalid_data(self) -> None:
        with pytest.raises(ProviderError):
            SnapshotStore.from_dict({"sprints": [{"name": "no id"}]})

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ProviderError):
            SnapshotStore.load(tmp_path / "missing.yaml")

    def test_load_file(self, snapshot_file: Path) -> None:
        store = SnapshotStore.load(snapshot_file)
        assert store.get_project("p1").name == "Webshop"


class TestBuildContext:
    """Tests for build_context."""

    def test_sprints(self, store: SnapshotStore, today: date) -> None:
        context = context_for(store, today)

        assert context.active_sprint is not None
        assert context.active_sprint.id == "s4"
        assert [s.id for s in context.past_sprints] == ["s3", "s2", "s1"]
        assert [s.id for s in context.all_sprints] == ["s3", "s2", "s1", "s4"]

    def test_limit_applies_before_burndown_filter(
        self, store: SnapshotStore, today: date
    ) -> None:
        config = HealthConfig(past_sprint_limit=4)
        context = context_for(store, today, config)
        assert len(context.past_sprints) == 3

        config = HealthConfig(past_sprint_limit=1)
        context = context_for(store, today, config)
        assert [s.id for s in context.past_sprints] == ["s3"]

    def test_items_and_backlog(self, store: SnapshotStore, today: date) -> None:
        context = context_for(store, today)

        assert [s.id for s in context.product_backlog] == ["b1", "b2"]
        assert {s.id for s in context.sprint_items} == {"st1", "st2", "st3", "t1"}
        assert [s.id for s in context.items_in(context.past_sprints[0])] == ["st3"]

    def test_disabled_rules_resolved_by_name(self, store: SnapshotStore, today: date) -> None:
        config = HealthConfig(disabled_rules={"yield": True, "typo": True, "active": False})
        context = context_for(store, today, config)
        assert context.disabled_rules == frozenset({"yield"})

    def test_no_sprints(self, snapshot_data: dict[str, Any], today: date) -> None:
        snapshot_data["sprints"] = []
        context = context_for(SnapshotStore.from_dict(snapshot_data), today)

        assert context.active_sprint is None
        assert context.past_sprints == ()
        assert context.sprint_items == ()
