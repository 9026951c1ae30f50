"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from sprinthealth.config import DEFAULT_CACHE_TTL_SECONDS, HealthConfig, HealthSettings
from sprinthealth.exceptions import ConfigError


class TestHealthConfig:
    """Tests for HealthConfig."""

    def test_defaults(self) -> None:
        config = HealthConfig.default()
        assert config.past_sprint_limit == 5
        assert config.product_backlog_limit == 10
        assert config.cache_ttl_seconds == DEFAULT_CACHE_TTL_SECONDS == 14400
        assert config.disabled_rules == {}
        assert set(config.model_dump()) == {
            "past_sprint_limit",
            "product_backlog_limit",
            "cache_ttl_seconds",
            "disabled_rules",
        }

    def test_is_rule_disabled(self) -> None:
        config = HealthConfig(disabled_rules={"yield": True, "active": False})
        assert config.is_rule_disabled("yield")
        assert not config.is_rule_disabled("active")
        assert not config.is_rule_disabled("no_such_rule")

    def test_yaml_round_trip(self) -> None:
        config = HealthConfig(past_sprint_limit=3, disabled_rules={"yield": True})
        loaded = HealthConfig.from_yaml(config.to_yaml())
        assert loaded == config

    def test_empty_yaml_gives_defaults(self) -> None:
        assert HealthConfig.from_yaml("") == HealthConfig()

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ConfigError):
            HealthConfig.from_yaml("disabled_rules: [unclosed")

    def test_non_mapping_yaml(self) -> None:
        with pytest.raises(ConfigError):
            HealthConfig.from_yaml("- a\n- b\n")

    def test_schema_violation(self) -> None:
        with pytest.raises(ConfigError):
            HealthConfig.from_yaml("past_sprint_limit: 0\n")

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "health.yaml"
        HealthConfig(product_backlog_limit=20).save(path)
        assert HealthConfig.load(path).product_backlog_limit == 20

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            HealthConfig.load(tmp_path / "missing.yaml")
        assert exc_info.value.config_path == tmp_path / "missing.yaml"


class TestHealthSettings:
    """Tests for HealthSettings."""

    def test_reads_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_path = tmp_path / "health.yaml"
        config_path.write_text("past_sprint_limit: 2\n")
        monkeypatch.setenv("SPRINTHEALTH_CONFIG", str(config_path))
        monkeypatch.setenv("SPRINTHEALTH_CACHE_DIR", str(tmp_path / "cache"))

        settings = HealthSettings()

        assert settings.cache_dir == tmp_path / "cache"
        assert settings.load_config().past_sprint_limit == 2

    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SPRINTHEALTH_CONFIG", raising=False)
        monkeypatch.delenv("SPRINTHEALTH_CACHE_DIR", raising=False)

        settings = HealthSettings()

        assert settings.config_path is None
        assert settings.cache_dir.name == "cache"
        assert settings.load_config() == HealthConfig()
