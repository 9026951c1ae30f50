"""Configuration schema for sprinthealth."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from sprinthealth.exceptions import ConfigError

DEFAULT_CACHE_TTL_SECONDS = 4 * 60 * 60


class HealthConfig(BaseModel):
    """Configuration for health report computation.

    Attributes:
        past_sprint_limit: Maximum number of closed sprints considered.
        product_backlog_limit: Number of top-priority backlog stories inspected.
        cache_ttl_seconds: Lifetime of a cached report.
        disabled_rules: Diagnostic rules switched off by an administrator.
                        Example: {"sprint_notes_available": true}

    Example:
        >>> config = HealthConfig(disabled_rules={"yield": True})
        >>> config.is_rule_disabled("yield")
        True
    """

    past_sprint_limit: int = Field(default=5, ge=1)
    product_backlog_limit: int = Field(default=10, ge=1)
    cache_ttl_seconds: int = Field(default=DEFAULT_CACHE_TTL_SECONDS, ge=1)
    disabled_rules: dict[str, bool] = Field(
        default_factory=dict,
        description="Rule name to disabled flag",
    )

    def is_rule_disabled(self, name: str) -> bool:
        """Check whether a diagnostic rule is administratively disabled.

        Unknown rule names are never reported as disabled.
        """
        return bool(self.disabled_rules.get(name, False))

    def to_yaml(self) -> str:
        """Serialize the config to YAML.

        Returns:
            YAML string representation.
        """
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def save(self, path: Path) -> None:
        """Save the config to a YAML file.

        Args:
            path: Path to save the file.
        """
        path.write_text(self.to_yaml())

    @classmethod
    def from_yaml(cls, yaml_content: str) -> HealthConfig:
        """Parse config from YAML content.

        Args:
            yaml_content: YAML string to parse.

        Returns:
            Parsed HealthConfig instance.

        Raises:
            ConfigError: If the YAML is invalid or does not match the schema.
        """
        try:
            data: Any = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ConfigError(msg) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Config YAML must be a mapping"
            raise ConfigError(msg)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e

    @classmethod
    def load(cls, path: Path) -> HealthConfig:
        """Load config from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Loaded HealthConfig instance.

        Raises:
            ConfigError: If the file is missing or invalid.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg, config_path=path)

        try:
            return cls.from_yaml(path.read_text())
        except ConfigError as e:
            raise ConfigError(str(e), config_path=path) from e

    @classmethod
    def default(cls) -> HealthConfig:
        """Create a default configuration."""
        return cls()


class HealthSettings(BaseSettings):
    """Process-level settings for the sprinthealth CLI.

    Environment variables:
        SPRINTHEALTH_CONFIG: Path to a HealthConfig YAML file
        SPRINTHEALTH_CACHE_DIR: Directory for the file-backed report cache
    """

    config_path: Path | None = Field(
        default=None,
        validation_alias="SPRINTHEALTH_CONFIG",
        description="Path to a HealthConfig YAML file",
    )
    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".sprinthealth" / "cache",
        validation_alias="SPRINTHEALTH_CACHE_DIR",
        description="Directory for cached reports",
    )

    model_config = {
        "env_prefix": "",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def load_config(self) -> HealthConfig:
        """Load the configured HealthConfig, or defaults when none is set."""
        if self.config_path is None:
            return HealthConfig.default()
        return HealthConfig.load(self.config_path)
