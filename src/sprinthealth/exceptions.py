"""Custom exceptions for sprinthealth."""

from pathlib import Path


class SprintHealthError(Exception):
    """Base exception for all sprinthealth errors."""

    pass


class ReportBuildError(SprintHealthError):
    """Raised when a diagnostic rule or stat extractor fails during a build."""

    def __init__(
        self,
        message: str,
        *,
        project_id: str = "",
        rule: str = "",
        kind: str = "",
    ) -> None:
        super().__init__(message)
        self.project_id = project_id
        self.rule = rule
        self.kind = kind


class ConfigError(SprintHealthError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Path | None = None,
        field: str = "",
    ) -> None:
        super().__init__(message)
        self.config_path = config_path
        self.field = field


class CacheError(SprintHealthError):
    """Raised when the report cache cannot be written."""

    def __init__(
        self,
        message: str,
        *,
        key: str = "",
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.path = path


class ProviderError(SprintHealthError):
    """Raised when project data cannot be loaded from a provider."""

    def __init__(
        self,
        message: str,
        *,
        project_id: str = "",
        source: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.project_id = project_id
        self.source = source
