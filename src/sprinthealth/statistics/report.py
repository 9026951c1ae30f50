"""Immutable health report."""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class StatisticsReport(BaseModel):
    """Health report for a project.

    Attributes:
        succeeded: Names of passed diagnostics, in name order.
        failed: Names of failed diagnostics, in name order.
        values: Read-only mapping of stat name to finite value.
        score: Percentage of applicable diagnostics that passed.

    Example:
        >>> report = StatisticsReport(succeeded=("active",), score=100)
        >>> report.to_json()
        '{"succeeded":["active"],"failed":[],"values":{},"score":100}'
    """

    model_config = ConfigDict(frozen=True)

    succeeded: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    values: Mapping[str, float] = Field(default_factory=dict, validate_default=True)
    score: int = Field(default=100, ge=0, le=100)

    @field_validator("values")
    @classmethod
    def validate_finite_values(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        """Ensure no stat value is NaN or infinite and freeze the mapping."""
        for name, value in v.items():
            if not math.isfinite(value):
                msg = f"Stat '{name}' is not finite: {value}"
                raise ValueError(msg)
        return MappingProxyType(dict(v))

    @field_serializer("values")
    def serialize_values(self, v: Mapping[str, float]) -> dict[str, float]:
        return dict(v)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "succeeded": list(self.succeeded),
            "failed": list(self.failed),
            "values": dict(self.values),
            "score": self.score,
        }

    def to_json(self) -> str:
        """Serialize to JSON for caching."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> StatisticsReport:
        """Deserialize from cached JSON."""
        return cls.model_validate_json(data)
