"""Score aggregation for diagnostic outcomes."""

from __future__ import annotations

from collections.abc import Sequence


def compute_score(succeeded: Sequence[str], failed: Sequence[str]) -> int:
    """Percentage of applicable diagnostics that passed, truncated.

    Args:
        succeeded: Names of passed rules.
        failed: Names of failed rules.

    Returns:
        Score in [0, 100]; 100 when no rule was applicable.
    """
    total = len(succeeded) + len(failed)
    if total == 0:
        return 100
    return (len(succeeded) * 100) // total
