"""
Progress percentage for a goal.

Higher-is-better goals may go past 100 so overachievement stays visible.
Lower-is-better goals are clamped to 0-100.
"""
from __future__ import annotations

from typing import Optional

from goaltrack.config import settings


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def calculate_lower_is_better(
    current: float,
    target: float,
    baseline: Optional[float],
    synthetic_factor: float,
) -> float:
    if current <= target:
        return 100.0

    if baseline is not None and baseline > target and baseline != current:
        start = baseline
    else:
        # No usable history: pretend we started 50% above the current value
        start = current * synthetic_factor

    span = start - target
    if span <= 0:
        return 0.0
    return _clamp01((start - current) / span) * 100


def calculate_higher_is_better(
    current: float,
    target: float,
    baseline: Optional[float],
) -> float:
    if baseline is not None and baseline < target and baseline != current:
        return max(0.0, (current - baseline) / (target - baseline) * 100)

    if target == 0:
        return 0.0
    return max(0.0, current / target * 100)


def calculate_progress(
    current_value: float,
    target_value: Optional[float],
    baseline_value: Optional[float],
    lower_is_better: bool,
    synthetic_factor: Optional[float] = None,
) -> Optional[float]:
    """
    Convert a current value into a progress percentage.

    Args:
        current_value: Resolved current value
        target_value: Goal target; None means the goal is not set
        baseline_value: Reference value progress is measured from, if known
        lower_is_better: Goal direction
        synthetic_factor: Multiplier for the synthetic baseline used by
            lower-is-better goals without history (defaults to settings)

    Returns:
        Percentage, or None when the goal has no target
    """
    if target_value is None:
        return None

    if lower_is_better:
        factor = settings.SYNTHETIC_BASELINE_FACTOR if synthetic_factor is None else synthetic_factor
        return calculate_lower_is_better(current_value, target_value, baseline_value, factor)
    return calculate_higher_is_better(current_value, target_value, baseline_value)
