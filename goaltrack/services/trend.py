from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from goaltrack.config import settings
from goaltrack.models.goal import GoalDirection
from goaltrack.schemas.views import SparklinePoint, Trend


@dataclass(frozen=True)
class TrendResult:
    trend: Trend
    trend_percentage: float


def calculate_trend(
    sparkline: Sequence[SparklinePoint],
    stable_threshold: Optional[float] = None,
) -> TrendResult:
    """Two-point trend between the latest and previous reading (sparkline is newest first)."""
    if len(sparkline) < 2:
        return TrendResult(Trend.STABLE, 0.0)

    threshold = settings.TREND_STABLE_THRESHOLD if stable_threshold is None else stable_threshold
    latest = sparkline[0].value
    previous = sparkline[1].value

    delta = latest - previous
    percentage = delta / previous * 100 if previous != 0 else 0.0

    if abs(percentage) <= threshold:
        return TrendResult(Trend.STABLE, percentage)
    return TrendResult(Trend.UP if delta > 0 else Trend.DOWN, percentage)


def is_improving(trend: Trend, direction: GoalDirection) -> bool:
    if trend == Trend.STABLE:
        return False
    if direction == GoalDirection.LOWER_IS_BETTER:
        return trend == Trend.DOWN
    return trend == Trend.UP
