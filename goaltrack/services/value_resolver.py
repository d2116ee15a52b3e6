"""
Current value resolution for a goal.

Sources are tried in a fixed order and the first one with data wins:

1. Wearable metrics (recovery, HRV, resting heart rate, sleep) from the
   unified metric history
2. Body composition (weight, body fat, muscle mass) from the multi-source
   aggregate
3. The materialized current value record of the goal
4. The goal's own measurements

A goal with nothing in any source resolves to a "no data" value of 0.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from goaltrack.config import settings
from goaltrack.models.challenge import Challenge, ChallengeParticipation
from goaltrack.models.goal import Goal, GoalCategory
from goaltrack.models.measurement import Measurement, MeasurementSource
from goaltrack.models.metrics import GoalCurrentValue, UnifiedMetric
from goaltrack.schemas.views import (
    AggregatedBodyMetric,
    BodyMetrics,
    CompetingObservation,
    SparklinePoint,
)
from goaltrack.services.body_metrics import source_priority
from goaltrack.services.classification import match_body_composition, metric_name_variants

logger = logging.getLogger(__name__)

WEARABLE_SOURCE = MeasurementSource.WEARABLE.value

SOURCE_LABELS: Dict[str, str] = {
    "inbody": "InBody",
    "withings": "Withings",
    "manual": "Manual",
    "garmin": "Garmin",
    "oura": "Oura",
    "whoop": "Whoop",
    "wearable": "Wearable",
}

# Goal category -> (aggregated body metric field, participation baseline field)
BODY_CATEGORY_FIELDS = {
    GoalCategory.WEIGHT: ("weight", "baseline_weight"),
    GoalCategory.BODY_FAT: ("body_fat", "baseline_body_fat"),
    GoalCategory.MUSCLE_MASS: ("muscle_mass", "baseline_muscle_mass"),
}


@dataclass
class ResolvedValue:
    current_value: float
    source: str
    sparkline: List[SparklinePoint] = field(default_factory=list)
    baseline_value: Optional[float] = None
    competing: List[CompetingObservation] = field(default_factory=list)
    has_data: bool = True


def no_data() -> ResolvedValue:
    return ResolvedValue(
        current_value=0.0,
        source=MeasurementSource.MANUAL.value,
        sparkline=[],
        baseline_value=None,
        has_data=False,
    )


def source_label(source: str) -> str:
    return SOURCE_LABELS.get(source.lower(), source.title())


class ValueResolver:
    def __init__(
        self,
        sparkline_limit: Optional[int] = None,
        body_fat_stale_days: Optional[int] = None,
        today: Optional[date] = None,
    ):
        self.sparkline_limit = sparkline_limit or settings.SPARKLINE_LIMIT
        self.body_fat_stale_days = body_fat_stale_days or settings.BODY_FAT_STALE_DAYS
        self.today = today

    def resolve(
        self,
        goal: Goal,
        measurements: Sequence[Measurement],
        unified_history: Sequence[UnifiedMetric] = (),
        body_metrics: Optional[BodyMetrics] = None,
        current_value: Optional[GoalCurrentValue] = None,
        participation: Optional[ChallengeParticipation] = None,
        challenge: Optional[Challenge] = None,
    ) -> ResolvedValue:
        """
        Pick the authoritative current value for a goal.

        Args:
            goal: Goal being resolved
            measurements: The goal's own measurements, newest first
            unified_history: All unified metric readings of the user, newest first
            body_metrics: Multi-source body composition aggregate of the user
            current_value: Materialized current value record of the goal
            participation: Challenge participation the goal belongs to, if any
            challenge: Challenge the goal belongs to, if any

        Returns:
            ResolvedValue with a newest-first sparkline of at most
            sparkline_limit points
        """
        resolved = (
            self._from_wearable(goal, unified_history)
            or self._from_body_composition(goal, measurements, body_metrics, participation, challenge)
            or self._from_current_value(goal, measurements, unified_history, current_value)
            or self._from_measurements(goal, measurements)
        )

        if resolved is None:
            logger.debug(f"No data for goal {goal.id}")
            return no_data()

        if goal.baseline_value is not None:
            resolved.baseline_value = goal.baseline_value
        return resolved

    # --- sources, in priority order ---

    def _from_wearable(self, goal: Goal, unified_history: Sequence[UnifiedMetric]) -> Optional[ResolvedValue]:
        if goal.category != GoalCategory.WEARABLE_METRIC or not goal.metric_name:
            return None

        variants = set(metric_name_variants(goal.metric_name))
        rows = [row for row in unified_history if row.metric_name in variants][:self.sparkline_limit]
        if not rows:
            return None

        return ResolvedValue(
            current_value=rows[0].value,
            source=WEARABLE_SOURCE,
            sparkline=[SparklinePoint(value=row.value, measurement_date=row.measurement_date) for row in rows],
            baseline_value=rows[-1].value,
            competing=self._competing_from_unified(rows),
        )

    def _from_body_composition(
        self,
        goal: Goal,
        measurements: Sequence[Measurement],
        body_metrics: Optional[BodyMetrics],
        participation: Optional[ChallengeParticipation],
        challenge: Optional[Challenge],
    ) -> Optional[ResolvedValue]:
        category = self._body_category(goal)
        if category is None:
            return None

        metric_field, baseline_field = BODY_CATEGORY_FIELDS[category]
        metric: Optional[AggregatedBodyMetric] = getattr(body_metrics, metric_field) if body_metrics else None
        fresh = self._fresh_measurements(category, measurements)

        if metric is None:
            resolved = self._from_measurements(goal, fresh, category)
        else:
            resolved = self._from_aggregate(category, metric, participation, challenge)
        if resolved is None:
            return None

        if resolved.baseline_value is None:
            snapshot = getattr(participation, baseline_field) if participation else None
            if snapshot is not None:
                resolved.baseline_value = snapshot
            elif fresh:
                resolved.baseline_value = fresh[-1].value
        return resolved

    def _from_aggregate(
        self,
        category: GoalCategory,
        metric: AggregatedBodyMetric,
        participation: Optional[ChallengeParticipation],
        challenge: Optional[Challenge],
    ) -> ResolvedValue:
        history = list(metric.sparkline)

        # Body fat progress in a challenge only counts readings since the challenge began
        since = self._challenge_start(participation, challenge) if category == GoalCategory.BODY_FAT else None
        if since is not None:
            history = [point for point in history if point.measurement_date >= since]

        sparkline = history[:self.sparkline_limit]
        # A lone reading is the current value, not a starting point
        window = history if since is not None else sparkline
        baseline = window[-1].value if len(window) > 1 else None

        competing = [
            CompetingObservation(
                source=source,
                value=reading.value,
                label=source_label(source),
                measurement_date=reading.measurement_date,
            )
            for source, reading in sorted(metric.sources.items(), key=lambda item: source_priority(item[0]))
        ]

        return ResolvedValue(
            current_value=metric.value,
            source=metric.source,
            sparkline=sparkline,
            baseline_value=baseline,
            competing=competing,
        )

    def _from_current_value(
        self,
        goal: Goal,
        measurements: Sequence[Measurement],
        unified_history: Sequence[UnifiedMetric],
        current_value: Optional[GoalCurrentValue],
    ) -> Optional[ResolvedValue]:
        if current_value is None or not current_value.current_value:
            return None

        rows = [row for row in unified_history if row.metric_name == goal.name][:self.sparkline_limit]
        if rows:
            sparkline = [SparklinePoint(value=row.value, measurement_date=row.measurement_date) for row in rows]
            baseline = rows[-1].value
        else:
            sparkline = self._sparkline(measurements)
            baseline = sparkline[-1].value if len(sparkline) > 1 else None

        return ResolvedValue(
            current_value=current_value.current_value,
            source=current_value.source or MeasurementSource.MANUAL.value,
            sparkline=sparkline,
            baseline_value=baseline,
        )

    def _from_measurements(
        self,
        goal: Goal,
        measurements: Sequence[Measurement],
        category: Optional[GoalCategory] = None,
    ) -> Optional[ResolvedValue]:
        measurements = self._fresh_measurements(category or goal.category, measurements)
        if not measurements:
            return None

        latest = measurements[0]
        sparkline = self._sparkline(measurements)
        return ResolvedValue(
            current_value=latest.value,
            source=latest.source or MeasurementSource.MANUAL.value,
            sparkline=sparkline,
            baseline_value=sparkline[-1].value if len(sparkline) > 1 else None,
        )

    # --- helpers ---

    def _body_category(self, goal: Goal) -> Optional[GoalCategory]:
        if goal.category in BODY_CATEGORY_FIELDS:
            return goal.category
        if goal.category == GoalCategory.WEARABLE_METRIC:
            # "Weight after sleep" is a wearable name that also names a body metric
            return match_body_composition(goal.name)
        return None

    def _fresh_measurements(self, category: GoalCategory, measurements: Sequence[Measurement]) -> List[Measurement]:
        """Body fat readings older than the staleness window no longer describe the user."""
        if category != GoalCategory.BODY_FAT:
            return list(measurements)
        cutoff = (self.today or date.today()) - timedelta(days=self.body_fat_stale_days)
        return [m for m in measurements if m.measurement_date >= cutoff]

    def _sparkline(self, measurements: Sequence[Measurement]) -> List[SparklinePoint]:
        return [
            SparklinePoint(value=m.value, measurement_date=m.measurement_date)
            for m in measurements[:self.sparkline_limit]
        ]

    @staticmethod
    def _challenge_start(
        participation: Optional[ChallengeParticipation],
        challenge: Optional[Challenge],
    ) -> Optional[date]:
        if participation is not None and participation.baseline_recorded_at is not None:
            return participation.baseline_recorded_at.date()
        if challenge is not None:
            return challenge.start_date
        return None

    @staticmethod
    def _competing_from_unified(rows: Sequence[UnifiedMetric]) -> List[CompetingObservation]:
        latest: Dict[str, UnifiedMetric] = {}
        for row in rows:
            latest.setdefault(row.source.lower(), row)
        if len(latest) < 2:
            return []
        return [
            CompetingObservation(
                source=source,
                value=row.value,
                label=source_label(source),
                measurement_date=row.measurement_date,
            )
            for source, row in latest.items()
        ]
