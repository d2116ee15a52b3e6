"""
Goal view aggregation.

Builds one ChallengeGoalView per goal of a user (personal goals plus the
goals of every challenge they take part in). All upstream data is loaded
with one batch call per source; everything after that is pure computation.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from goaltrack.errors import UpstreamFetchError
from goaltrack.models.challenge import Challenge, ChallengeParticipation
from goaltrack.models.goal import Goal
from goaltrack.models.measurement import Measurement
from goaltrack.models.metrics import GoalCurrentValue, UnifiedMetric
from goaltrack.schemas.views import BodyMetrics, ChallengeGoalView
from goaltrack.services.cache import GoalViewCache
from goaltrack.services.events import goal_data_events
from goaltrack.services.notifications import NotificationService
from goaltrack.services.progress import calculate_progress
from goaltrack.services.sources import GoalDataSources
from goaltrack.services.trend import calculate_trend, is_improving
from goaltrack.services.value_resolver import ValueResolver

logger = logging.getLogger(__name__)

LOAD_ERROR_KEY = "goals.errors.loading"
LOAD_ERROR_MESSAGE = "Could not load your goals. Pull to refresh or try again in a moment."

goal_view_cache = GoalViewCache()
notification_service = NotificationService()
goal_data_events.subscribe(goal_view_cache.invalidate)


class GoalAggregationService:
    def __init__(
        self,
        sources: GoalDataSources,
        cache: Optional[GoalViewCache] = None,
        notifier: Optional[NotificationService] = None,
        resolver: Optional[ValueResolver] = None,
    ):
        self.sources = sources
        self.cache = goal_view_cache if cache is None else cache
        self.notifier = notification_service if notifier is None else notifier
        self.resolver = resolver or ValueResolver()

    def get_challenge_goal_views(self, user_id: int) -> List[ChallengeGoalView]:
        """
        Computed goal views for a user, ready to render.

        Any upstream failure is logged and reported to the user as a
        notification; the result is then an empty list, never a partial one.
        """
        cached = self.cache.get(user_id)
        if cached is not None:
            return cached

        generation = self.cache.generation(user_id)
        try:
            views = self._build_views(user_id)
        except UpstreamFetchError as e:
            logger.error(f"Error loading goal views for user {user_id}: {e}")
            self.notifier.notify(
                user_id,
                key=LOAD_ERROR_KEY,
                message=LOAD_ERROR_MESSAGE,
                level="error",
                action="refresh",
            )
            return []

        self.cache.set(user_id, views, generation)
        return views

    def refresh(self, user_id: int) -> List[ChallengeGoalView]:
        """Drop cached views and compute them again."""
        self.cache.invalidate(user_id)
        return self.get_challenge_goal_views(user_id)

    def _build_views(self, user_id: int) -> List[ChallengeGoalView]:
        participations: Dict[int, Tuple[ChallengeParticipation, Challenge]] = {
            participation.challenge_id: (participation, challenge)
            for participation, challenge in self.sources.list_participations(user_id)
        }

        goals = self.sources.list_goals(user_id, list(participations))
        if not goals:
            return []

        goal_ids = [goal.id for goal in goals]
        measurements_by_goal: Dict[int, List[Measurement]] = defaultdict(list)
        for measurement in self.sources.query_measurements(user_id, goal_ids):
            measurements_by_goal[measurement.goal_id].append(measurement)

        current_values = {cv.goal_id: cv for cv in self.sources.current_value_lookup(goal_ids)}
        unified_history = self.sources.unified_metric_history(user_id)
        body_metrics = self.sources.aggregated_body_metrics(user_id)

        return [
            self._build_view(
                goal,
                measurements_by_goal.get(goal.id, []),
                unified_history,
                body_metrics,
                current_values.get(goal.id),
                participations.get(goal.challenge_id) if goal.challenge_id is not None else None,
            )
            for goal in goals
        ]

    def _build_view(
        self,
        goal: Goal,
        measurements: List[Measurement],
        unified_history: List[UnifiedMetric],
        body_metrics: BodyMetrics,
        current_value: Optional[GoalCurrentValue],
        participation: Optional[Tuple[ChallengeParticipation, Challenge]],
    ) -> ChallengeGoalView:
        participation_row, challenge = participation if participation else (None, None)

        resolved = self.resolver.resolve(
            goal,
            measurements,
            unified_history=unified_history,
            body_metrics=body_metrics,
            current_value=current_value,
            participation=participation_row,
            challenge=challenge,
        )

        progress = None
        if goal.has_target:
            if resolved.has_data:
                progress = round(calculate_progress(
                    resolved.current_value,
                    goal.target_value,
                    resolved.baseline_value,
                    goal.is_lower_better,
                ), 1)
            else:
                progress = 0.0

        trend = calculate_trend(resolved.sparkline)

        return ChallengeGoalView(
            id=goal.id,
            name=goal.name,
            type=goal.type,
            target_value=goal.target_value,
            target_unit=goal.target_unit,
            target_reps=goal.target_reps,
            direction=goal.direction,
            category=goal.category,
            current_value=resolved.current_value,
            progress_percentage=progress,
            trend=trend.trend,
            trend_percentage=round(trend.trend_percentage, 1),
            is_improving=is_improving(trend.trend, goal.direction),
            is_personal=goal.is_personal,
            challenge_id=goal.challenge_id,
            challenge_title=challenge.title if challenge is not None and not goal.is_personal else None,
            measurements=resolved.sparkline,
            source=resolved.source,
            baseline_value=resolved.baseline_value,
            sub_sources=resolved.competing,
            has_target=goal.has_target,
            has_data=resolved.has_data,
        )
