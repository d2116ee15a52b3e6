import logging
from datetime import date, timedelta
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from sqlmodel import Session

from goaltrack import crud
from goaltrack.config import settings
from goaltrack.errors import UpstreamFetchError
from goaltrack.models.challenge import Challenge, ChallengeParticipation
from goaltrack.models.goal import Goal
from goaltrack.models.measurement import Measurement
from goaltrack.models.metrics import GoalCurrentValue, UnifiedMetric
from goaltrack.schemas.views import BodyMetrics
from goaltrack.services.body_metrics import aggregate_body_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GoalDataSources:
    """
    Read side of the goal repository, measurement store and metric connectors.

    Every call is a single batch query. Failures of any kind are reported as
    UpstreamFetchError so callers have one failure path to handle.
    """

    def __init__(self, session: Session, today: Optional[date] = None):
        self.session = session
        self.today = today

    def _call(self, operation: str, func: Callable[..., T], *args) -> T:
        try:
            return func(self.session, *args)
        except Exception as e:
            logger.error(f"{operation} failed: {e}")
            raise UpstreamFetchError(operation, e) from e

    def list_participations(self, user_id: int) -> List[Tuple[ChallengeParticipation, Challenge]]:
        return self._call("list_participations", crud.list_participations, user_id)

    def list_goals(self, user_id: int, challenge_ids: Optional[Sequence[int]] = None) -> List[Goal]:
        return self._call("list_goals", crud.list_goals, user_id, challenge_ids)

    def query_measurements(self, user_id: int, goal_ids: Sequence[int]) -> List[Measurement]:
        return self._call("query_measurements", crud.query, user_id, goal_ids)

    def unified_metric_history(self, user_id: int) -> List[UnifiedMetric]:
        return self._call("unified_metric_history", crud.unified_metric_history, user_id)

    def current_value_lookup(self, goal_ids: Sequence[int]) -> List[GoalCurrentValue]:
        return self._call("current_value_lookup", crud.current_value_lookup, goal_ids)

    def aggregated_body_metrics(self, user_id: int) -> BodyMetrics:
        since = (self.today or date.today()) - timedelta(days=settings.BODY_METRICS_WINDOW_DAYS)
        readings = self._call("aggregated_body_metrics", crud.body_composition_readings, user_id, since)
        return aggregate_body_metrics(readings)
