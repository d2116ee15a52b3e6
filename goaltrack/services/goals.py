import logging
from typing import List, Optional, Tuple

from sqlmodel import Session

from goaltrack import crud
from goaltrack.errors import GoalNotFoundError, MeasurementNotFoundError
from goaltrack.models.goal import Goal
from goaltrack.models.measurement import Measurement
from goaltrack.schemas.goal import GoalCreate, GoalUpdate
from goaltrack.schemas.measurement import MeasurementCreate
from goaltrack.services.classification import classify_goal
from goaltrack.services.events import GoalDataEvents, goal_data_events

logger = logging.getLogger(__name__)


class GoalService:
    """Goal and measurement writes; each successful write announces a goal data change."""

    def __init__(self, session: Session, events: Optional[GoalDataEvents] = None):
        self.session = session
        self.events = goal_data_events if events is None else events

    # === Goals ===

    def get_goal(self, goal_id: int) -> Goal:
        goal = crud.get_goal(self.session, goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        return goal

    def list_goals(self, user_id: int) -> List[Goal]:
        return crud.list_goals(self.session, user_id)

    def create_goal(self, goal_in: GoalCreate) -> Goal:
        values = goal_in.model_dump()
        classification = classify_goal(goal_in.name)

        # Explicit values from the caller win over the inferred ones
        values["direction"] = goal_in.direction or classification.direction
        values["category"] = goal_in.category or classification.category
        values["metric_name"] = classification.metric_name

        goal = crud.create_goal(self.session, values)
        logger.info(
            f"Created goal {goal.id} '{goal.name}' for user {goal.user_id} "
            f"({goal.category.value}, {goal.direction.value})"
        )
        self.events.publish(goal.user_id)
        return goal

    def update_goal(self, goal_id: int, goal_in: GoalUpdate) -> Goal:
        goal = self.get_goal(goal_id)
        patch = goal_in.model_dump(exclude_unset=True)
        # Non-nullable columns ignore an explicit null
        for key in ("name", "type", "target_unit", "is_personal", "direction", "category"):
            if key in patch and patch[key] is None:
                del patch[key]

        renamed = "name" in patch and patch["name"] != goal.name
        if renamed:
            classification = classify_goal(patch["name"])
            patch.setdefault("direction", classification.direction)
            patch.setdefault("category", classification.category)
            patch["metric_name"] = classification.metric_name

        goal = crud.update_goal(self.session, goal_id, patch)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        self.events.publish(goal.user_id)
        return goal

    def delete_goal(self, goal_id: int) -> None:
        goal = self.get_goal(goal_id)
        user_id = goal.user_id
        if not crud.delete_goal(self.session, goal_id):
            raise GoalNotFoundError(goal_id)
        logger.info(f"Deleted goal {goal_id} of user {user_id}")
        self.events.publish(user_id)

    # === Measurements ===

    def list_measurements(self, goal_id: int) -> List[Measurement]:
        goal = self.get_goal(goal_id)
        return crud.query_by_goal(self.session, goal.id, goal.user_id)

    def record_measurement(
        self,
        goal_id: int,
        measurement_in: MeasurementCreate
    ) -> Tuple[Measurement, Optional[float]]:
        """
        Store the day's value for a goal.

        Returns the stored measurement and the value it replaced, if the
        same day already had one.
        """
        goal = self.get_goal(goal_id)
        measurement, replaced_value = self._upsert(goal, measurement_in)
        self.events.publish(goal.user_id)
        return measurement, replaced_value

    def record_measurements(
        self,
        goal_id: int,
        measurements_in: List[MeasurementCreate]
    ) -> List[Tuple[Measurement, Optional[float]]]:
        goal = self.get_goal(goal_id)
        results = [self._upsert(goal, measurement_in) for measurement_in in measurements_in]
        if results:
            self.events.publish(goal.user_id)
        return results

    def _upsert(self, goal: Goal, measurement_in: MeasurementCreate) -> Tuple[Measurement, Optional[float]]:
        return crud.insert_or_replace(
            self.session,
            goal_id=goal.id,
            user_id=goal.user_id,
            measurement_date=measurement_in.measurement_date,
            value=measurement_in.value,
            unit=measurement_in.unit or goal.target_unit,
            source=measurement_in.source,
            notes=measurement_in.notes,
            photo_url=measurement_in.photo_url,
            reps=measurement_in.reps,
        )

    def delete_measurement(self, measurement_id: int) -> None:
        measurement = crud.get_measurement(self.session, measurement_id)
        if measurement is None:
            raise MeasurementNotFoundError(measurement_id)
        user_id = measurement.user_id
        crud.delete_measurement(self.session, measurement_id)
        self.events.publish(user_id)
