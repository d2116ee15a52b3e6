"""
Exception types raised by the goal tracking core.

Classification ambiguity and missing data are not errors here: both resolve
to documented fallbacks (generic higher-is-better goal, "no data" view).
"""
from typing import Optional


class GoalTrackError(Exception):
    """Base class for all goal tracking errors."""


class UpstreamFetchError(GoalTrackError):
    """A store, repository or connector call failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Upstream call '{operation}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class GoalNotFoundError(GoalTrackError):
    def __init__(self, goal_id: int):
        self.goal_id = goal_id
        super().__init__(f"Goal {goal_id} not found")


class MeasurementNotFoundError(GoalTrackError):
    def __init__(self, measurement_id: int):
        self.measurement_id = measurement_id
        super().__init__(f"Measurement {measurement_id} not found")
