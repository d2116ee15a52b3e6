from .goal import Goal, GoalType, GoalDirection, GoalCategory
from .measurement import Measurement, MeasurementSource
from .challenge import Challenge, ChallengeParticipation
from .metrics import UnifiedMetric, BodyCompositionReading, GoalCurrentValue

__all__ = [
    'Goal',
    'GoalType',
    'GoalDirection',
    'GoalCategory',
    'Measurement',
    'MeasurementSource',
    'Challenge',
    'ChallengeParticipation',
    'UnifiedMetric',
    'BodyCompositionReading',
    'GoalCurrentValue'
]
