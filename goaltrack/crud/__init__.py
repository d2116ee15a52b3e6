from .goals import get_goal, list_goals, create_goal, update_goal, delete_goal, list_participations
from .measurements import get_measurement, insert_or_replace, query, query_by_goal, delete_measurement
from .metrics import unified_metric_history, body_composition_readings, current_value_lookup

__all__ = [
    'get_goal',
    'list_goals',
    'create_goal',
    'update_goal',
    'delete_goal',
    'list_participations',
    'get_measurement',
    'insert_or_replace',
    'query',
    'query_by_goal',
    'delete_measurement',
    'unified_metric_history',
    'body_composition_readings',
    'current_value_lookup'
]
