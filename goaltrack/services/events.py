import logging
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)

GoalDataListener = Callable[[int], None]


class GoalDataEvents:
    """Announces "goal data for user X changed" to whoever holds derived data."""

    def __init__(self):
        self._listeners: List[GoalDataListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: GoalDataListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: GoalDataListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, user_id: int) -> None:
        with self._lock:
            listeners = list(self._listeners)

        logger.debug(f"Goal data changed for user {user_id}, notifying {len(listeners)} listener(s)")
        for listener in listeners:
            try:
                listener(user_id)
            except Exception:
                # The write already happened; a failing listener must not undo it
                logger.exception(f"Goal data listener {listener!r} failed for user {user_id}")


goal_data_events = GoalDataEvents()
