import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from goaltrack.config import settings
from goaltrack.schemas.views import ChallengeGoalView

logger = logging.getLogger(__name__)


class GoalViewCache:
    """
    Per-user goal views kept for a few seconds, dropped on any goal data change.

    Every invalidation bumps the user's generation. A build started before an
    invalidation read data that may already be stale, so set() refuses to
    store it when handed the generation seen at the start of the build.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = settings.GOAL_VIEW_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: Dict[int, Tuple[float, List[ChallengeGoalView]]] = {}
        self._generations: Dict[int, int] = {}
        self._lock = threading.Lock()

    def generation(self, user_id: int) -> int:
        with self._lock:
            return self._generations.get(user_id, 0)

    def get(self, user_id: int) -> Optional[List[ChallengeGoalView]]:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            expires_at, views = entry
            if self._clock() >= expires_at:
                del self._entries[user_id]
                return None

        logger.debug(f"Goal view cache hit for user {user_id}")
        return [view.model_copy(deep=True) for view in views]

    def set(self, user_id: int, views: List[ChallengeGoalView], generation: Optional[int] = None) -> bool:
        """Store views for a user; returns False when they were built before the latest invalidation."""
        if self.ttl_seconds <= 0:
            return False
        snapshot = [view.model_copy(deep=True) for view in views]
        with self._lock:
            if generation is not None and generation != self._generations.get(user_id, 0):
                logger.debug(f"Discarding goal views for user {user_id} built before a data change")
                return False
            self._entries[user_id] = (self._clock() + self.ttl_seconds, snapshot)
        return True

    def invalidate(self, user_id: int) -> None:
        with self._lock:
            self._generations[user_id] = self._generations.get(user_id, 0) + 1
            removed = self._entries.pop(user_id, None)
        if removed is not None:
            logger.debug(f"Invalidated goal views for user {user_id}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
