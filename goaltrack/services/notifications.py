import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, List, Optional

from goaltrack.config import settings
from goaltrack.models.timestamps import utc_now

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    key: str
    message: str
    level: str = "info"
    action: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)


class NotificationService:
    """Keeps the latest user-facing notifications until the client reads them."""

    def __init__(self, max_per_user: Optional[int] = None):
        self.max_per_user = max_per_user or settings.NOTIFICATION_QUEUE_SIZE
        self._queues: Dict[int, Deque[Notification]] = {}
        self._lock = threading.Lock()

    def notify(
        self,
        user_id: int,
        key: str,
        message: str,
        level: str = "info",
        action: Optional[str] = None
    ) -> Notification:
        notification = Notification(key=key, message=message, level=level, action=action)
        with self._lock:
            queue = self._queues.setdefault(user_id, deque(maxlen=self.max_per_user))
            queue.append(notification)
        logger.info(f"Notification for user {user_id}: {key}")
        return notification

    def pending(self, user_id: int) -> List[Notification]:
        with self._lock:
            return list(self._queues.get(user_id, ()))

    def drain(self, user_id: int) -> List[Notification]:
        """Return and forget all notifications of a user."""
        with self._lock:
            queue = self._queues.pop(user_id, None)
        return list(queue) if queue else []

    def clear(self) -> None:
        with self._lock:
            self._queues.clear()
