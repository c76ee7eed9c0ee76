# Thread-safe in-memory notification inbox, for local runs and tests.

import logging
from datetime import datetime, UTC
from threading import Lock

from shortlinks.models import NotificationModel
from shortlinks.dao.base import NotificationBaseDAO


logger = logging.getLogger(__name__)


class NotificationMemoryDAO(NotificationBaseDAO):
    def __init__(self) -> None:
        self._notifications: list[NotificationModel] = []
        self._viewed: set[int] = set()
        self._lock: Lock = Lock()

    def send(self, user_id: str, message: str, **kwargs) -> NotificationModel:
        with self._lock:
            notification = NotificationModel(
                id=len(self._notifications) + 1,
                user_id=user_id,
                message=message,
                created_at=datetime.now(UTC),
            )
            self._notifications.append(notification)
        logger.info('Notification sent.', extra={'user_id': user_id, 'notification_id': notification.id})
        return notification

    def inbox(self, user_id: str, unviewed_only: bool = False, **kwargs) -> list[NotificationModel]:
        with self._lock:
            return [
                n for n in self._notifications
                if n.user_id == user_id and not (unviewed_only and n.id in self._viewed)
            ]

    def mark_viewed(self, user_id: str, notification_ids: list[int], **kwargs) -> int:
        with self._lock:
            owned = {n.id for n in self._notifications if n.user_id == user_id}
            newly_viewed = (set(notification_ids) & owned) - self._viewed
            self._viewed |= newly_viewed
            return len(newly_viewed)
