from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_utc
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from .model import NotificationInbox
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Per-user inbox: create, list, mark read, clear."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        user_id: int,
        message: str,
        type: NotificationType = NotificationType.INFO,
        now: Optional[datetime] = None,
    ) -> int:
        return self._notifications.create(
            user_id=int(user_id),
            message=message,
            type=type,
            created_at=now or now_utc(),
        )

    def notify_many(
        self,
        *,
        user_ids: Iterable[int],
        message: str,
        type: NotificationType = NotificationType.INFO,
        now: Optional[datetime] = None,
    ) -> list[int]:
        return [self.notify(user_id=uid, message=message, type=type, now=now) for uid in user_ids]

    def list_for_user(self, *, user_id: int) -> NotificationInbox:
        items = sorted(
            self._notifications.list_for_user(int(user_id)),
            key=lambda n: (n.created_at, n.notification_id),
            reverse=True,
        )
        return NotificationInbox(
            unread=[n for n in items if not n.read],
            read=[n for n in items if n.read],
        )

    def unread_count(self, *, user_id: int) -> int:
        return self._notifications.count_unread(int(user_id))

    def mark_as_read(self, *, user_id: int, notification_id: int) -> None:
        item = self._notifications.get_by_id(int(notification_id))
        if not item or item.user_id != int(user_id):
            raise NotFoundError("Notification not found")
        if not item.read:
            self._notifications.mark_read(item.notification_id)

    def clear_all(self, *, user_id: int) -> int:
        removed = self._notifications.delete_for_user(int(user_id))
        logger.info("Cleared %s notifications for user %s", removed, user_id)
        return removed
