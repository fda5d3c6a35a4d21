from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    message: str
    type: NotificationType
    read: bool
    created_at: datetime


@dataclass(frozen=True)
class NotificationInbox:
    unread: Sequence[Notification] = field(default_factory=list)
    read: Sequence[Notification] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.unread) + len(self.read)
