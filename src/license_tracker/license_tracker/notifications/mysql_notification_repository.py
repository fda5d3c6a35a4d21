from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "notification_id, user_id, message, type, is_read, created_at"


def _to_notification(row: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=int(row["notification_id"]),
        user_id=int(row["user_id"]),
        message=row["message"],
        type=NotificationType(row["type"]),
        read=bool(row["is_read"]),
        created_at=row["created_at"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, message: str, type: NotificationType, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, message, type, is_read, created_at)
                VALUES(%s,%s,%s,0,%s)
                """,
                (int(user_id), message, type.value, created_at),
            )
            return int(cur.lastrowid)

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s",
                (int(notification_id),),
            )
            row = fetchone(cur)
            return _to_notification(row) if row else None

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE user_id=%s
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s",
                (int(notification_id),),
            )
            return cur.rowcount > 0

    def delete_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE user_id=%s", (int(user_id),))
            return int(cur.rowcount)

    def count_unread(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM notifications WHERE user_id=%s AND is_read=0",
                (int(user_id),),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0
