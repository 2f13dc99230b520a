from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "notification_id, employee_id, kind, message, work_date, created_at, is_read"


def _row_to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=str(r["notification_id"]),
        employee_id=str(r["employee_id"]),
        kind=NotificationKind(r["kind"]),
        message=r["message"],
        created_at=r["created_at"],
        read=bool(r["is_read"]),
        work_date=r.get("work_date"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: Notification, *, idempotency_key: Optional[str] = None) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO notifications(
                        notification_id, employee_id, kind, message, work_date,
                        created_at, is_read, idempotency_key
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        notification.notification_id,
                        notification.employee_id,
                        notification.kind.value,
                        notification.message,
                        notification.work_date,
                        notification.created_at,
                        int(notification.read),
                        idempotency_key,
                    ),
                )
        except mysql.connector.IntegrityError as e:
            if idempotency_key and is_duplicate_key(e):
                return False
            raise
        return True

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (str(notification_id),))
            r = fetchone(cur)
            return _row_to_notification(r) if r else None

    def list_for_employee(self, employee_id: str, *, unread_only: bool = False) -> Sequence[Notification]:
        clauses = ["employee_id=%s"]
        if unread_only:
            clauses.append("is_read=0")
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id ASC
                """,
                (str(employee_id),),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT notification_id FROM notifications WHERE notification_id=%s", (str(notification_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (str(notification_id),))
            return True
