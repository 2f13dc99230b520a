from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, notification: Notification, *, idempotency_key: Optional[str] = None) -> bool:
        """Insert the notification.

        Returns False, without inserting, when `idempotency_key` was already used.
        """

        raise NotImplementedError

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str, *, unread_only: bool = False) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def mark_read(self, notification_id: str) -> bool:
        """False when the notification does not exist."""

        raise NotImplementedError
