from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import Clock
from ..common.retry import retry_transient
from ..core.constants import DEFAULT_STORE_RETRY_BACKOFF_SECONDS, DEFAULT_STORE_WRITE_ATTEMPTS
from ..core.enums import Channel, NotificationKind, ReminderTarget
from ..core.exceptions import NotFound
from .channels import ChannelGateway
from .model import DispatchOptions, Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def late_message(minutes: int) -> str:
    unit = "minute" if minutes == 1 else "minutes"
    return f"You clocked in {minutes} {unit} late today."


def absence_message(day: date) -> str:
    return f"No clock-in was recorded on {day.isoformat()}."


_REMINDER_MESSAGES = {
    ReminderTarget.ENTRY: "Time to clock in.",
    ReminderTarget.BREAK: "Time to start your break.",
    ReminderTarget.EXIT: "Time to clock out.",
}


def reminder_message(target: ReminderTarget) -> str:
    return _REMINDER_MESSAGES[target]


def idempotency_key(kind: NotificationKind, employee_id: str, day: date, suffix: str = "") -> str:
    key = f"{kind.value}:{employee_id}:{day.isoformat()}"
    return f"{key}:{suffix}" if suffix else key


class NotificationDispatcher:
    """Persists alert notifications, then forwards them to external channels.

    The stored record is the source of truth: channel failures are logged and
    never undo persistence or reach the caller.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        gateway: ChannelGateway,
        clock: Clock,
        *,
        options: Optional[DispatchOptions] = None,
        write_attempts: int = DEFAULT_STORE_WRITE_ATTEMPTS,
        backoff_seconds: float = DEFAULT_STORE_RETRY_BACKOFF_SECONDS,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self._notifications = notifications
        self._gateway = gateway
        self._clock = clock
        self._options = options or DispatchOptions()
        self._write_attempts = int(write_attempts)
        self._backoff_seconds = float(backoff_seconds)
        self._retry_kwargs = {"sleep": sleep} if sleep else {}

    @property
    def options(self) -> DispatchOptions:
        return self._options

    def dispatch(
        self,
        employee_id: str,
        kind: NotificationKind,
        message: str,
        *,
        work_date: Optional[date] = None,
        idempotency_key: Optional[str] = None,
    ) -> Optional[Notification]:
        """Create a notification; None when `idempotency_key` was already used."""

        notification = self.record(
            employee_id, kind, message, work_date=work_date, idempotency_key=idempotency_key
        )
        if notification is not None:
            self.deliver(notification)
        return notification

    def record(
        self,
        employee_id: str,
        kind: NotificationKind,
        message: str,
        *,
        work_date: Optional[date] = None,
        idempotency_key: Optional[str] = None,
    ) -> Optional[Notification]:
        """Store a notification without contacting any channel.

        Callers holding a lock record first and `deliver` once it is released.
        """

        notification = Notification(
            notification_id=uuid.uuid4().hex,
            employee_id=str(employee_id),
            kind=kind,
            message=message,
            created_at=self._clock.now(),
            read=False,
            work_date=work_date,
        )

        if self._options.persist:
            created = retry_transient(
                lambda: self._notifications.create(notification, idempotency_key=idempotency_key),
                attempts=self._write_attempts,
                backoff_seconds=self._backoff_seconds,
                **self._retry_kwargs,
            )
            if not created:
                logger.debug("Notification %s already exists, skipping", idempotency_key)
                return None
            logger.info("Notification %s (%s) stored for employee %s", notification.notification_id, kind.value, employee_id)

        return notification

    def deliver(self, notification: Notification) -> None:
        """Forward to the configured channels; failures are logged, never raised."""

        for channel in sorted(self._options.channels, key=lambda c: c.value):
            send = self._gateway.send_push if channel == Channel.PUSH else self._gateway.send_sms
            try:
                send(notification)
            except Exception:
                logger.exception(
                    "Delivery via %s failed for notification %s (employee %s)",
                    channel.value,
                    notification.notification_id,
                    notification.employee_id,
                )

    def list_notifications(self, employee_id: str, *, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_employee(str(employee_id), unread_only=bool(unread_only))

    def mark_read(self, notification_id: str, *, employee_id: Optional[str] = None) -> None:
        """Flip `read`; with `employee_id`, another employee's notification is NotFound."""

        if employee_id is not None:
            existing = self._notifications.get_by_id(str(notification_id))
            if existing is None or existing.employee_id != str(employee_id):
                raise NotFound(f"Notification {notification_id} not found")

        updated = retry_transient(
            lambda: self._notifications.mark_read(str(notification_id)),
            attempts=self._write_attempts,
            backoff_seconds=self._backoff_seconds,
            **self._retry_kwargs,
        )
        if not updated:
            raise NotFound(f"Notification {notification_id} not found")
