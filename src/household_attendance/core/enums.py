from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role supplied by the identity collaborator, used for route gating."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class EventKind(str, Enum):
    """Kinds of attendance events an employee can record."""

    ENTRY = "entry"
    BREAK_START = "break_start"
    BREAK_END = "break_end"
    EXIT = "exit"
    OVERTIME_START = "overtime_start"
    OVERTIME_END = "overtime_end"

    @property
    def once_per_day(self) -> bool:
        return self not in (EventKind.OVERTIME_START, EventKind.OVERTIME_END)


class EventStatus(str, Enum):
    """Review status of an attendance event."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DayState(str, Enum):
    """Position of an employee within a working day."""

    NO_ENTRY = "no_entry"
    ON_SHIFT = "on_shift"
    ON_BREAK = "on_break"
    POST_BREAK = "post_break"
    ON_OVERTIME = "on_overtime"
    CLOSED = "closed"


class Regime(str, Enum):
    """Employment regime of a work schedule."""

    CLT = "clt"
    PJ = "pj"
    AUTONOMOUS = "autonomous"


class NotificationKind(str, Enum):
    LATE = "late"
    ABSENCE = "absence"
    SCHEDULE_REMINDER = "schedule_reminder"
    GENERIC_ALERT = "generic_alert"


class Channel(str, Enum):
    """External delivery channels for notifications."""

    PUSH = "push"
    SMS = "sms"


class ReminderTarget(str, Enum):
    ENTRY = "entry"
    BREAK = "break"
    EXIT = "exit"
