"""Pure lateness, absence and reminder rules over a schedule and a day's events."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import whole_minutes
from ..core.enums import EventKind, ReminderTarget
from ..schedules.model import WorkSchedule


def scheduled_start(schedule: WorkSchedule, day: date) -> datetime:
    return datetime.combine(day, schedule.shift_start)


def is_work_day(schedule: WorkSchedule, day: date) -> bool:
    return schedule.works_on(day)


def lateness_minutes(entry_at: datetime, schedule: WorkSchedule) -> int:
    """Whole minutes between the scheduled start and the entry, never negative."""

    return max(0, whole_minutes(entry_at - scheduled_start(schedule, entry_at.date())))


def late_alert_minutes(entry_at: datetime, schedule: WorkSchedule, *, grace_minutes: int = 0) -> Optional[int]:
    """Minutes to report in a `late` notification, or None when no alert is due.

    Flexible schedules and days outside `work_days` never raise lateness.
    """

    if schedule.flexible or not is_work_day(schedule, entry_at.date()):
        return None
    minutes = lateness_minutes(entry_at, schedule)
    if minutes <= max(0, int(grace_minutes)):
        return None
    return minutes


def has_entry(events: Iterable) -> bool:
    return any(e.kind == EventKind.ENTRY for e in events)


def absence_cutoff(schedule: WorkSchedule, day: date, cutoff_minutes: int) -> datetime:
    return scheduled_start(schedule, day) + timedelta(minutes=int(cutoff_minutes))


def absence_due(schedule: WorkSchedule, day: date, now: datetime, *, cutoff_minutes: int) -> bool:
    """True once the cutoff for a scheduled work day has passed."""

    if not is_work_day(schedule, day):
        return False
    return now >= absence_cutoff(schedule, day, cutoff_minutes)


def _reminder_moments(schedule: WorkSchedule, day: date) -> list[tuple[ReminderTarget, EventKind, datetime]]:
    moments = [(ReminderTarget.ENTRY, EventKind.ENTRY, datetime.combine(day, schedule.shift_start))]
    if schedule.break_start is not None:
        moments.append((ReminderTarget.BREAK, EventKind.BREAK_START, datetime.combine(day, schedule.break_start)))
    moments.append((ReminderTarget.EXIT, EventKind.EXIT, datetime.combine(day, schedule.shift_end)))
    return moments


def due_reminders(
    schedule: WorkSchedule,
    now: datetime,
    events: Iterable,
    *,
    lead_minutes: int,
) -> list[ReminderTarget]:
    """Reminders whose moment falls within `lead_minutes` from now and whose
    event has not been recorded yet."""

    day = now.date()
    if not is_work_day(schedule, day):
        return []

    recorded = {e.kind for e in events}
    lead = timedelta(minutes=int(lead_minutes))
    due = []
    for target, kind, moment in _reminder_moments(schedule, day):
        if kind in recorded:
            continue
        if moment - lead <= now <= moment:
            due.append(target)
    return due
