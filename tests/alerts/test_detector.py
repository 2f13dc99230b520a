from __future__ import annotations

from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from household_attendance.alerts.detector import (
    absence_cutoff,
    absence_due,
    due_reminders,
    has_entry,
    late_alert_minutes,
    lateness_minutes,
)
from household_attendance.core.enums import EventKind, ReminderTarget

MONDAY = date(2026, 2, 2)
SATURDAY = date(2026, 2, 7)


def at(hour, minute=0, second=0, day=MONDAY):
    return datetime.combine(day, time(hour, minute, second))


def recorded(*kinds):
    return [SimpleNamespace(kind=k) for k in kinds]


@pytest.mark.parametrize(
    "entry_at, expected",
    [
        (at(7, 50), 0),
        (at(8, 0), 0),
        (at(8, 0, 59), 0),
        (at(8, 1), 1),
        (at(8, 15), 15),
        (at(9, 30, 30), 90),
    ],
)
def test_lateness_is_whole_minutes_never_negative(make_schedule, entry_at, expected):
    assert lateness_minutes(entry_at, make_schedule("ana")) == expected


def test_late_alert_respects_grace(make_schedule):
    schedule = make_schedule("ana")
    assert late_alert_minutes(at(8, 5), schedule, grace_minutes=5) is None
    assert late_alert_minutes(at(8, 6), schedule, grace_minutes=5) == 6
    assert late_alert_minutes(at(8, 0), schedule) is None


def test_late_alert_skips_flexible_and_days_off(make_schedule):
    assert late_alert_minutes(at(9, 0), make_schedule("ana", flexible=True)) is None
    assert late_alert_minutes(at(9, 0, day=SATURDAY), make_schedule("ana")) is None
    weekend = make_schedule("ana", work_days=frozenset({6}))
    assert late_alert_minutes(at(9, 0, day=SATURDAY), weekend) == 60


def test_absence_due_after_cutoff_only(make_schedule):
    schedule = make_schedule("ana")
    assert absence_cutoff(schedule, MONDAY, 60) == at(9, 0)
    assert not absence_due(schedule, MONDAY, at(8, 59), cutoff_minutes=60)
    assert absence_due(schedule, MONDAY, at(9, 0), cutoff_minutes=60)
    assert not absence_due(schedule, SATURDAY, at(23, 0, day=SATURDAY), cutoff_minutes=60)


def test_has_entry():
    assert has_entry(recorded(EventKind.ENTRY))
    assert not has_entry(recorded(EventKind.OVERTIME_START))
    assert not has_entry([])


@pytest.mark.parametrize(
    "now, expected",
    [
        (at(7, 49), []),
        (at(7, 50), [ReminderTarget.ENTRY]),
        (at(8, 0), [ReminderTarget.ENTRY]),
        (at(8, 1), []),
        (at(11, 55), [ReminderTarget.BREAK]),
        (at(16, 50), [ReminderTarget.EXIT]),
    ],
)
def test_reminders_within_lead_window(make_schedule, now, expected):
    assert due_reminders(make_schedule("ana"), now, [], lead_minutes=10) == expected


def test_reminders_skip_recorded_events(make_schedule):
    schedule = make_schedule("ana")
    assert due_reminders(schedule, at(7, 55), recorded(EventKind.ENTRY), lead_minutes=10) == []
    assert due_reminders(schedule, at(16, 55), recorded(EventKind.ENTRY, EventKind.EXIT), lead_minutes=10) == []


def test_no_break_reminder_without_break_window(make_schedule):
    schedule = make_schedule("ana", break_start=None, break_end=None)
    assert due_reminders(schedule, at(11, 55), [], lead_minutes=10) == []


def test_no_reminders_on_days_off(make_schedule):
    assert due_reminders(make_schedule("ana"), at(7, 55, day=SATURDAY), [], lead_minutes=10) == []
