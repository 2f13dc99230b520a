from __future__ import annotations

from datetime import date, datetime, time

import pytest

from household_attendance.attendance.model import AttendanceEvent
from household_attendance.attendance.state_machine import check_transition, replay
from household_attendance.core.enums import DayState, EventKind
from household_attendance.core.exceptions import DuplicateEvent, OutOfSequenceEvent

DAY = date(2026, 2, 2)


def _events(*kinds):
    return [
        AttendanceEvent(
            event_id=str(i),
            employee_id="ana",
            kind=kind,
            occurred_at=datetime.combine(DAY, time(8 + i, 0)),
            work_date=DAY,
        )
        for i, kind in enumerate(kinds)
    ]


@pytest.mark.parametrize(
    "kinds, expected",
    [
        ((), DayState.NO_ENTRY),
        ((EventKind.ENTRY,), DayState.ON_SHIFT),
        ((EventKind.ENTRY, EventKind.BREAK_START), DayState.ON_BREAK),
        ((EventKind.ENTRY, EventKind.BREAK_START, EventKind.BREAK_END), DayState.POST_BREAK),
        ((EventKind.ENTRY, EventKind.EXIT), DayState.CLOSED),
        ((EventKind.ENTRY, EventKind.BREAK_START, EventKind.BREAK_END, EventKind.EXIT), DayState.CLOSED),
        ((EventKind.ENTRY, EventKind.EXIT, EventKind.OVERTIME_START), DayState.ON_OVERTIME),
        (
            (
                EventKind.ENTRY,
                EventKind.EXIT,
                EventKind.OVERTIME_START,
                EventKind.OVERTIME_END,
                EventKind.OVERTIME_START,
                EventKind.OVERTIME_END,
            ),
            DayState.CLOSED,
        ),
    ],
)
def test_replay_follows_transition_table(kinds, expected):
    assert replay(_events(*kinds)) == expected


@pytest.mark.parametrize(
    "history, kind",
    [
        ((), EventKind.EXIT),
        ((), EventKind.BREAK_START),
        ((), EventKind.OVERTIME_START),
        ((EventKind.ENTRY,), EventKind.BREAK_END),
        ((EventKind.ENTRY,), EventKind.OVERTIME_START),
        ((EventKind.ENTRY, EventKind.BREAK_START), EventKind.EXIT),
        ((EventKind.ENTRY, EventKind.EXIT), EventKind.OVERTIME_END),
        ((EventKind.ENTRY, EventKind.EXIT, EventKind.OVERTIME_START), EventKind.OVERTIME_START),
    ],
)
def test_out_of_sequence_is_rejected(history, kind):
    with pytest.raises(OutOfSequenceEvent) as exc:
        check_transition(_events(*history), kind)
    assert exc.value.kind == kind
    assert exc.value.code == "out_of_sequence"


def test_second_entry_is_duplicate_not_new_cycle():
    with pytest.raises(DuplicateEvent):
        check_transition(_events(EventKind.ENTRY, EventKind.EXIT), EventKind.ENTRY)


def test_second_exit_is_duplicate():
    with pytest.raises(DuplicateEvent) as exc:
        check_transition(_events(EventKind.ENTRY, EventKind.EXIT), EventKind.EXIT)
    assert exc.value.work_date == DAY


def test_second_break_is_duplicate():
    history = _events(EventKind.ENTRY, EventKind.BREAK_START, EventKind.BREAK_END)
    with pytest.raises(DuplicateEvent):
        check_transition(history, EventKind.BREAK_START)


def test_check_transition_returns_next_state():
    assert check_transition(_events(EventKind.ENTRY), EventKind.BREAK_START) == DayState.ON_BREAK
