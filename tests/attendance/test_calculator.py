from __future__ import annotations

from datetime import date, datetime, time

from household_attendance.attendance.calculator import compute_summary
from household_attendance.attendance.model import AttendanceEvent
from household_attendance.core.enums import DayState, EventKind

DAY = date(2026, 2, 2)


def _event(kind: EventKind, hh: int, mm: int = 0) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=f"{kind.value}-{hh}{mm}",
        employee_id="ana",
        kind=kind,
        occurred_at=datetime.combine(DAY, time(hh, mm)),
        work_date=DAY,
    )


def test_full_day_with_break(make_schedule):
    events = [
        _event(EventKind.ENTRY, 8),
        _event(EventKind.BREAK_START, 12),
        _event(EventKind.BREAK_END, 12, 30),
        _event(EventKind.EXIT, 17),
    ]
    summary = compute_summary("ana", DAY, events, make_schedule("ana"))

    assert summary.worked_minutes == 510
    assert summary.break_minutes == 30
    assert summary.late_minutes == 0
    assert summary.has_entry and summary.has_exit
    assert summary.complete
    assert summary.state == DayState.CLOSED


def test_day_without_exit_is_in_progress():
    summary = compute_summary("ana", DAY, [_event(EventKind.ENTRY, 8, 15)], None)

    assert summary.worked_minutes is None
    assert summary.late_minutes is None
    assert summary.has_entry
    assert not summary.has_exit
    assert not summary.complete
    assert summary.state == DayState.ON_SHIFT


def test_pairs_by_kind_not_by_position():
    # Input order shuffled: positional pairing would mix break and shift edges.
    events = [
        _event(EventKind.EXIT, 17),
        _event(EventKind.BREAK_END, 13),
        _event(EventKind.ENTRY, 8),
        _event(EventKind.BREAK_START, 12),
    ]
    summary = compute_summary("ana", DAY, events, None)

    assert summary.break_minutes == 60
    assert summary.worked_minutes == 480
    assert summary.state == DayState.CLOSED


def test_overtime_is_reported_separately():
    events = [
        _event(EventKind.ENTRY, 8),
        _event(EventKind.EXIT, 12),
        _event(EventKind.OVERTIME_START, 18),
        _event(EventKind.OVERTIME_END, 19, 30),
        _event(EventKind.OVERTIME_START, 20),
    ]
    summary = compute_summary("ana", DAY, events, None)

    assert summary.worked_minutes == 240
    assert summary.overtime_minutes == 90
    assert summary.state == DayState.ON_OVERTIME
    assert not summary.complete


def test_late_minutes_from_schedule(make_schedule):
    summary = compute_summary("ana", DAY, [_event(EventKind.ENTRY, 8, 15)], make_schedule("ana"))
    assert summary.late_minutes == 15


def test_empty_day():
    summary = compute_summary("ana", DAY, [], None)

    assert summary.worked_minutes is None
    assert summary.break_minutes == 0
    assert not summary.has_entry
    assert summary.state == DayState.NO_ENTRY


def test_summary_is_replayable(make_schedule):
    events = [_event(EventKind.ENTRY, 8, 5), _event(EventKind.EXIT, 16, 59)]
    schedule = make_schedule("ana")
    assert compute_summary("ana", DAY, events, schedule) == compute_summary("ana", DAY, list(events), schedule)


def test_recorded_order_decides_state_over_timestamps():
    # Entry was recorded first even though its timestamp is later.
    entry = AttendanceEvent(
        event_id="entry",
        employee_id="ana",
        kind=EventKind.ENTRY,
        occurred_at=datetime.combine(DAY, time(8, 0, 5)),
        work_date=DAY,
    )
    summary = compute_summary("ana", DAY, [entry, _event(EventKind.BREAK_START, 8)], None)

    assert summary.state == DayState.ON_BREAK
    assert summary.break_minutes == 0
    assert summary.worked_minutes is None
