from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..alerts.detector import lateness_minutes
from ..common.datetime_utils import whole_minutes
from ..core.enums import DayState, EventKind
from ..core.exceptions import OutOfSequenceEvent
from ..schedules.model import WorkSchedule
from .model import AttendanceEvent, DailyAttendanceSummary
from .state_machine import replay

logger = logging.getLogger(__name__)


def _first(events: Sequence[AttendanceEvent], kind: EventKind) -> Optional[AttendanceEvent]:
    for event in events:
        if event.kind == kind:
            return event
    return None


def _overtime_minutes(events: Sequence[AttendanceEvent]) -> int:
    total = 0
    opened = None
    for event in events:
        if event.kind == EventKind.OVERTIME_START:
            opened = event
        elif event.kind == EventKind.OVERTIME_END and opened is not None:
            total += max(0, whole_minutes(event.occurred_at - opened.occurred_at))
            opened = None
    return total


def _day_state(employee_id: str, work_date: date, recorded: Sequence[AttendanceEvent]) -> DayState:
    # Sequence was validated on append, so the recorded order always replays.
    try:
        return replay(recorded)
    except OutOfSequenceEvent as e:
        logger.warning("Events for employee %s on %s are not in recorded order: %s", employee_id, work_date, e)
        return replay(sorted(recorded, key=lambda ev: ev.occurred_at), strict=False)


def compute_summary(
    employee_id: str,
    work_date: date,
    events: Sequence[AttendanceEvent],
    schedule: Optional[WorkSchedule] = None,
) -> DailyAttendanceSummary:
    """Derive the day's figures from its events, pairing them by kind.

    `events` are expected in the ledger's recorded order, which decides the
    state; durations only depend on each kind's timestamp. Pure and
    replayable: the same events and schedule always give the same summary.
    """

    state = _day_state(employee_id, work_date, events)
    events = sorted(events, key=lambda e: e.occurred_at)
    entry = _first(events, EventKind.ENTRY)
    exit_ = _first(events, EventKind.EXIT)
    break_start = _first(events, EventKind.BREAK_START)
    break_end = _first(events, EventKind.BREAK_END)

    break_minutes = 0
    if break_start and break_end:
        break_minutes = max(0, whole_minutes(break_end.occurred_at - break_start.occurred_at))

    worked_minutes = None
    if entry and exit_:
        worked_minutes = max(0, whole_minutes(exit_.occurred_at - entry.occurred_at) - break_minutes)

    late_minutes = None
    if entry and schedule is not None:
        late_minutes = lateness_minutes(entry.occurred_at, schedule)

    return DailyAttendanceSummary(
        employee_id=employee_id,
        work_date=work_date,
        worked_minutes=worked_minutes,
        break_minutes=break_minutes,
        late_minutes=late_minutes,
        overtime_minutes=_overtime_minutes(events),
        has_entry=entry is not None,
        has_exit=exit_ is not None,
        complete=state == DayState.CLOSED,
        state=state,
    )
