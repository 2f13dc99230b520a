"""Per-day event ordering.

One shift per day: entry, an optional single break, exit, then any number of
overtime cycles after the day is closed.
"""

from __future__ import annotations

from typing import Iterable

from ..core.enums import DayState, EventKind
from ..core.exceptions import DuplicateEvent, OutOfSequenceEvent
from .model import AttendanceEvent

TRANSITIONS: dict[tuple[DayState, EventKind], DayState] = {
    (DayState.NO_ENTRY, EventKind.ENTRY): DayState.ON_SHIFT,
    (DayState.ON_SHIFT, EventKind.BREAK_START): DayState.ON_BREAK,
    (DayState.ON_BREAK, EventKind.BREAK_END): DayState.POST_BREAK,
    (DayState.ON_SHIFT, EventKind.EXIT): DayState.CLOSED,
    (DayState.POST_BREAK, EventKind.EXIT): DayState.CLOSED,
    (DayState.CLOSED, EventKind.OVERTIME_START): DayState.ON_OVERTIME,
    (DayState.ON_OVERTIME, EventKind.OVERTIME_END): DayState.CLOSED,
}


def next_state(state: DayState, kind: EventKind) -> DayState:
    try:
        return TRANSITIONS[(state, kind)]
    except KeyError:
        raise OutOfSequenceEvent(kind, state)


def replay(events: Iterable[AttendanceEvent], *, strict: bool = True) -> DayState:
    """Fold a day's events (in recorded order) into its current state.

    With `strict=False` events that do not fit the current state are skipped
    instead of raising OutOfSequenceEvent.
    """

    state = DayState.NO_ENTRY
    for event in events:
        try:
            state = next_state(state, event.kind)
        except OutOfSequenceEvent:
            if strict:
                raise
    return state


def check_transition(events: Iterable[AttendanceEvent], kind: EventKind) -> DayState:
    """Return the state `kind` would move the day into, or raise.

    A repeated once-per-day kind is a DuplicateEvent, so "already clocked in"
    is distinguishable from "clock in first".
    """

    events = list(events)
    if kind.once_per_day:
        for event in events:
            if event.kind == kind:
                raise DuplicateEvent(kind, event.work_date)
    return next_state(replay(events), kind)
