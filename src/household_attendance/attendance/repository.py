from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import EventKind, EventStatus
from .model import AttendanceEvent, Location


@dataclass(frozen=True)
class NewAttendanceEvent:
    """An event about to be appended; id and ordering are assigned by the ledger."""

    employee_id: str
    kind: EventKind
    occurred_at: datetime
    location: Optional[Location] = None
    network: Optional[str] = None
    note: Optional[str] = None

    @property
    def work_date(self) -> date:
        return self.occurred_at.date()


class DayPartition(Protocol):
    """One (employee, date) slice of the ledger, held under mutual exclusion."""

    employee_id: str
    work_date: date

    @property
    def events(self) -> Sequence[AttendanceEvent]:
        """The day's events in recorded order, as of lock acquisition plus appends."""

        raise NotImplementedError

    def append(self, new: NewAttendanceEvent) -> AttendanceEvent:
        """Insert the event; a second once-per-day kind raises DuplicateEvent."""

        raise NotImplementedError


class AttendanceLedger(Protocol):
    def locked_day(self, employee_id: str, work_date: date) -> ContextManager[DayPartition]:
        """Serialize writers of one (employee, date) partition.

        Everything appended inside the block becomes visible atomically when
        the block exits without error.
        """

        raise NotImplementedError

    def list_for_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        """The day's events in recorded order."""

        raise NotImplementedError

    def list_range(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceEvent]:
        """Events with start <= work_date <= end, by day and then in recorded order."""

        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def update_status(self, *, event_id: str, expected: EventStatus, status: EventStatus) -> bool:
        """Compare-and-set the review status; False when the event is not in `expected`."""

        raise NotImplementedError
