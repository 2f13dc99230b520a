from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayState, EventKind, EventStatus


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one timestamped attendance event.

    Immutable once recorded; only `status` changes, through review.
    """

    event_id: str
    employee_id: str
    kind: EventKind
    occurred_at: datetime
    work_date: date
    location: Optional[Location] = None
    network: Optional[str] = None
    note: Optional[str] = None
    status: EventStatus = EventStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "employee_id": self.employee_id,
            "kind": self.kind.value,
            "occurred_at": self.occurred_at.isoformat(),
            "work_date": self.work_date.isoformat(),
            "location": (
                {"latitude": self.location.latitude, "longitude": self.location.longitude}
                if self.location
                else None
            ),
            "network": self.network,
            "note": self.note,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class DailyAttendanceSummary:
    """Read-model derived from one day's events; never persisted.

    `worked_minutes` is None while the day is in progress (no exit yet) and
    `late_minutes` is None when lateness cannot be computed.
    """

    employee_id: str
    work_date: date
    worked_minutes: Optional[int]
    break_minutes: int
    late_minutes: Optional[int]
    overtime_minutes: int
    has_entry: bool
    has_exit: bool
    complete: bool
    state: DayState

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "worked_minutes": self.worked_minutes,
            "break_minutes": self.break_minutes,
            "late_minutes": self.late_minutes,
            "overtime_minutes": self.overtime_minutes,
            "has_entry": self.has_entry,
            "has_exit": self.has_exit,
            "complete": self.complete,
            "state": self.state.value,
        }


@dataclass(frozen=True)
class PeriodReport:
    employee_id: str
    start: date
    end: date
    days: list[DailyAttendanceSummary]
    worked_minutes: int
    break_minutes: int
    late_minutes: int
    overtime_minutes: int
    days_worked: int
    incomplete_days: int

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "days": [d.to_dict() for d in self.days],
            "totals": {
                "worked_minutes": self.worked_minutes,
                "worked_hours": f"{self.worked_minutes // 60:02d}:{self.worked_minutes % 60:02d}",
                "break_minutes": self.break_minutes,
                "late_minutes": self.late_minutes,
                "overtime_minutes": self.overtime_minutes,
                "days_worked": self.days_worked,
                "incomplete_days": self.incomplete_days,
            },
        }
