from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import FrozenSet, Optional

from ..core.enums import Regime


@dataclass(frozen=True)
class WorkSchedule:
    """Domain entity: the current configured shift of one employee.

    `work_days` holds ISO weekday numbers (Monday=1 .. Sunday=7).
    """

    employee_id: str
    shift_start: time
    shift_end: time
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    break_duration_minutes: int = 0
    work_days: FrozenSet[int] = field(default_factory=lambda: frozenset({1, 2, 3, 4, 5}))
    regime: Regime = Regime.CLT
    flexible: bool = False

    def works_on(self, day: date) -> bool:
        return day.isoweekday() in self.work_days


def parse_work_days(value: str) -> FrozenSet[int]:
    """Parse the stored "1,2,3,4,5" form; unknown tokens are ignored."""

    days = set()
    for token in (value or "").split(","):
        token = token.strip()
        if token.isdigit() and 1 <= int(token) <= 7:
            days.add(int(token))
    return frozenset(days)
