from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import WorkSchedule


class ScheduleRepository(Protocol):
    """Read port onto the schedule store (owned by the administrative flows)."""

    def get_for_employee(self, employee_id: str) -> Optional[WorkSchedule]:
        """Return the employee's schedule, or None when missing or incomplete."""

        raise NotImplementedError

    def list_employee_ids(self) -> Sequence[str]:
        """Employees with a schedule row, in a stable order."""

        raise NotImplementedError
