from __future__ import annotations

from typing import Sequence

from ..core.exceptions import NotConfigured
from .model import WorkSchedule
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def get_schedule(self, employee_id: str) -> WorkSchedule:
        schedule = self._schedules.get_for_employee(str(employee_id))
        if schedule is None:
            raise NotConfigured(str(employee_id))
        return schedule

    def scheduled_employee_ids(self) -> Sequence[str]:
        return list(self._schedules.list_employee_ids())
