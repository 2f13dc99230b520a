from __future__ import annotations

import threading
import time
from typing import Callable, Optional, Sequence

from .model import WorkSchedule
from .repository import ScheduleRepository


class CachedScheduleRepository(ScheduleRepository):
    """Short-TTL read-through cache; schedules change rarely."""

    def __init__(
        self,
        inner: ScheduleRepository,
        *,
        ttl_seconds: float,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._inner = inner
        self._ttl = float(ttl_seconds)
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, Optional[WorkSchedule]]] = {}

    def get_for_employee(self, employee_id: str) -> Optional[WorkSchedule]:
        now = self._monotonic()
        with self._lock:
            hit = self._entries.get(employee_id)
        if hit and now - hit[0] < self._ttl:
            return hit[1]

        schedule = self._inner.get_for_employee(employee_id)
        with self._lock:
            self._entries[employee_id] = (now, schedule)
        return schedule

    def list_employee_ids(self) -> Sequence[str]:
        return self._inner.list_employee_ids()

    def invalidate(self, employee_id: Optional[str] = None) -> None:
        with self._lock:
            if employee_id is None:
                self._entries.clear()
            else:
                self._entries.pop(employee_id, None)
