from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import Regime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import WorkSchedule, parse_work_days
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee(self, employee_id: str) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, shift_start, shift_end, break_start, break_end,
                       break_duration_minutes, work_days, regime, flexible
                FROM work_schedules
                WHERE employee_id=%s
                """,
                (str(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            shift_start = normalize_mysql_time(r.get("shift_start"))
            shift_end = normalize_mysql_time(r.get("shift_end"))
            if shift_start is None or shift_end is None:
                logger.warning("Schedule row for employee %s has no shift window", employee_id)
                return None

            try:
                regime = Regime(r.get("regime") or Regime.CLT.value)
            except ValueError:
                logger.warning("Unknown regime %r for employee %s, using clt", r.get("regime"), employee_id)
                regime = Regime.CLT

            return WorkSchedule(
                employee_id=str(r["employee_id"]),
                shift_start=shift_start,
                shift_end=shift_end,
                break_start=normalize_mysql_time(r.get("break_start")),
                break_end=normalize_mysql_time(r.get("break_end")),
                break_duration_minutes=int(r.get("break_duration_minutes") or 0),
                work_days=parse_work_days(r.get("work_days") or ""),
                regime=regime,
                flexible=bool(r.get("flexible")),
            )

    def list_employee_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM work_schedules ORDER BY employee_id ASC")
            return [str(r["employee_id"]) for r in fetchall(cur)]
