from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional, Sequence

import mysql.connector

from ..core.enums import EventKind, EventStatus
from ..core.exceptions import DuplicateEvent
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceEvent, Location
from .repository import AttendanceLedger, NewAttendanceEvent

_EVENT_COLUMNS = "event_id, employee_id, work_date, kind, occurred_at, latitude, longitude, network, note, status"


def _row_to_event(r: dict) -> AttendanceEvent:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = Location(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return AttendanceEvent(
        event_id=str(r["event_id"]),
        employee_id=str(r["employee_id"]),
        kind=EventKind(r["kind"]),
        occurred_at=r["occurred_at"],
        work_date=r["work_date"],
        location=location,
        network=r.get("network"),
        note=r.get("note"),
        status=EventStatus(r["status"]),
    )


def dedupe_key(employee_id: str, work_date: date, kind: EventKind) -> Optional[str]:
    if not kind.once_per_day:
        return None
    return f"{employee_id}:{work_date.isoformat()}:{kind.value}"


class _MySQLDayPartition:
    def __init__(self, cur, employee_id: str, work_date: date, events: list[AttendanceEvent]):
        self._cur = cur
        self.employee_id = employee_id
        self.work_date = work_date
        self._events = events

    @property
    def events(self) -> Sequence[AttendanceEvent]:
        return tuple(self._events)

    def append(self, new: NewAttendanceEvent) -> AttendanceEvent:
        event = AttendanceEvent(
            event_id=uuid.uuid4().hex,
            employee_id=new.employee_id,
            kind=new.kind,
            occurred_at=new.occurred_at,
            work_date=self.work_date,
            location=new.location,
            network=new.network,
            note=new.note,
            status=EventStatus.PENDING,
        )
        try:
            self._cur.execute(
                """
                INSERT INTO attendance_events(
                    event_id, employee_id, work_date, kind, occurred_at,
                    latitude, longitude, network, note, status, dedupe_key
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.event_id,
                    event.employee_id,
                    event.work_date,
                    event.kind.value,
                    event.occurred_at,
                    event.location.latitude if event.location else None,
                    event.location.longitude if event.location else None,
                    event.network,
                    event.note,
                    event.status.value,
                    dedupe_key(event.employee_id, event.work_date, event.kind),
                ),
            )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateEvent(event.kind, event.work_date) from e
            raise
        self._events.append(event)
        return event


class MySQLAttendanceRepository(AttendanceLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def locked_day(self, employee_id: str, work_date: date) -> Iterator[_MySQLDayPartition]:
        with db_cursor(self._conn_factory) as (_, cur):
            # The upsert takes the day row's exclusive lock until commit/rollback.
            cur.execute(
                """
                INSERT INTO attendance_days(employee_id, work_date)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE employee_id=employee_id
                """,
                (employee_id, work_date),
            )
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events
                WHERE employee_id=%s AND work_date=%s
                ORDER BY seq ASC
                FOR UPDATE
                """,
                (employee_id, work_date),
            )
            events = [_row_to_event(r) for r in fetchall(cur)]
            yield _MySQLDayPartition(cur, employee_id, work_date, events)

    def list_for_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        return self.list_range(employee_id, work_date, work_date)

    def list_range(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, seq ASC
                """,
                (employee_id, start, end),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EVENT_COLUMNS} FROM attendance_events WHERE event_id=%s", (str(event_id),))
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def update_status(self, *, event_id: str, expected: EventStatus, status: EventStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_events SET status=%s WHERE event_id=%s AND status=%s",
                (status.value, str(event_id), expected.value),
            )
            return cur.rowcount > 0
