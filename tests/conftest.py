from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from types import SimpleNamespace
from typing import Optional

import pytest

from household_attendance.attendance.model import AttendanceEvent
from household_attendance.attendance.repository import NewAttendanceEvent
from household_attendance.container import assemble_container
from household_attendance.core.enums import EventStatus
from household_attendance.core.exceptions import DuplicateEvent, TransientStoreError
from household_attendance.notifications.model import Notification
from household_attendance.schedules.model import WorkSchedule

MONDAY = date(2026, 2, 2)


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now
        self.read = threading.Event()

    def now(self) -> datetime:
        self.read.set()
        return self.current

    def set(self, hour: int, minute: int = 0, second: int = 0, *, day: Optional[date] = None) -> None:
        self.current = datetime.combine(day or self.current.date(), time(hour, minute, second))

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class _Partition:
    def __init__(self, ledger: "InMemoryLedger", employee_id: str, work_date: date):
        self._ledger = ledger
        self.employee_id = employee_id
        self.work_date = work_date
        self._staged: list[AttendanceEvent] = []

    @property
    def events(self):
        return tuple(self._ledger._days.get((self.employee_id, self.work_date), [])) + tuple(self._staged)

    def append(self, new: NewAttendanceEvent) -> AttendanceEvent:
        if new.kind.once_per_day and any(e.kind == new.kind for e in self.events):
            raise DuplicateEvent(new.kind, self.work_date)
        event = AttendanceEvent(
            event_id=uuid.uuid4().hex,
            employee_id=new.employee_id,
            kind=new.kind,
            occurred_at=new.occurred_at,
            work_date=self.work_date,
            location=new.location,
            network=new.network,
            note=new.note,
        )
        self._staged.append(event)
        return event


class InMemoryLedger:
    """Thread-safe ledger fake: one lock per (employee, date), appends visible on commit."""

    def __init__(self):
        self._days: dict[tuple[str, date], list[AttendanceEvent]] = {}
        self._locks: dict[tuple[str, date], threading.Lock] = {}
        self._registry = threading.Lock()
        self.transient_failures = 0

    def lock_for(self, employee_id: str, work_date: date) -> threading.Lock:
        key = (employee_id, work_date)
        with self._registry:
            return self._locks.setdefault(key, threading.Lock())

    @contextmanager
    def locked_day(self, employee_id: str, work_date: date):
        if self.transient_failures:
            self.transient_failures -= 1
            raise TransientStoreError("ledger unavailable")
        key = (employee_id, work_date)
        with self.lock_for(employee_id, work_date):
            partition = _Partition(self, employee_id, work_date)
            yield partition
            self._days.setdefault(key, []).extend(partition._staged)

    def list_for_day(self, employee_id: str, work_date: date):
        return list(self._days.get((employee_id, work_date), []))

    def list_range(self, employee_id: str, start: date, end: date):
        days = sorted(day for emp, day in self._days if emp == employee_id and start <= day <= end)
        return [e for day in days for e in self._days[(employee_id, day)]]

    def all_events(self):
        return [e for events in self._days.values() for e in events]

    def get_by_id(self, event_id: str):
        for e in self.all_events():
            if e.event_id == event_id:
                return e
        return None

    def update_status(self, *, event_id: str, expected: EventStatus, status: EventStatus) -> bool:
        for events in self._days.values():
            for i, e in enumerate(events):
                if e.event_id == event_id and e.status == expected:
                    events[i] = replace(e, status=status)
                    return True
        return False


class InMemorySchedules:
    def __init__(self, schedules: Optional[dict[str, WorkSchedule]] = None, *, unconfigured=(), failing=()):
        self.schedules = dict(schedules or {})
        self.unconfigured = list(unconfigured)
        self.failing = set(failing)
        self.errors: dict[str, Exception] = {}
        self.reads = 0

    def get_for_employee(self, employee_id: str):
        self.reads += 1
        if employee_id in self.failing:
            raise TransientStoreError("schedule store unavailable")
        if employee_id in self.errors:
            raise self.errors[employee_id]
        return self.schedules.get(employee_id)

    def list_employee_ids(self):
        return sorted(set(self.schedules) | set(self.unconfigured) | self.failing | set(self.errors))


class InMemoryNotifications:
    def __init__(self):
        self.items: dict[str, Notification] = {}
        self.keys: set[str] = set()
        self.transient_failures = 0
        self._lock = threading.Lock()

    def create(self, notification: Notification, *, idempotency_key=None) -> bool:
        if self.transient_failures:
            self.transient_failures -= 1
            raise TransientStoreError("notification store unavailable")
        with self._lock:
            if idempotency_key is not None:
                if idempotency_key in self.keys:
                    return False
                self.keys.add(idempotency_key)
            self.items[notification.notification_id] = notification
            return True

    def get_by_id(self, notification_id: str):
        return self.items.get(notification_id)

    def list_for_employee(self, employee_id: str, *, unread_only: bool = False):
        items = [n for n in self.items.values() if n.employee_id == employee_id and not (unread_only and n.read)]
        return sorted(items, key=lambda n: n.created_at, reverse=True)

    def mark_read(self, notification_id: str) -> bool:
        n = self.items.get(notification_id)
        if n is None:
            return False
        self.items[notification_id] = replace(n, read=True)
        return True

    def of_kind(self, kind):
        return [n for n in self.items.values() if n.kind == kind]


class RecordingGateway:
    def __init__(self, *, fail_push: bool = False, fail_sms: bool = False):
        self.fail_push = fail_push
        self.fail_sms = fail_sms
        self.push: list[Notification] = []
        self.sms: list[Notification] = []

    def send_push(self, notification: Notification) -> None:
        if self.fail_push:
            raise ConnectionError("push provider down")
        self.push.append(notification)

    def send_sms(self, notification: Notification) -> None:
        if self.fail_sms:
            raise ConnectionError("sms provider down")
        self.sms.append(notification)


def office_schedule(employee_id: str, **overrides) -> WorkSchedule:
    values = dict(
        employee_id=employee_id,
        shift_start=time(8, 0),
        shift_end=time(17, 0),
        break_start=time(12, 0),
        break_end=time(13, 0),
        break_duration_minutes=60,
        work_days=frozenset({1, 2, 3, 4, 5}),
    )
    values.update(overrides)
    return WorkSchedule(**values)


@pytest.fixture
def fixed_now():
    return datetime.combine(MONDAY, time(8, 0))


@pytest.fixture
def clock(fixed_now):
    return FixedClock(fixed_now)


@pytest.fixture
def ledger():
    return InMemoryLedger()


@pytest.fixture
def schedules():
    return InMemorySchedules({"ana": office_schedule("ana"), "bia": office_schedule("bia")})


@pytest.fixture
def notifications():
    return InMemoryNotifications()


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def settings():
    return SimpleNamespace(
        STORE_WRITE_ATTEMPTS=3,
        STORE_RETRY_BACKOFF_SECONDS=0.0,
        NOTIFICATION_CHANNELS=["push", "sms"],
        ABSENCE_CUTOFF_MINUTES=60,
        REMINDER_LEAD_MINUTES=10,
        LATE_GRACE_MINUTES=0,
    )


@pytest.fixture
def container(ledger, schedules, notifications, gateway, clock, settings):
    return assemble_container(
        ledger=ledger,
        schedules_repo=schedules,
        notifications_repo=notifications,
        clock=clock,
        gateway=gateway,
        settings=settings,
    )


@pytest.fixture
def service(container):
    return container.attendance_service


@pytest.fixture
def make_schedule():
    return office_schedule
