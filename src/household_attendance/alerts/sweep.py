from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceLedger
from ..common.datetime_utils import Clock
from ..core.enums import NotificationKind
from ..core.exceptions import NotConfigured, TransientStoreError
from ..notifications.dispatcher import (
    NotificationDispatcher,
    absence_message,
    idempotency_key,
    reminder_message,
)
from ..schedules.model import WorkSchedule
from ..schedules.service import ScheduleService
from .detector import absence_due, due_reminders, has_entry, is_work_day

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome of one batch pass; per-employee failures are collected, not raised."""

    work_date: date
    evaluated: int = 0
    created: int = 0
    already_notified: int = 0
    present: int = 0
    not_due: int = 0
    not_scheduled: int = 0
    skipped_not_configured: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    cancelled: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "evaluated": self.evaluated,
            "created": self.created,
            "already_notified": self.already_notified,
            "present": self.present,
            "not_due": self.not_due,
            "not_scheduled": self.not_scheduled,
            "skipped_not_configured": list(self.skipped_not_configured),
            "errors": dict(self.errors),
            "cancelled": self.cancelled,
        }


class _EmployeeSweep:
    def __init__(self, schedules: ScheduleService):
        self._schedules = schedules

    def _each_employee(
        self,
        report: SweepReport,
        evaluate: Callable[[WorkSchedule], None],
        cancel: Optional[threading.Event],
    ) -> SweepReport:
        for employee_id in self._schedules.scheduled_employee_ids():
            if cancel is not None and cancel.is_set():
                report.cancelled = True
                logger.info("Sweep for %s cancelled after %d employees", report.work_date, report.evaluated)
                break

            report.evaluated += 1
            try:
                evaluate(self._schedules.get_schedule(employee_id))
            except NotConfigured:
                logger.warning("Skipping employee %s: no work schedule configured", employee_id)
                report.skipped_not_configured.append(employee_id)
            except TransientStoreError as e:
                logger.warning("Skipping employee %s: %s", employee_id, e)
                report.errors[employee_id] = str(e)
            except Exception as e:
                logger.exception("Sweep failed for employee %s", employee_id)
                report.errors[employee_id] = str(e) or type(e).__name__
        return report


class AbsenceSweep(_EmployeeSweep):
    """Flags scheduled employees with no entry once the day's cutoff has passed.

    Each employee is evaluated independently, so a cancelled or failed run can
    simply be run again: already flagged days are not notified twice.
    """

    def __init__(
        self,
        schedules: ScheduleService,
        ledger: AttendanceLedger,
        dispatcher: NotificationDispatcher,
        clock: Clock,
        *,
        cutoff_minutes: int,
    ):
        super().__init__(schedules)
        self._ledger = ledger
        self._dispatcher = dispatcher
        self._clock = clock
        self._cutoff_minutes = int(cutoff_minutes)

    def run(self, day: Optional[date] = None, *, cancel: Optional[threading.Event] = None) -> SweepReport:
        now = self._clock.now()
        day = day or now.date()
        report = SweepReport(work_date=day)
        self._each_employee(report, lambda schedule: self._evaluate(report, schedule, day, now), cancel)
        logger.info(
            "Absence sweep %s: evaluated=%d created=%d not_configured=%d errors=%d",
            day,
            report.evaluated,
            report.created,
            len(report.skipped_not_configured),
            len(report.errors),
        )
        return report

    def _evaluate(self, report: SweepReport, schedule: WorkSchedule, day: date, now: datetime) -> None:
        if not is_work_day(schedule, day):
            report.not_scheduled += 1
            return
        if not absence_due(schedule, day, now, cutoff_minutes=self._cutoff_minutes):
            report.not_due += 1
            return

        employee_id = schedule.employee_id
        if has_entry(self._ledger.list_for_day(employee_id, day)):
            report.present += 1
            return

        # Presence is checked again under the day lock so an entry landing
        # mid-sweep is either seen here or recorded after the notification.
        # Channels are contacted only after the lock is released.
        with self._ledger.locked_day(employee_id, day) as partition:
            if has_entry(partition.events):
                report.present += 1
                return
            notification = self._dispatcher.record(
                employee_id,
                NotificationKind.ABSENCE,
                absence_message(day),
                work_date=day,
                idempotency_key=idempotency_key(NotificationKind.ABSENCE, employee_id, day),
            )

        if notification is None:
            report.already_notified += 1
            return
        report.created += 1
        self._dispatcher.deliver(notification)


class ReminderSweep(_EmployeeSweep):
    """Sends entry/break/exit reminders shortly before each scheduled moment."""

    def __init__(
        self,
        schedules: ScheduleService,
        ledger: AttendanceLedger,
        dispatcher: NotificationDispatcher,
        clock: Clock,
        *,
        lead_minutes: int,
    ):
        super().__init__(schedules)
        self._ledger = ledger
        self._dispatcher = dispatcher
        self._clock = clock
        self._lead_minutes = int(lead_minutes)

    def run(self, *, cancel: Optional[threading.Event] = None) -> SweepReport:
        now = self._clock.now()
        report = SweepReport(work_date=now.date())
        self._each_employee(report, lambda schedule: self._evaluate(report, schedule, now), cancel)
        logger.info("Reminder sweep %s: evaluated=%d created=%d", now.isoformat(), report.evaluated, report.created)
        return report

    def _evaluate(self, report: SweepReport, schedule: WorkSchedule, now: datetime) -> None:
        day = now.date()
        if not is_work_day(schedule, day):
            report.not_scheduled += 1
            return

        events = self._ledger.list_for_day(schedule.employee_id, day)
        targets = due_reminders(schedule, now, events, lead_minutes=self._lead_minutes)
        if not targets:
            report.not_due += 1
            return

        for target in targets:
            notification = self._dispatcher.dispatch(
                schedule.employee_id,
                NotificationKind.SCHEDULE_REMINDER,
                reminder_message(target),
                work_date=day,
                idempotency_key=idempotency_key(
                    NotificationKind.SCHEDULE_REMINDER, schedule.employee_id, day, target.value
                ),
            )
            if notification is None:
                report.already_notified += 1
            else:
                report.created += 1
