from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..alerts.detector import late_alert_minutes
from ..alerts.sweep import AbsenceSweep
from ..common.datetime_utils import Clock
from ..common.retry import retry_transient
from ..common.validators import optional_text, require_coordinate
from ..core.constants import (
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_STORE_RETRY_BACKOFF_SECONDS,
    DEFAULT_STORE_WRITE_ATTEMPTS,
    MAX_NETWORK_LENGTH,
    MAX_NOTE_LENGTH,
    MAX_REPORT_DAYS,
)
from ..core.enums import EventKind, EventStatus, NotificationKind
from ..core.exceptions import (
    DomainError,
    NotConfigured,
    NotFound,
    TransientStoreError,
    ValidationError,
)
from ..notifications.dispatcher import NotificationDispatcher, idempotency_key, late_message
from ..schedules.model import WorkSchedule
from ..schedules.service import ScheduleService
from .calculator import compute_summary
from .model import AttendanceEvent, DailyAttendanceSummary, Location, PeriodReport
from .repository import AttendanceLedger, NewAttendanceEvent
from .state_machine import check_transition

logger = logging.getLogger(__name__)


def parse_event_kind(value: Any) -> EventKind:
    try:
        return EventKind(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(k.value for k in EventKind)
        raise ValidationError(f"Invalid event kind {value!r} (expected one of: {allowed})")


def parse_location(value: Any) -> Optional[Location]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError("location must be an object with latitude and longitude")
    lat = value.get("latitude", value.get("lat"))
    lon = value.get("longitude", value.get("lon", value.get("lng")))
    return Location(
        latitude=require_coordinate(lat, "latitude", 90),
        longitude=require_coordinate(lon, "longitude", 180),
    )


class AttendanceService:
    """Records attendance events and derives everything else from the ledger."""

    def __init__(
        self,
        ledger: AttendanceLedger,
        schedules: ScheduleService,
        dispatcher: NotificationDispatcher,
        clock: Clock,
        *,
        absence_sweep: Optional[AbsenceSweep] = None,
        late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        write_attempts: int = DEFAULT_STORE_WRITE_ATTEMPTS,
        backoff_seconds: float = DEFAULT_STORE_RETRY_BACKOFF_SECONDS,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self._ledger = ledger
        self._schedules = schedules
        self._dispatcher = dispatcher
        self._clock = clock
        self._absence_sweep = absence_sweep
        self._late_grace_minutes = int(late_grace_minutes)
        self._write_attempts = int(write_attempts)
        self._backoff_seconds = float(backoff_seconds)
        self._retry_kwargs = {"sleep": sleep} if sleep else {}

    def _schedule_or_none(self, employee_id: str) -> Optional[WorkSchedule]:
        try:
            return self._schedules.get_schedule(employee_id)
        except NotConfigured:
            return None

    def submit_event(
        self,
        employee_id: str,
        kind: EventKind,
        *,
        location: Optional[Location] = None,
        network: Optional[str] = None,
        note: Optional[str] = None,
    ) -> AttendanceEvent:
        """Validate `kind` against the day's state and append it.

        The timestamp is always the server clock's. Raises OutOfSequenceEvent or
        DuplicateEvent unchanged; transient store failures are retried.
        """

        employee_id = str(employee_id)
        network = optional_text(network, "network", MAX_NETWORK_LENGTH)
        note = optional_text(note, "note", MAX_NOTE_LENGTH)

        def _append() -> AttendanceEvent:
            while True:
                work_date = self._clock.now().date()
                with self._ledger.locked_day(employee_id, work_date) as partition:
                    # Timestamp is taken under the lock so recorded order matches time order.
                    occurred_at = self._clock.now()
                    if occurred_at.date() != work_date:
                        continue
                    check_transition(partition.events, kind)
                    return partition.append(
                        NewAttendanceEvent(
                            employee_id=employee_id,
                            kind=kind,
                            occurred_at=occurred_at,
                            location=location,
                            network=network,
                            note=note,
                        )
                    )

        try:
            event = retry_transient(
                _append,
                attempts=self._write_attempts,
                backoff_seconds=self._backoff_seconds,
                **self._retry_kwargs,
            )
        except DomainError as e:
            logger.info("Rejected %s for employee %s: %s", kind.value, employee_id, e)
            raise

        logger.info("Accepted %s for employee %s at %s", kind.value, employee_id, event.occurred_at.isoformat())

        if kind == EventKind.ENTRY:
            self._detect_lateness(event)
        return event

    def _detect_lateness(self, entry: AttendanceEvent) -> None:
        # The entry is already recorded; nothing here may fail the submission.
        try:
            schedule = self._schedules.get_schedule(entry.employee_id)
        except NotConfigured:
            logger.warning("Lateness check skipped for employee %s: no work schedule", entry.employee_id)
            return
        except TransientStoreError as e:
            logger.warning("Lateness check skipped for employee %s: %s", entry.employee_id, e)
            return
        except Exception:
            logger.exception("Lateness check failed for employee %s", entry.employee_id)
            return

        minutes = late_alert_minutes(entry.occurred_at, schedule, grace_minutes=self._late_grace_minutes)
        if minutes is None:
            return

        try:
            self._dispatcher.dispatch(
                entry.employee_id,
                NotificationKind.LATE,
                late_message(minutes),
                work_date=entry.work_date,
                idempotency_key=idempotency_key(NotificationKind.LATE, entry.employee_id, entry.work_date),
            )
        except TransientStoreError as e:
            logger.error("Could not store late notification for employee %s: %s", entry.employee_id, e)
        except Exception:
            logger.exception("Could not create late notification for employee %s", entry.employee_id)

    def get_daily_summary(self, employee_id: str, work_date: date) -> DailyAttendanceSummary:
        employee_id = str(employee_id)
        events = self._ledger.list_for_day(employee_id, work_date)
        return compute_summary(employee_id, work_date, events, self._schedule_or_none(employee_id))

    def list_events(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceEvent]:
        if end < start:
            raise ValidationError("end date must not be before start date")
        return self._ledger.list_range(str(employee_id), start, end)

    def build_period_report(self, employee_id: str, start: date, end: date) -> PeriodReport:
        """Per-day summaries for days with events, plus totals for the range."""

        if end < start:
            raise ValidationError("end date must not be before start date")
        if (end - start).days + 1 > MAX_REPORT_DAYS:
            raise ValidationError("Report range is too long")

        employee_id = str(employee_id)
        schedule = self._schedule_or_none(employee_id)

        by_day: dict[date, list[AttendanceEvent]] = {}
        for event in self._ledger.list_range(employee_id, start, end):
            by_day.setdefault(event.work_date, []).append(event)

        days = [compute_summary(employee_id, d, evs, schedule) for d, evs in sorted(by_day.items())]
        return PeriodReport(
            employee_id=employee_id,
            start=start,
            end=end,
            days=days,
            worked_minutes=sum(d.worked_minutes or 0 for d in days),
            break_minutes=sum(d.break_minutes for d in days),
            late_minutes=sum(d.late_minutes or 0 for d in days),
            overtime_minutes=sum(d.overtime_minutes for d in days),
            days_worked=sum(1 for d in days if d.has_entry),
            incomplete_days=sum(1 for d in days if not d.complete),
        )

    def review_event(self, event_id: str, status: EventStatus) -> AttendanceEvent:
        """Move a pending event to approved or rejected."""

        if status == EventStatus.PENDING:
            raise ValidationError("Review status must be approved or rejected")

        event = self._ledger.get_by_id(str(event_id))
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        if event.status != EventStatus.PENDING:
            raise ValidationError(f"Event was already {event.status.value}")

        updated = retry_transient(
            lambda: self._ledger.update_status(event_id=event.event_id, expected=EventStatus.PENDING, status=status),
            attempts=self._write_attempts,
            backoff_seconds=self._backoff_seconds,
            **self._retry_kwargs,
        )
        if not updated:
            raise ValidationError("Event was reviewed concurrently")

        logger.info("Event %s marked %s", event.event_id, status.value)
        return replace(event, status=status)

    def run_absence_sweep(self, day: Optional[date] = None) -> int:
        """Run the absence sweep for `day` (default: today); returns notifications created."""

        if self._absence_sweep is None:
            raise RuntimeError("Absence sweep is not configured")
        return self._absence_sweep.run(day).created
