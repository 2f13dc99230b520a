from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .alerts.sweep import AbsenceSweep, ReminderSweep
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceLedger
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .notifications.channels import ChannelGateway, LoggingChannelGateway
from .notifications.dispatcher import NotificationDispatcher
from .notifications.model import DispatchOptions
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .schedules.cache import CachedScheduleRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    clock: Clock

    ledger: AttendanceLedger
    schedules_repo: ScheduleRepository
    notifications_repo: NotificationRepository

    schedule_service: ScheduleService
    dispatcher: NotificationDispatcher
    absence_sweep: AbsenceSweep
    reminder_sweep: ReminderSweep
    attendance_service: AttendanceService


def _setting(settings: Any, name: str, default):
    return getattr(settings, name, default) if settings is not None else default


def assemble_container(
    *,
    ledger: AttendanceLedger,
    schedules_repo: ScheduleRepository,
    notifications_repo: NotificationRepository,
    clock: Clock,
    gateway: Optional[ChannelGateway] = None,
    settings: Any = None,
) -> Container:
    """Wire services over already-built repositories (MySQL or in-memory)."""

    write_attempts = int(_setting(settings, "STORE_WRITE_ATTEMPTS", constants.DEFAULT_STORE_WRITE_ATTEMPTS))
    backoff = float(_setting(settings, "STORE_RETRY_BACKOFF_SECONDS", constants.DEFAULT_STORE_RETRY_BACKOFF_SECONDS))

    schedule_service = ScheduleService(schedules_repo)
    dispatcher = NotificationDispatcher(
        notifications_repo,
        gateway or LoggingChannelGateway(),
        clock,
        options=DispatchOptions.from_names(_setting(settings, "NOTIFICATION_CHANNELS", [])),
        write_attempts=write_attempts,
        backoff_seconds=backoff,
    )
    absence_sweep = AbsenceSweep(
        schedule_service,
        ledger,
        dispatcher,
        clock,
        cutoff_minutes=int(_setting(settings, "ABSENCE_CUTOFF_MINUTES", constants.DEFAULT_ABSENCE_CUTOFF_MINUTES)),
    )
    reminder_sweep = ReminderSweep(
        schedule_service,
        ledger,
        dispatcher,
        clock,
        lead_minutes=int(_setting(settings, "REMINDER_LEAD_MINUTES", constants.DEFAULT_REMINDER_LEAD_MINUTES)),
    )
    attendance_service = AttendanceService(
        ledger,
        schedule_service,
        dispatcher,
        clock,
        absence_sweep=absence_sweep,
        late_grace_minutes=int(_setting(settings, "LATE_GRACE_MINUTES", constants.DEFAULT_LATE_GRACE_MINUTES)),
        write_attempts=write_attempts,
        backoff_seconds=backoff,
    )

    return Container(
        clock=clock,
        ledger=ledger,
        schedules_repo=schedules_repo,
        notifications_repo=notifications_repo,
        schedule_service=schedule_service,
        dispatcher=dispatcher,
        absence_sweep=absence_sweep,
        reminder_sweep=reminder_sweep,
        attendance_service=attendance_service,
    )


def build_container(*, settings: Any) -> Container:
    db_config = settings.DB_CONFIG
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    schedules_repo = CachedScheduleRepository(
        MySQLScheduleRepository(conn),
        ttl_seconds=float(_setting(settings, "SCHEDULE_CACHE_TTL_SECONDS", constants.DEFAULT_SCHEDULE_CACHE_TTL_SECONDS)),
    )

    return assemble_container(
        ledger=MySQLAttendanceRepository(conn),
        schedules_repo=schedules_repo,
        notifications_repo=MySQLNotificationRepository(conn),
        clock=SystemClock(str(_setting(settings, "TIMEZONE", constants.DEFAULT_TIMEZONE))),
        settings=settings,
    )
