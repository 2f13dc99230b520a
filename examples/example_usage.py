"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
from datetime import timedelta

from household_attendance.config import get_settings_module
from household_attendance.container import build_container
from household_attendance.core.enums import EventKind


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)
    service = container.attendance_service

    service.submit_event("employee-1", EventKind.ENTRY, note="example")
    today = container.clock.now().date()
    print(service.get_daily_summary("employee-1", today).to_dict())
    print(service.build_period_report("employee-1", today - timedelta(days=6), today).to_dict()["totals"])


if __name__ == "__main__":
    main()
