from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall-clock time in the configured zone, returned naive.

    Every "now" in the core goes through a Clock so tests can pin the date.
    """

    def __init__(self, timezone: str):
        self._tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value: Optional[str], default: date) -> date:
    v = (value or "").strip()
    return parse_iso_date(v) if v else default


def whole_minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)
