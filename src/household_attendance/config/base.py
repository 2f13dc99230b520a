"""Settings shared by every environment, read from the process environment."""

import os

from ..core.constants import (
    DEFAULT_ABSENCE_CUTOFF_MINUTES,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_REMINDER_LEAD_MINUTES,
    DEFAULT_SCHEDULE_CACHE_TTL_SECONDS,
    DEFAULT_STORE_RETRY_BACKOFF_SECONDS,
    DEFAULT_STORE_WRITE_ATTEMPTS,
    DEFAULT_TIMEZONE,
)

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "household_attendance"),
}

TIMEZONE = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", str(DEFAULT_LATE_GRACE_MINUTES)))
ABSENCE_CUTOFF_MINUTES = int(os.getenv("ABSENCE_CUTOFF_MINUTES", str(DEFAULT_ABSENCE_CUTOFF_MINUTES)))
REMINDER_LEAD_MINUTES = int(os.getenv("REMINDER_LEAD_MINUTES", str(DEFAULT_REMINDER_LEAD_MINUTES)))
SCHEDULE_CACHE_TTL_SECONDS = float(os.getenv("SCHEDULE_CACHE_TTL_SECONDS", str(DEFAULT_SCHEDULE_CACHE_TTL_SECONDS)))

STORE_WRITE_ATTEMPTS = int(os.getenv("STORE_WRITE_ATTEMPTS", str(DEFAULT_STORE_WRITE_ATTEMPTS)))
STORE_RETRY_BACKOFF_SECONDS = float(os.getenv("STORE_RETRY_BACKOFF_SECONDS", str(DEFAULT_STORE_RETRY_BACKOFF_SECONDS)))

# Comma separated subset of: push, sms
NOTIFICATION_CHANNELS = [c for c in os.getenv("NOTIFICATION_CHANNELS", "").split(",") if c.strip()]
