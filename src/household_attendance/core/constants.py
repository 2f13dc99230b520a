"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_ABSENCE_CUTOFF_MINUTES = 60
DEFAULT_REMINDER_LEAD_MINUTES = 10
DEFAULT_SCHEDULE_CACHE_TTL_SECONDS = 60
DEFAULT_STORE_WRITE_ATTEMPTS = 3
DEFAULT_STORE_RETRY_BACKOFF_SECONDS = 0.1
DEFAULT_REPORT_DAYS = 31
MAX_REPORT_DAYS = 366
MAX_NOTE_LENGTH = 500
MAX_NETWORK_LENGTH = 120
