"""Household attendance package.

Attendance tracking for household employers: per-day event ledger, work-time
summaries, lateness/absence alerts and their notifications. Organized by
feature modules (attendance, schedules, alerts, notifications) with a thin
Flask controller layer over service/repository layers.
"""

__version__ = "0.1.0"
