from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import TransientStoreError
from .connection import DatabaseConnection

# Lock wait timeout and deadlock surface as DatabaseError with these errnos.
_TRANSIENT_ERRNOS = {errorcode.ER_LOCK_WAIT_TIMEOUT, errorcode.ER_LOCK_DEADLOCK}


def is_duplicate_key(exc: Exception) -> bool:
    return isinstance(exc, mysql.connector.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Commits on success, rolls back on any error. Connection-level failures are
    re-raised as TransientStoreError; integrity errors propagate unchanged so
    callers can map duplicate keys to domain errors.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except (mysql.connector.InterfaceError, mysql.connector.OperationalError) as e:
        _safe_rollback(conn)
        raise TransientStoreError(f"Database error: {e}") from e
    except mysql.connector.DatabaseError as e:
        _safe_rollback(conn)
        if getattr(e, "errno", None) in _TRANSIENT_ERRNOS:
            raise TransientStoreError(f"Database busy: {e}") from e
        raise
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        # Connection already gone; the server discards the transaction.
        pass


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
