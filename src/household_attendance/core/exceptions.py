from __future__ import annotations

from datetime import date
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class OutOfSequenceEvent(DomainError):
    """The event kind is not permitted from the employee's current day state."""

    code = "out_of_sequence"

    def __init__(self, kind, state):
        self.kind = kind
        self.state = state
        super().__init__(f"Cannot record '{kind.value}' while the day is '{state.value}'")


class DuplicateEvent(DomainError):
    """The event kind was already recorded for the employee on that day."""

    code = "duplicate_event"

    def __init__(self, kind, work_date: Optional[date] = None):
        self.kind = kind
        self.work_date = work_date
        when = f" on {work_date.isoformat()}" if work_date else ""
        super().__init__(f"'{kind.value}' was already recorded{when}")


class NotConfigured(DomainError):
    """No usable work schedule exists for the employee."""

    code = "not_configured"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"No work schedule configured for employee {employee_id}")


class NotFound(DomainError):
    """Unknown notification, event or employee reference."""

    code = "not_found"


class TransientStoreError(Exception):
    """The ledger or a store is temporarily unavailable."""

    code = "store_unavailable"
