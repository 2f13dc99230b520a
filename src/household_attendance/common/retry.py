from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ..core.exceptions import TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_transient(
    operation: Callable[[], T],
    *,
    attempts: int,
    backoff_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run a store write, retrying TransientStoreError with exponential backoff.

    Domain errors are never retried; the last transient error is re-raised once
    the attempts are exhausted.
    """

    attempts = max(1, int(attempts))
    for attempt in range(1, attempts):
        try:
            return operation()
        except TransientStoreError:
            delay = backoff_seconds * (2 ** (attempt - 1))
            logger.warning("Transient store error (attempt %d/%d), retrying in %.2fs", attempt, attempts, delay)
            sleep(delay)
    return operation()
