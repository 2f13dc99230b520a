from __future__ import annotations

import logging
from typing import Protocol

from .model import Notification

logger = logging.getLogger(__name__)


class ChannelGateway(Protocol):
    """Push/SMS delivery owned by an external provider; fire-and-forget."""

    def send_push(self, notification: Notification) -> None:
        raise NotImplementedError

    def send_sms(self, notification: Notification) -> None:
        raise NotImplementedError


class LoggingChannelGateway(ChannelGateway):
    """Default gateway when no provider is wired: records the outgoing message."""

    def send_push(self, notification: Notification) -> None:
        logger.info("push -> employee=%s kind=%s: %s", notification.employee_id, notification.kind.value, notification.message)

    def send_sms(self, notification: Notification) -> None:
        logger.info("sms -> employee=%s kind=%s: %s", notification.employee_id, notification.kind.value, notification.message)
