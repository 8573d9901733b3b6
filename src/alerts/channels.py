"""Notification channels — the boundary to delivery collaborators.

Delivery itself (email, SMS, webhooks) lives outside this package; a
collaborator subclasses :class:`NotificationChannel` and is handed to the
:class:`src.alerts.dispatcher.AlertDispatcher`.
"""

from __future__ import annotations

import abc

import structlog

from src.alerts.types import AlertMessage, Severity

logger = structlog.get_logger(__name__)


class NotificationChannel(abc.ABC):
    """Base class for alert delivery channels."""

    @abc.abstractmethod
    async def send(self, msg: AlertMessage) -> bool:
        """Send an alert message. Returns True on success."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release resources held by the channel."""


class LogChannel(NotificationChannel):
    """Writes alert messages to the structured log instead of delivering them.

    Messages below *min_severity* are dropped.
    """

    def __init__(self, min_severity: Severity = Severity.INFO) -> None:
        self._min_severity = min_severity
        self._sent = 0

    @property
    def sent(self) -> int:
        """Number of messages written so far."""
        return self._sent

    async def send(self, msg: AlertMessage) -> bool:
        if msg.severity < self._min_severity:
            return False
        logger.info(
            "alert_notification",
            severity=msg.severity.name,
            title=msg.title,
            body=msg.body,
            alert_id=msg.alert_id,
            recipients=msg.recipients,
            resolved=msg.is_resolution,
        )
        self._sent += 1
        return True

    async def close(self) -> None:
        return None
