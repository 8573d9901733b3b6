"""Central alert dispatcher — routes ledger transitions to channels."""

from __future__ import annotations

import time

import structlog

from src.alerts.channels import NotificationChannel
from src.alerts.formatters import format_transition
from src.alerts.ledger import AlertLedger
from src.alerts.types import AlertMessage
from src.core.types import AlertTransition, TransitionType

# Dedicated structured logger for decision records.
decision_logger = structlog.get_logger("decision_log")

logger = structlog.get_logger(__name__)


class AlertDispatcher:
    """Routes alert transitions to notification channels.

    - Every transition is logged via *decision_logger*.
    - UPDATED transitions are log-only; the open record was already notified.
    - OPENED and CLOSED transitions are sent to every channel.
    - When an OPENED message reaches at least one channel the record is
      marked notified on the ledger.
    """

    def __init__(
        self,
        channels: list[NotificationChannel] | None = None,
        ledger: AlertLedger | None = None,
    ) -> None:
        self._channels: list[NotificationChannel] = channels or []
        self._ledger = ledger

    # ── Callback entry point ────────────────────────────────────

    async def on_transition(self, transition: AlertTransition) -> None:
        msg = format_transition(transition)
        self._log_decision(msg)

        if transition.transition_type == TransitionType.UPDATED:
            return

        delivered = await self._dispatch_to_channels(msg)
        if (
            delivered
            and transition.transition_type == TransitionType.OPENED
            and self._ledger is not None
        ):
            self._ledger.mark_notified(transition.record.id, time.time())

    # ── Direct send ─────────────────────────────────────────────

    async def send(self, msg: AlertMessage) -> bool:
        """Dispatch an AlertMessage directly. Returns True if any channel accepted it."""
        self._log_decision(msg)
        return await self._dispatch_to_channels(msg)

    # ── Internal routing ────────────────────────────────────────

    def _log_decision(self, msg: AlertMessage) -> None:
        decision_logger.info(
            "decision",
            severity=msg.severity.name,
            title=msg.title,
            body=msg.body,
            alert_id=msg.alert_id,
            transition_type=msg.transition_type,
            fields=msg.fields,
        )

    async def _dispatch_to_channels(self, msg: AlertMessage) -> bool:
        delivered = False
        for ch in self._channels:
            try:
                if await ch.send(msg):
                    delivered = True
            except Exception:
                logger.exception(
                    "channel_dispatch_error",
                    channel=type(ch).__name__,
                    title=msg.title,
                )
        return delivered

    # ── Lifecycle ───────────────────────────────────────────────

    async def close(self) -> None:
        for ch in self._channels:
            try:
                await ch.close()
            except Exception:
                logger.exception("channel_close_error", channel=type(ch).__name__)
