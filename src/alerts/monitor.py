"""AlertMonitor — wires policies, recipients and the ledger to a reading stream."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

import structlog

from src.alerts.ledger import AlertLedger
from src.core.config import Settings
from src.core.types import (
    AlertRecord,
    AlertTransition,
    Reading,
    StatusLevel,
    TransitionType,
)
from src.thresholds.registry import PolicyRegistry, RecipientDirectory

logger = structlog.stdlib.get_logger()

TransitionCallback = Callable[[AlertTransition], Awaitable[None] | None]


class AlertMonitor:
    """Evaluates readings against registered policies and emits transitions.

    Usage::

        monitor = AlertMonitor(registry, recipients)
        monitor.on_transition(dispatcher.on_transition)

        for reading in readings:
            await monitor.process(reading)
    """

    def __init__(
        self,
        registry: PolicyRegistry,
        recipients: RecipientDirectory | None = None,
        ledger: AlertLedger | None = None,
    ) -> None:
        self._registry = registry
        self._recipients = recipients or RecipientDirectory()
        self._ledger = ledger or AlertLedger()
        self._callbacks: list[TransitionCallback] = []
        self._readings_processed = 0
        self._transition_counts: dict[TransitionType, int] = {
            t: 0 for t in TransitionType
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> AlertMonitor:
        return cls(
            PolicyRegistry.from_config(settings.thresholds),
            RecipientDirectory.from_config(settings.notifications),
        )

    @property
    def ledger(self) -> AlertLedger:
        return self._ledger

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    @property
    def recipients(self) -> RecipientDirectory:
        return self._recipients

    def on_transition(self, callback: TransitionCallback) -> None:
        """Register a callback for alert transitions."""
        self._callbacks.append(callback)

    async def _emit(self, transition: AlertTransition) -> None:
        for cb in self._callbacks:
            try:
                result = cb(transition)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(
                    "transition_callback_error",
                    transition_type=transition.transition_type,
                    alert_id=transition.record.id,
                )

    async def process(self, reading: Reading) -> AlertTransition | None:
        """Ingest one reading and notify callbacks of any transition.

        Raises:
            UnknownMetricError: If no policy is registered for the metric.
            OutOfOrderReadingError: If the reading is older than the key's last one.
        """
        policy = self._registry.get(reading.metric_id)
        transition = self._ledger.ingest(reading, policy, self._recipients)
        self._readings_processed += 1
        if transition is not None:
            self._transition_counts[transition.transition_type] += 1
            await self._emit(transition)
        return transition

    async def process_many(self, readings: Iterable[Reading]) -> list[AlertTransition]:
        """Process readings in order, returning the transitions they caused."""
        transitions: list[AlertTransition] = []
        for reading in readings:
            transition = await self.process(reading)
            if transition is not None:
                transitions.append(transition)
        return transitions

    def records(self) -> list[AlertRecord]:
        return self._ledger.records

    def snapshot(self) -> dict[str, object]:
        """Counters for dashboards and logs."""
        open_records = self._ledger.open_records()
        return {
            "readings_processed": self._readings_processed,
            "alerts_total": len(self._ledger.records),
            "alerts_open": len(open_records),
            "alerts_open_critical": sum(
                1 for r in open_records if r.peak_level == StatusLevel.CRITICAL
            ),
            "transitions": {
                t.value: n for t, n in self._transition_counts.items()
            },
        }
