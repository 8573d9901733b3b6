"""AlertLedger — per-(asset, metric) state machine over alert records."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import structlog

from src.core.exceptions import InvalidPolicyError, OutOfOrderReadingError
from src.core.types import (
    AlertRecord,
    AlertTransition,
    Reading,
    StatusLevel,
    ThresholdPolicy,
    TransitionType,
)
from src.thresholds.classifier import breach_depth, classify, validate_policy

logger = structlog.get_logger(__name__)

RecipientsFn = Callable[[str], Iterable[str]]
LedgerKey = tuple[str, str]


@dataclass
class _LedgerEntry:
    """Last processed state for one (asset_id, metric_id) key."""

    last_level: StatusLevel
    last_value: float
    last_timestamp: float
    open_alert_id: str | None = None


def _new_alert_id() -> str:
    return f"alrt_{uuid.uuid4().hex[:12]}"


class AlertLedger:
    """Opens, updates and closes alert records as readings are ingested.

    - NORMAL → WARNING/CRITICAL opens a record (``OPENED``).
    - Non-NORMAL → non-NORMAL updates the open record's peak (``UPDATED``).
    - Non-NORMAL → NORMAL closes the record (``CLOSED``); it is kept forever.
    - NORMAL → NORMAL returns None.

    Readings must arrive in strictly increasing timestamp order per key.
    Re-ingesting the key's last reading is a no-op; any other reading at or
    before the last timestamp raises OutOfOrderReadingError.  Each call is
    atomic: nothing changes if it raises.  Calls for the same key must not
    run concurrently.

    Usage::

        ledger = AlertLedger()
        transition = ledger.ingest(reading, policy, recipients)
        if transition is not None:
            dispatch(transition)
    """

    def __init__(self) -> None:
        self._entries: dict[LedgerKey, _LedgerEntry] = {}
        self._records: dict[str, AlertRecord] = {}

    # ── Queries ──────────────────────────────────────────────────

    @property
    def records(self) -> list[AlertRecord]:
        """Copies of all records, oldest first."""
        return [r.model_copy(deep=True) for r in self._records.values()]

    def open_records(self) -> list[AlertRecord]:
        return [
            r.model_copy(deep=True) for r in self._records.values() if r.is_open
        ]

    def get(self, alert_id: str) -> AlertRecord | None:
        record = self._records.get(alert_id)
        return record.model_copy(deep=True) if record is not None else None

    def open_record_for(self, asset_id: str, metric_id: str) -> AlertRecord | None:
        entry = self._entries.get((asset_id, metric_id))
        if entry is None or entry.open_alert_id is None:
            return None
        return self.get(entry.open_alert_id)

    def last_level(self, asset_id: str, metric_id: str) -> StatusLevel | None:
        """Level of the key's last reading, or None if never seen."""
        entry = self._entries.get((asset_id, metric_id))
        return entry.last_level if entry is not None else None

    def _open_record(self, entry: _LedgerEntry | None) -> AlertRecord | None:
        if entry is None or entry.open_alert_id is None:
            return None
        return self._records[entry.open_alert_id]

    # ── Ingestion ────────────────────────────────────────────────

    def ingest(
        self,
        reading: Reading,
        policy: ThresholdPolicy,
        recipients_for_metric: RecipientsFn,
    ) -> AlertTransition | None:
        """Classify *reading* and apply the resulting record transition.

        Raises:
            InvalidPolicyError: If *policy* is malformed or for another metric.
            OutOfOrderReadingError: If the timestamp is not after the key's last one.
        """
        validate_policy(policy)
        if policy.metric_id != reading.metric_id:
            raise InvalidPolicyError(
                f"policy for {policy.metric_id!r} supplied for"
                f" reading of {reading.metric_id!r}"
            )

        entry = self._entries.get(reading.key)
        if entry is not None and reading.timestamp <= entry.last_timestamp:
            if (
                reading.timestamp == entry.last_timestamp
                and reading.value == entry.last_value
            ):
                logger.debug(
                    "duplicate_reading_ignored",
                    asset_id=reading.asset_id,
                    metric_id=reading.metric_id,
                    timestamp=reading.timestamp,
                )
                return None
            raise OutOfOrderReadingError(
                f"{reading.asset_id}/{reading.metric_id}: reading at"
                f" {reading.timestamp} is not after {entry.last_timestamp}"
            )

        level = classify(reading.value, policy)
        record = self._open_record(entry)

        if record is None:
            if level == StatusLevel.NORMAL:
                self._advance(reading, level, entry)
                return None
            return self._open(reading, level, policy, recipients_for_metric, entry)

        if level == StatusLevel.NORMAL:
            return self._close(reading, record, entry)
        return self._update(reading, level, policy, record, entry)

    def mark_notified(self, alert_id: str, at: float) -> bool:
        """Record that a notification for *alert_id* was delivered.

        Returns False if the record is unknown or was already marked.
        """
        record = self._records.get(alert_id)
        if record is None or record.notified_at is not None:
            return False
        record.notified_at = at
        return True

    # ── Transitions ──────────────────────────────────────────────

    def _advance(
        self,
        reading: Reading,
        level: StatusLevel,
        entry: _LedgerEntry | None,
        open_alert_id: str | None = None,
    ) -> None:
        if entry is None:
            self._entries[reading.key] = _LedgerEntry(
                last_level=level,
                last_value=reading.value,
                last_timestamp=reading.timestamp,
                open_alert_id=open_alert_id,
            )
            return
        entry.last_level = level
        entry.last_value = reading.value
        entry.last_timestamp = reading.timestamp
        entry.open_alert_id = open_alert_id

    def _open(
        self,
        reading: Reading,
        level: StatusLevel,
        policy: ThresholdPolicy,
        recipients_for_metric: RecipientsFn,
        entry: _LedgerEntry | None,
    ) -> AlertTransition:
        # Resolve recipients before touching state so a failing lookup
        # leaves the ledger unchanged.
        recipients = frozenset(recipients_for_metric(reading.metric_id))
        record = AlertRecord(
            id=_new_alert_id(),
            asset_id=reading.asset_id,
            metric_id=reading.metric_id,
            opened_at=reading.timestamp,
            peak_value=reading.value,
            peak_level=level,
            threshold_snapshot=policy.model_copy(),
            recipients=recipients,
            opening_value=reading.value,
            previous_value=entry.last_value if entry is not None else None,
            last_value=reading.value,
            last_level=level,
        )
        self._records[record.id] = record
        self._advance(reading, level, entry, open_alert_id=record.id)
        logger.info(
            "alert_opened",
            alert_id=record.id,
            asset_id=record.asset_id,
            metric_id=record.metric_id,
            level=level.name,
            value=reading.value,
            recipients=sorted(recipients),
        )
        return self._transition(TransitionType.OPENED, record, level, reading)

    def _update(
        self,
        reading: Reading,
        level: StatusLevel,
        policy: ThresholdPolicy,
        record: AlertRecord,
        entry: _LedgerEntry | None,
    ) -> AlertTransition:
        if level > record.peak_level or (
            level == record.peak_level
            and breach_depth(reading.value, policy)
            > breach_depth(record.peak_value, policy)
        ):
            record.peak_level = level
            record.peak_value = reading.value
        record.last_value = reading.value
        record.last_level = level
        self._advance(reading, level, entry, open_alert_id=record.id)
        logger.debug(
            "alert_updated",
            alert_id=record.id,
            level=level.name,
            value=reading.value,
            peak_level=record.peak_level.name,
            peak_value=record.peak_value,
        )
        return self._transition(TransitionType.UPDATED, record, level, reading)

    def _close(
        self,
        reading: Reading,
        record: AlertRecord,
        entry: _LedgerEntry | None,
    ) -> AlertTransition:
        record.closed_at = reading.timestamp
        record.closing_value = reading.value
        record.last_value = reading.value
        record.last_level = StatusLevel.NORMAL
        self._advance(reading, StatusLevel.NORMAL, entry)
        logger.info(
            "alert_closed",
            alert_id=record.id,
            asset_id=record.asset_id,
            metric_id=record.metric_id,
            peak_level=record.peak_level.name,
            duration_secs=record.closed_at - record.opened_at,
        )
        return self._transition(
            TransitionType.CLOSED, record, StatusLevel.NORMAL, reading,
        )

    @staticmethod
    def _transition(
        transition_type: TransitionType,
        record: AlertRecord,
        level: StatusLevel,
        reading: Reading,
    ) -> AlertTransition:
        return AlertTransition(
            transition_type=transition_type,
            record=record.model_copy(deep=True),
            level=level,
            reading=reading,
        )
