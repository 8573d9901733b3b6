"""Domain types for threshold evaluation and alerting."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict, Field


class StatusLevel(IntEnum):
    """Metric status — ordered so ``max()`` gives the worst case."""

    NORMAL = 0
    WARNING = 1
    CRITICAL = 2


def worst_level(levels: Iterable[StatusLevel]) -> StatusLevel:
    """Return the worst level in *levels* (NORMAL when empty)."""
    return max(levels, default=StatusLevel.NORMAL)


class ThresholdMode(StrEnum):
    """Which bounds a threshold policy alerts on."""

    SINGLE_UPPER = "SINGLE_UPPER"  # alert when value >= upper
    SINGLE_LOWER = "SINGLE_LOWER"  # alert when value <= lower
    DUAL = "DUAL"  # alert when outside [lower, upper]


class ThresholdPolicy(BaseModel):
    """Threshold rule for one metric.

    Bounds are not checked on construction; a malformed policy is rejected
    by :func:`src.thresholds.classifier.validate_policy` when it is used.
    """

    model_config = ConfigDict(frozen=True)

    metric_id: str
    mode: ThresholdMode
    lower: float | None = None
    upper: float | None = None
    near_margin: float = 0.1
    label: str = ""
    unit: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.metric_id


class Reading(BaseModel):
    """A single timestamped metric value for one asset.

    NaN and infinite values or timestamps are rejected on construction.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    asset_id: str
    metric_id: str
    timestamp: float
    value: float

    @property
    def key(self) -> tuple[str, str]:
        return (self.asset_id, self.metric_id)


# ── Alert records ────────────────────────────────────────────────


class AlertRecord(BaseModel):
    """A threshold breach tracked from opening until the metric recovers.

    Created, mutated and closed only by :class:`src.alerts.ledger.AlertLedger`.
    """

    id: str
    asset_id: str
    metric_id: str
    opened_at: float
    closed_at: float | None = None
    peak_value: float
    peak_level: StatusLevel
    threshold_snapshot: ThresholdPolicy
    recipients: frozenset[str] = Field(default_factory=frozenset)
    opening_value: float
    previous_value: float | None = None
    last_value: float
    last_level: StatusLevel
    closing_value: float | None = None
    notified_at: float | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.asset_id, self.metric_id)

    @property
    def is_open(self) -> bool:
        return self.closed_at is None

    @property
    def current_level(self) -> StatusLevel:
        """Peak level while open; NORMAL once the reading that closed it arrived."""
        if self.is_open:
            return self.peak_level
        return StatusLevel.NORMAL

    @property
    def notified(self) -> bool:
        return self.notified_at is not None


class TransitionType(StrEnum):
    """Kind of change an ingested reading caused to an alert record."""

    OPENED = "OPENED"
    UPDATED = "UPDATED"
    CLOSED = "CLOSED"


class AlertTransition(BaseModel):
    """Outbound event emitted by the ledger for each record change."""

    model_config = ConfigDict(frozen=True)

    transition_type: TransitionType
    record: AlertRecord
    level: StatusLevel
    reading: Reading
