"""View models for the alert list and KPI tiles.

These are plain data for a presentation layer to render; no formatting
beyond rounding happens here.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from src.core.types import (
    AlertRecord,
    Reading,
    StatusLevel,
    ThresholdPolicy,
    worst_level,
)
from src.series.window import for_key, sparkline
from src.thresholds.classifier import breached_bound, classify, is_approaching
from src.thresholds.registry import PolicyRegistry


class AlertCard(BaseModel):
    """One entry in the alert list."""

    alert_id: str
    asset_id: str
    metric_id: str
    title: str
    unit: str = ""
    status: StatusLevel
    peak_level: StatusLevel
    previous_value: float | None = None
    current_value: float
    threshold: float
    difference: float
    recipients: list[str] = Field(default_factory=list)
    notified: bool = False
    opened_at: float
    closed_at: float | None = None
    sparkline: list[float] = Field(default_factory=list)


class KpiTile(BaseModel):
    """Latest value of one metric for one asset."""

    asset_id: str
    metric_id: str
    title: str
    unit: str = ""
    value: float
    timestamp: float
    level: StatusLevel
    approaching: bool = False
    lower: float | None = None
    upper: float | None = None


def build_alert_card(
    record: AlertRecord,
    series: Iterable[Reading] = (),
    points: int = 12,
) -> AlertCard:
    """Build the alert-list entry for *record*.

    ``difference`` is the current value minus the bound on the side the
    alert breached, rounded to one decimal.
    """
    policy = record.threshold_snapshot
    bound = breached_bound(record.peak_value, policy)
    current = record.last_value
    return AlertCard(
        alert_id=record.id,
        asset_id=record.asset_id,
        metric_id=record.metric_id,
        title=policy.display_name,
        unit=policy.unit,
        status=record.current_level,
        peak_level=record.peak_level,
        previous_value=record.previous_value,
        current_value=current,
        threshold=bound,
        difference=round(current - bound, 1),
        recipients=sorted(record.recipients),
        notified=record.notified,
        opened_at=record.opened_at,
        closed_at=record.closed_at,
        sparkline=sparkline(
            series, record.asset_id, record.metric_id, points,
        ).values(),
    )


def build_alert_cards(
    records: Iterable[AlertRecord],
    series: Iterable[Reading] = (),
    points: int = 12,
) -> list[AlertCard]:
    history = list(series)
    return [build_alert_card(r, history, points) for r in records]


def build_kpi_tile(reading: Reading, policy: ThresholdPolicy) -> KpiTile:
    return KpiTile(
        asset_id=reading.asset_id,
        metric_id=reading.metric_id,
        title=policy.display_name,
        unit=policy.unit,
        value=reading.value,
        timestamp=reading.timestamp,
        level=classify(reading.value, policy),
        approaching=is_approaching(reading.value, policy),
        lower=policy.lower,
        upper=policy.upper,
    )


def latest_readings(series: Iterable[Reading], asset_id: str) -> dict[str, Reading]:
    """Most recent reading per metric for one asset."""
    latest: dict[str, Reading] = {}
    for reading in for_key(series, asset_id=asset_id):
        latest[reading.metric_id] = reading
    return latest


def build_kpi_tiles(
    series: Iterable[Reading],
    asset_id: str,
    registry: PolicyRegistry,
) -> list[KpiTile]:
    """Tiles for every registered metric the asset has readings for."""
    latest = latest_readings(series, asset_id)
    return [
        build_kpi_tile(latest[metric_id], registry.get(metric_id))
        for metric_id in registry.metric_ids
        if metric_id in latest
    ]


def asset_condition(tiles: Iterable[KpiTile]) -> StatusLevel:
    """Overall condition of an asset: the worst of its tiles."""
    return worst_level(t.level for t in tiles)
