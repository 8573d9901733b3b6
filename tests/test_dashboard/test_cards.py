"""Tests for alert cards and KPI tiles."""

from __future__ import annotations

from src.alerts.ledger import AlertLedger
from src.core.config import ThresholdsConfig
from src.core.types import (
    AlertRecord,
    Reading,
    StatusLevel,
    ThresholdMode,
    ThresholdPolicy,
)
from src.dashboard.cards import (
    asset_condition,
    build_alert_card,
    build_alert_cards,
    build_kpi_tile,
    build_kpi_tiles,
    latest_readings,
)
from src.thresholds.registry import PolicyRegistry

PRESSURE = ThresholdPolicy(
    metric_id="Max_Pressure_psi",
    mode=ThresholdMode.SINGLE_UPPER,
    upper=1400.0,
    near_margin=0.1,
    label="Max Pressure",
    unit="psi",
)

TEMPERATURE = ThresholdPolicy(
    metric_id="Temperature_C",
    mode=ThresholdMode.DUAL,
    lower=30.0,
    upper=100.0,
    near_margin=0.05,
    label="Temperature",
    unit="°C",
)


def _r(metric: str, ts: float, value: float, asset: str = "PUMP-402") -> Reading:
    return Reading(asset_id=asset, metric_id=metric, timestamp=ts, value=value)


def _replay(
    policy: ThresholdPolicy, values: list[float],
) -> tuple[AlertRecord, list[Reading]]:
    ledger = AlertLedger()
    series = [_r(policy.metric_id, float(i), v) for i, v in enumerate(values)]
    for reading in series:
        ledger.ingest(reading, policy, lambda m: ["ops@example.com", "safety@example.com"])
    return ledger.records[-1], series


# ── Alert cards ────────────────────────────────────────────────


class TestAlertCard:
    def test_open_upper_breach(self) -> None:
        record, series = _replay(PRESSURE, [1380.0, 1450.0, 1600.0])
        card = build_alert_card(record, series)
        assert card.title == "Max Pressure"
        assert card.unit == "psi"
        assert card.status == StatusLevel.CRITICAL
        assert card.previous_value == 1380.0
        assert card.current_value == 1600.0
        assert card.threshold == 1400.0
        assert card.difference == 200.0
        assert card.recipients == ["ops@example.com", "safety@example.com"]
        assert card.notified is False
        assert card.closed_at is None
        assert card.sparkline == [1380.0, 1450.0, 1600.0]

    def test_lower_breach_uses_lower_bound(self) -> None:
        record, series = _replay(TEMPERATURE, [35.0, 25.0])
        card = build_alert_card(record, series)
        assert card.threshold == 30.0
        assert card.difference == -5.0

    def test_closed_card(self) -> None:
        record, series = _replay(PRESSURE, [1450.0, 1600.0, 1350.0])
        card = build_alert_card(record, series)
        assert card.status == StatusLevel.NORMAL
        assert card.peak_level == StatusLevel.CRITICAL
        assert card.current_value == 1350.0
        assert card.difference == -50.0
        assert card.closed_at == 2.0

    def test_sparkline_limited_to_points(self) -> None:
        values = [1000.0 + i for i in range(20)] + [1450.0]
        record, series = _replay(PRESSURE, values)
        card = build_alert_card(record, series, points=5)
        assert card.sparkline == [1016.0, 1017.0, 1018.0, 1019.0, 1450.0]

    def test_sparkline_ignores_other_keys(self) -> None:
        record, series = _replay(PRESSURE, [1450.0])
        noise = [_r("Max_Pressure_psi", 0.5, 9999.0, asset="OTHER")]
        card = build_alert_card(record, series + noise)
        assert card.sparkline == [1450.0]

    def test_without_history(self) -> None:
        record, _ = _replay(PRESSURE, [1450.0])
        assert build_alert_card(record).sparkline == []

    def test_build_many_accepts_iterator(self) -> None:
        record, series = _replay(PRESSURE, [1450.0, 1500.0])
        cards = build_alert_cards([record, record], iter(series))
        assert [c.sparkline for c in cards] == [[1450.0, 1500.0], [1450.0, 1500.0]]


# ── KPI tiles ──────────────────────────────────────────────────


class TestKpiTiles:
    def test_single_tile(self) -> None:
        tile = build_kpi_tile(_r("Max_Pressure_psi", 1.0, 1380.0), PRESSURE)
        assert tile.level == StatusLevel.NORMAL
        assert tile.approaching is True
        assert tile.upper == 1400.0
        assert tile.lower is None

    def test_latest_readings(self) -> None:
        series = [
            _r("Max_Pressure_psi", 1.0, 1300.0),
            _r("Max_Pressure_psi", 2.0, 1350.0),
            _r("Max_Pressure_psi", 3.0, 1.0, asset="OTHER"),
        ]
        latest = latest_readings(series, "PUMP-402")
        assert latest["Max_Pressure_psi"].value == 1350.0

    def test_tiles_follow_registry_order(self) -> None:
        registry = PolicyRegistry.from_config(ThresholdsConfig())
        series = [
            _r("Temperature_C", 1.0, 101.0),
            _r("Max_Pressure_psi", 1.0, 1380.0),
            _r("Unregistered", 1.0, 5.0),
        ]
        tiles = build_kpi_tiles(series, "PUMP-402", registry)
        assert [t.metric_id for t in tiles] == ["Max_Pressure_psi", "Temperature_C"]
        assert tiles[1].level == StatusLevel.WARNING

    def test_asset_condition_is_worst(self) -> None:
        tiles = [
            build_kpi_tile(_r("Max_Pressure_psi", 1.0, 1300.0), PRESSURE),
            build_kpi_tile(_r("Temperature_C", 1.0, 29.0), TEMPERATURE),
        ]
        assert asset_condition(tiles) == StatusLevel.WARNING

    def test_asset_condition_empty(self) -> None:
        assert asset_condition([]) == StatusLevel.NORMAL
