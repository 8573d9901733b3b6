"""Dashboard view models built on the alerting core."""

from src.dashboard.cards import (
    AlertCard,
    KpiTile,
    asset_condition,
    build_alert_card,
    build_alert_cards,
    build_kpi_tile,
    build_kpi_tiles,
    latest_readings,
)

__all__ = [
    "AlertCard",
    "KpiTile",
    "asset_condition",
    "build_alert_card",
    "build_alert_cards",
    "build_kpi_tile",
    "build_kpi_tiles",
    "latest_readings",
]
