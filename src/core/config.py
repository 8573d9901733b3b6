"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from src.core.types import ThresholdMode, ThresholdPolicy

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def _default_policies() -> list[ThresholdPolicy]:
    return [
        ThresholdPolicy(
            metric_id="Max_Pressure_psi",
            mode=ThresholdMode.SINGLE_UPPER,
            upper=1400.0,
            near_margin=0.1,
            label="Max Pressure",
            unit="psi",
        ),
        ThresholdPolicy(
            metric_id="Pressure_psi",
            mode=ThresholdMode.DUAL,
            lower=40.06,
            upper=80.65,
            near_margin=0.05,
            label="Pressure",
            unit="psi",
        ),
        ThresholdPolicy(
            metric_id="Temperature_C",
            mode=ThresholdMode.DUAL,
            lower=30.0,
            upper=100.0,
            near_margin=0.05,
            label="Temperature",
            unit="°C",
        ),
        ThresholdPolicy(
            metric_id="FlowRate_m3h",
            mode=ThresholdMode.DUAL,
            lower=400.0,
            upper=670.0,
            near_margin=0.05,
            label="Flow Rate",
            unit="m³/h",
        ),
        ThresholdPolicy(
            metric_id="PumpSpeed_rpm",
            mode=ThresholdMode.DUAL,
            lower=1100.0,
            upper=2600.99,
            near_margin=0.05,
            label="Pump Speed",
            unit="RPM",
        ),
        ThresholdPolicy(
            metric_id="EnergyConsumption_kWh",
            mode=ThresholdMode.DUAL,
            lower=17.0,
            upper=33.0,
            near_margin=0.05,
            label="Energy Consumption",
            unit="kWh",
        ),
        ThresholdPolicy(
            metric_id="Vibration_mm_s",
            mode=ThresholdMode.SINGLE_UPPER,
            upper=5.0,
            near_margin=0.1,
            label="Vibration Level",
            unit="mm/s",
        ),
        ThresholdPolicy(
            metric_id="MaintenanceDue_Days",
            mode=ThresholdMode.SINGLE_LOWER,
            lower=30.0,
            near_margin=0.5,
            label="Maintenance Due",
            unit="days",
        ),
    ]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class ThresholdsConfig(BaseModel):
    """Threshold policies, one per metric."""

    policies: list[ThresholdPolicy] = Field(default_factory=_default_policies)


class NotificationConfig(BaseModel):
    """Recipients attached to alerts when they open."""

    default_recipients: list[str] = Field(default_factory=list)
    recipients: dict[str, list[str]] = {
        "Max_Pressure_psi": ["safety@example.com", "ops@example.com"],
        "Temperature_C": ["safety@example.com"],
        "Vibration_mm_s": ["maintenance@example.com"],
        "FlowRate_m3h": ["ops@example.com"],
    }


class DashboardConfig(BaseModel):
    """Presentation-side query defaults."""

    sparkline_points: int = 12


class Settings(BaseModel):
    """Root settings container."""

    thresholds: ThresholdsConfig = ThresholdsConfig()
    notifications: NotificationConfig = NotificationConfig()
    dashboard: DashboardConfig = DashboardConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file.

    Each call returns a new instance; callers pass the result explicitly
    to the components that need it.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    return Settings(**data)
