"""Core module — config, types, errors, logging."""

from src.core.config import Settings, load_settings
from src.core.exceptions import (
    AlertingError,
    InvalidPolicyError,
    OutOfOrderReadingError,
    UnknownMetricError,
)
from src.core.logging import setup_logging
from src.core.types import (
    AlertRecord,
    AlertTransition,
    Reading,
    StatusLevel,
    ThresholdMode,
    ThresholdPolicy,
    TransitionType,
    worst_level,
)

__all__ = [
    "AlertRecord",
    "AlertTransition",
    "AlertingError",
    "InvalidPolicyError",
    "OutOfOrderReadingError",
    "Reading",
    "Settings",
    "StatusLevel",
    "ThresholdMode",
    "ThresholdPolicy",
    "TransitionType",
    "UnknownMetricError",
    "load_settings",
    "setup_logging",
    "worst_level",
]
