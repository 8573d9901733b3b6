"""Message types handed to notification channels."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field

from src.core.types import StatusLevel


class Severity(IntEnum):
    """Message severity, ordered so channels can filter with ``<``."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    CRITICAL = 3

    @classmethod
    def for_level(cls, level: StatusLevel) -> Severity:
        """Severity of a message announcing a metric at *level*."""
        if level == StatusLevel.CRITICAL:
            return cls.CRITICAL
        if level == StatusLevel.WARNING:
            return cls.WARNING
        return cls.INFO


class AlertMessage(BaseModel):
    """Rendered alert transition, addressed to the record's recipients.

    ``fields`` holds display-ready strings; ``raw`` is the JSON form of
    the transition it was built from (empty for ad-hoc messages).
    """

    severity: Severity
    title: str
    body: str = ""
    alert_id: str = ""
    recipients: list[str] = Field(default_factory=list)
    fields: dict[str, str] = Field(default_factory=dict)
    transition_type: str = ""
    timestamp: float = Field(default_factory=time.time)
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_resolution(self) -> bool:
        return self.transition_type == "CLOSED"
