"""Alert ledger, queries and notification dispatch."""

from src.alerts.channels import LogChannel, NotificationChannel
from src.alerts.dispatcher import AlertDispatcher
from src.alerts.filters import (
    active_only,
    by_asset,
    by_status,
    closed_only,
    newest_first,
    parse_status_filter,
)
from src.alerts.formatters import describe_policy, format_transition
from src.alerts.ledger import AlertLedger
from src.alerts.monitor import AlertMonitor, TransitionCallback
from src.alerts.types import AlertMessage, Severity

__all__ = [
    "AlertDispatcher",
    "AlertLedger",
    "AlertMessage",
    "AlertMonitor",
    "LogChannel",
    "NotificationChannel",
    "Severity",
    "TransitionCallback",
    "active_only",
    "by_asset",
    "by_status",
    "closed_only",
    "describe_policy",
    "format_transition",
    "newest_first",
    "parse_status_filter",
]
