"""Pure functions that convert alert transitions into AlertMessage objects."""

from __future__ import annotations

from src.alerts.types import AlertMessage, Severity
from src.core.types import (
    AlertRecord,
    AlertTransition,
    ThresholdMode,
    ThresholdPolicy,
    TransitionType,
)

# ── Severity mappings ───────────────────────────────────────────

# OPENED messages take their severity from the level that opened the record.
_TRANSITION_SEVERITY: dict[TransitionType, Severity] = {
    TransitionType.UPDATED: Severity.DEBUG,
    TransitionType.CLOSED: Severity.INFO,
}


# ── Helpers ─────────────────────────────────────────────────────


def _fmt(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:g}"


def describe_policy(policy: ThresholdPolicy) -> str:
    """Human-readable bound description, e.g. ``>= 1400 psi``."""
    unit = f" {policy.unit}" if policy.unit else ""
    if policy.mode == ThresholdMode.SINGLE_UPPER:
        return f">= {_fmt(policy.upper)}{unit}"
    if policy.mode == ThresholdMode.SINGLE_LOWER:
        return f"<= {_fmt(policy.lower)}{unit}"
    return f"outside [{_fmt(policy.lower)}, {_fmt(policy.upper)}]{unit}"


def _record_fields(record: AlertRecord) -> dict[str, str]:
    fields = {
        "asset_id": record.asset_id,
        "metric_id": record.metric_id,
        "threshold": describe_policy(record.threshold_snapshot),
        "peak_level": record.peak_level.name,
        "peak_value": _fmt(record.peak_value),
        "current_value": _fmt(record.last_value),
    }
    if record.previous_value is not None:
        fields["previous_value"] = _fmt(record.previous_value)
    return fields


# ── Formatters ──────────────────────────────────────────────────


def format_transition(transition: AlertTransition) -> AlertMessage:
    """Convert an AlertTransition to an AlertMessage."""
    record = transition.record
    name = record.threshold_snapshot.display_name
    fields = _record_fields(record)

    if transition.transition_type == TransitionType.OPENED:
        severity = Severity.for_level(transition.level)
        title = f"{transition.level.name}: {name} on {record.asset_id}"
        body = (
            f"{name} reading {_fmt(record.opening_value)} breached"
            f" threshold {describe_policy(record.threshold_snapshot)}"
        )
    elif transition.transition_type == TransitionType.CLOSED:
        severity = _TRANSITION_SEVERITY[TransitionType.CLOSED]
        title = f"RESOLVED: {name} on {record.asset_id}"
        body = (
            f"{name} back to normal at {_fmt(record.closing_value)}"
            f" (peak {record.peak_level.name} {_fmt(record.peak_value)})"
        )
        fields["duration_secs"] = _fmt(
            (record.closed_at or record.opened_at) - record.opened_at
        )
    else:
        severity = _TRANSITION_SEVERITY[TransitionType.UPDATED]
        title = f"{transition.level.name}: {name} on {record.asset_id}"
        body = f"{name} still out of range at {_fmt(transition.reading.value)}"

    return AlertMessage(
        severity=severity,
        title=title,
        body=body,
        alert_id=record.id,
        recipients=sorted(record.recipients),
        fields=fields,
        transition_type=transition.transition_type.value,
        timestamp=transition.reading.timestamp,
        raw=transition.model_dump(mode="json"),
    )
