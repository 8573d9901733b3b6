"""Status classification — pure functions mapping a value and a policy to a level.

Bounds are inclusive on the alerting side: a value exactly on a bound is
WARNING.  The critical band starts ``near_margin`` beyond the bound,
measured as a fraction of the bound's magnitude (``upper * (1 + m)`` and
``lower * (1 - m)`` for positive bounds).  When the critical edge
coincides with the bound (``near_margin == 0`` or a bound of zero) the
result is capped at WARNING.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from src.core.exceptions import InvalidPolicyError
from src.core.types import StatusLevel, ThresholdMode, ThresholdPolicy


def validate_policy(policy: ThresholdPolicy) -> None:
    """Raise InvalidPolicyError if *policy* cannot be evaluated."""
    needs_upper = policy.mode in (ThresholdMode.SINGLE_UPPER, ThresholdMode.DUAL)
    needs_lower = policy.mode in (ThresholdMode.SINGLE_LOWER, ThresholdMode.DUAL)

    if needs_upper and policy.upper is None:
        raise InvalidPolicyError(
            f"{policy.metric_id}: {policy.mode} policy requires an upper bound"
        )
    if needs_lower and policy.lower is None:
        raise InvalidPolicyError(
            f"{policy.metric_id}: {policy.mode} policy requires a lower bound"
        )
    for name, bound in (("lower", policy.lower), ("upper", policy.upper)):
        if bound is not None and not math.isfinite(bound):
            raise InvalidPolicyError(f"{policy.metric_id}: {name} bound is {bound}")
    if (
        policy.lower is not None
        and policy.upper is not None
        and policy.lower >= policy.upper
    ):
        raise InvalidPolicyError(
            f"{policy.metric_id}: lower bound {policy.lower}"
            f" must be below upper bound {policy.upper}"
        )
    if not math.isfinite(policy.near_margin) or policy.near_margin < 0:
        raise InvalidPolicyError(
            f"{policy.metric_id}: near_margin must be >= 0,"
            f" got {policy.near_margin}"
        )


# ── Per-side rules ───────────────────────────────────────────────


def _classify_upper(value: float, upper: float, margin: float) -> StatusLevel:
    if value < upper:
        return StatusLevel.NORMAL
    edge = upper + abs(upper) * margin
    if edge > upper and value >= edge:
        return StatusLevel.CRITICAL
    return StatusLevel.WARNING


def _classify_lower(value: float, lower: float, margin: float) -> StatusLevel:
    if value > lower:
        return StatusLevel.NORMAL
    edge = lower - abs(lower) * margin
    if edge < lower and value <= edge:
        return StatusLevel.CRITICAL
    return StatusLevel.WARNING


def _active_bounds(policy: ThresholdPolicy) -> tuple[float | None, float | None]:
    """Return the (lower, upper) bounds the policy's mode alerts on."""
    if policy.mode == ThresholdMode.SINGLE_UPPER:
        return None, policy.upper
    if policy.mode == ThresholdMode.SINGLE_LOWER:
        return policy.lower, None
    return policy.lower, policy.upper


# ── Public API ───────────────────────────────────────────────────


def classify(value: float, policy: ThresholdPolicy) -> StatusLevel:
    """Return the status level of *value* under *policy*.

    DUAL policies classify each side independently and keep the worse one.

    Raises:
        InvalidPolicyError: If *policy* fails :func:`validate_policy`.
        ValueError: If *value* is NaN.
    """
    validate_policy(policy)
    if math.isnan(value):
        raise ValueError(f"{policy.metric_id}: cannot classify NaN")
    lower, upper = _active_bounds(policy)
    level = StatusLevel.NORMAL
    if upper is not None:
        level = max(level, _classify_upper(value, upper, policy.near_margin))
    if lower is not None:
        level = max(level, _classify_lower(value, lower, policy.near_margin))
    return level


def classify_many(
    values: Iterable[float], policy: ThresholdPolicy,
) -> list[StatusLevel]:
    """Classify a batch of values against one policy."""
    return [classify(v, policy) for v in values]


def is_approaching(value: float, policy: ThresholdPolicy) -> bool:
    """Return True if *value* is NORMAL but within ``near_margin`` of a bound.

    Advisory only; approaching a bound never opens an alert.
    """
    if classify(value, policy) != StatusLevel.NORMAL:
        return False
    margin = policy.near_margin
    if margin == 0:
        return False
    lower, upper = _active_bounds(policy)
    if upper is not None and value >= upper - abs(upper) * margin:
        return True
    if lower is not None and value <= lower + abs(lower) * margin:
        return True
    return False


def breach_depth(value: float, policy: ThresholdPolicy) -> float:
    """How far *value* lies beyond the nearest alerting bound (<= 0 if inside)."""
    validate_policy(policy)
    lower, upper = _active_bounds(policy)
    depth = -math.inf
    if upper is not None:
        depth = max(depth, value - upper)
    if lower is not None:
        depth = max(depth, lower - value)
    return depth


def breached_bound(value: float, policy: ThresholdPolicy) -> float:
    """Return the bound *value* is beyond, or the nearest one if it is inside."""
    validate_policy(policy)
    lower, upper = _active_bounds(policy)
    if lower is None:
        return upper  # type: ignore[return-value]
    if upper is None:
        return lower
    if value - upper >= lower - value:
        return upper
    return lower
