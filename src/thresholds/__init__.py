"""Threshold policies and status classification."""

from src.thresholds.classifier import (
    breach_depth,
    breached_bound,
    classify,
    classify_many,
    is_approaching,
    validate_policy,
)
from src.thresholds.registry import PolicyRegistry, RecipientDirectory

__all__ = [
    "PolicyRegistry",
    "RecipientDirectory",
    "breach_depth",
    "breached_bound",
    "classify",
    "classify_many",
    "is_approaching",
    "validate_policy",
]
