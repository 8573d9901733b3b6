"""Alerting exceptions."""

from __future__ import annotations


class AlertingError(Exception):
    """Base exception for threshold evaluation and alerting errors."""


class InvalidPolicyError(AlertingError):
    """A threshold policy is missing bounds or has inconsistent bounds."""


class OutOfOrderReadingError(AlertingError):
    """A reading arrived with a timestamp not after the key's last one."""


class UnknownMetricError(AlertingError):
    """No threshold policy is registered for a reading's metric."""
