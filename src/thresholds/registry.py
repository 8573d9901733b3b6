"""PolicyRegistry and RecipientDirectory — explicit per-metric configuration."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from src.core.config import NotificationConfig, ThresholdsConfig
from src.core.exceptions import UnknownMetricError
from src.core.types import ThresholdPolicy
from src.thresholds.classifier import validate_policy

logger = structlog.get_logger(__name__)


class PolicyRegistry:
    """Threshold policies keyed by metric_id.

    Policies are validated on registration, so every policy handed out by
    :meth:`get` can be classified against.
    """

    def __init__(self, policies: Iterable[ThresholdPolicy] | None = None) -> None:
        self._policies: dict[str, ThresholdPolicy] = {}
        for policy in policies or ():
            self.register(policy)

    @classmethod
    def from_config(cls, config: ThresholdsConfig) -> PolicyRegistry:
        return cls(config.policies)

    @property
    def policies(self) -> dict[str, ThresholdPolicy]:
        """Read-only copy of registered policies."""
        return dict(self._policies)

    @property
    def metric_ids(self) -> list[str]:
        return list(self._policies)

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self._policies

    def __len__(self) -> int:
        return len(self._policies)

    def register(self, policy: ThresholdPolicy) -> None:
        """Add or replace the policy for ``policy.metric_id``."""
        validate_policy(policy)
        self._policies[policy.metric_id] = policy

    def get(self, metric_id: str) -> ThresholdPolicy:
        """Look up a policy, raising UnknownMetricError if none is registered."""
        try:
            return self._policies[metric_id]
        except KeyError:
            raise UnknownMetricError(
                f"no threshold policy registered for metric {metric_id!r}"
            ) from None

    def update(self, metric_id: str, **changes: Any) -> ThresholdPolicy:
        """Replace fields of an existing policy (e.g. new bounds).

        The current policy stays in place if the updated one is invalid.
        """
        current = self.get(metric_id)
        updated = ThresholdPolicy.model_validate({**current.model_dump(), **changes})
        validate_policy(updated)
        self._policies[metric_id] = updated
        logger.info(
            "threshold_policy_updated",
            metric_id=metric_id,
            lower=updated.lower,
            upper=updated.upper,
            near_margin=updated.near_margin,
        )
        return updated

    def remove(self, metric_id: str) -> bool:
        return self._policies.pop(metric_id, None) is not None


class RecipientDirectory:
    """Resolves the notification recipients for a metric.

    Instances are callable, so they can be passed straight to
    :meth:`src.alerts.ledger.AlertLedger.ingest`.
    """

    def __init__(
        self,
        recipients: Mapping[str, Iterable[str]] | None = None,
        default: Iterable[str] = (),
    ) -> None:
        self._recipients: dict[str, frozenset[str]] = {
            metric_id: frozenset(addrs)
            for metric_id, addrs in (recipients or {}).items()
        }
        self._default = frozenset(default)

    @classmethod
    def from_config(cls, config: NotificationConfig) -> RecipientDirectory:
        return cls(config.recipients, default=config.default_recipients)

    def __call__(self, metric_id: str) -> frozenset[str]:
        return self._recipients.get(metric_id, self._default)

    def set(self, metric_id: str, recipients: Iterable[str]) -> None:
        self._recipients[metric_id] = frozenset(recipients)
