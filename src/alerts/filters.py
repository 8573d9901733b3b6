"""Read-only queries over alert records.

Every function returns a new list and preserves the order it was given,
except :func:`newest_first`.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.core.types import AlertRecord, StatusLevel

ALL_STATUSES: frozenset[StatusLevel] = frozenset(StatusLevel)


def by_status(
    records: Iterable[AlertRecord], statuses: Iterable[StatusLevel],
) -> list[AlertRecord]:
    """Records whose current level is in *statuses*.

    An open record's current level is its peak level; a closed record's is
    NORMAL.
    """
    wanted = frozenset(statuses)
    return [r for r in records if r.current_level in wanted]


def active_only(records: Iterable[AlertRecord]) -> list[AlertRecord]:
    return [r for r in records if r.is_open]


def closed_only(records: Iterable[AlertRecord]) -> list[AlertRecord]:
    return [r for r in records if not r.is_open]


def by_asset(
    records: Iterable[AlertRecord], asset_ids: Iterable[str],
) -> list[AlertRecord]:
    wanted = frozenset(asset_ids)
    return [r for r in records if r.asset_id in wanted]


def newest_first(records: Iterable[AlertRecord]) -> list[AlertRecord]:
    """Order by ``opened_at`` descending (stable for equal times)."""
    return sorted(records, key=lambda r: r.opened_at, reverse=True)


def parse_status_filter(value: str) -> frozenset[StatusLevel]:
    """Map a status filter option ("ALL", "CRITICAL", ...) to a level set.

    Raises:
        ValueError: If *value* names no status.
    """
    name = value.strip().upper()
    if name == "ALL":
        return ALL_STATUSES
    try:
        return frozenset({StatusLevel[name]})
    except KeyError:
        options = ", ".join(["ALL", *(s.name for s in StatusLevel)])
        raise ValueError(
            f"unknown status filter {value!r} (expected one of {options})"
        ) from None
