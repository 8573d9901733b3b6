"""Time-series windows over readings — full history and sparkline slices.

Every function returns a :class:`ReadingView`: a lazy, restartable
iterable that re-reads its source on each iteration and never mutates it.
Sources are expected in ascending timestamp order (ties in arrival order);
use :func:`ordered` to sort a replayed history first.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator, Sequence

from src.core.types import Reading

ReadingPredicate = Callable[[Reading], bool]


class ReadingView:
    """Restartable view over a reading source with an optional filter and tail."""

    def __init__(
        self,
        source: Iterable[Reading],
        predicate: ReadingPredicate | None = None,
        tail: int | None = None,
    ) -> None:
        # One-shot iterators are captured once so the view can be re-iterated.
        if isinstance(source, (Sequence, ReadingView)):
            self._source: Iterable[Reading] = source
        else:
            self._source = tuple(source)
        self._predicate = predicate
        self._tail = tail

    def __iter__(self) -> Iterator[Reading]:
        items: Iterable[Reading] = self._source
        if self._predicate is not None:
            items = filter(self._predicate, items)
        if self._tail is not None:
            if self._tail <= 0:
                return iter(())
            return iter(deque(items, maxlen=self._tail))
        return iter(items)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None

    def __repr__(self) -> str:
        return f"ReadingView({list(self)!r})"

    def values(self) -> list[float]:
        return [r.value for r in self]

    def latest(self) -> Reading | None:
        last: Reading | None = None
        for last in self:
            pass
        return last


def window(series: Iterable[Reading], count: int) -> ReadingView:
    """The last *count* readings of *series*, oldest first."""
    return ReadingView(series, tail=count)


def time_range(series: Iterable[Reading], start: float, end: float) -> ReadingView:
    """All readings with ``start <= timestamp <= end``."""
    return ReadingView(series, predicate=lambda r: start <= r.timestamp <= end)


def for_key(
    series: Iterable[Reading],
    asset_id: str | None = None,
    metric_id: str | None = None,
) -> ReadingView:
    """Readings for one asset and/or metric; None matches everything."""

    def _match(r: Reading) -> bool:
        if asset_id is not None and r.asset_id != asset_id:
            return False
        return metric_id is None or r.metric_id == metric_id

    return ReadingView(series, predicate=_match)


def sparkline(
    series: Iterable[Reading],
    asset_id: str,
    metric_id: str,
    points: int = 12,
) -> ReadingView:
    """Short context window of the most recent readings for one key."""
    return window(for_key(series, asset_id, metric_id), points)


def ordered(readings: Iterable[Reading]) -> list[Reading]:
    """Sort readings by timestamp, keeping arrival order for ties."""
    return sorted(readings, key=lambda r: r.timestamp)
