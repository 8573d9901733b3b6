"""Windowed access to reading histories."""

from src.series.window import (
    ReadingView,
    for_key,
    ordered,
    sparkline,
    time_range,
    window,
)

__all__ = [
    "ReadingView",
    "for_key",
    "ordered",
    "sparkline",
    "time_range",
    "window",
]
