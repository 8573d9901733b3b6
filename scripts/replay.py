#!/usr/bin/env python3
"""Replay CLI — run recorded readings through the alerting pipeline.

Usage:
    python -m scripts.replay readings.json
    python -m scripts.replay readings.json --config config/settings.yaml
    python -m scripts.replay readings.json --status CRITICAL --log-level DEBUG

Readings JSON format (a list, or an object with a ``readings`` list)::

    [
        {"asset_id": "PUMP-1", "metric_id": "Max_Pressure_psi",
         "timestamp": 1700000000.0, "value": 1380},
        {"asset_id": "PUMP-1", "metric_id": "Max_Pressure_psi",
         "timestamp": 1700000060.0, "value": 1450}
    ]

Readings are sorted by timestamp before replay.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter

from src.alerts.channels import LogChannel
from src.alerts.dispatcher import AlertDispatcher
from src.alerts.filters import by_status, newest_first, parse_status_filter
from src.alerts.monitor import AlertMonitor
from src.core.config import load_settings
from src.core.exceptions import AlertingError
from src.core.logging import setup_logging
from src.core.types import AlertTransition, Reading
from src.dashboard.cards import AlertCard, build_alert_cards
from src.series.window import ordered

_READINGS = TypeAdapter(list[Reading])


def load_readings(path: str | Path) -> list[Reading]:
    """Load readings from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("readings", [])
    return _READINGS.validate_python(data)


def render_transition(transition: AlertTransition) -> str:
    record = transition.record
    return (
        f"  {transition.reading.timestamp:>14.1f}  {transition.transition_type:<8}"
        f" {record.asset_id}/{record.metric_id}"
        f" level={transition.level.name} value={transition.reading.value:g}"
        f" [{record.id}]"
    )


def render_card(card: AlertCard) -> str:
    state = "OPEN" if card.closed_at is None else "CLOSED"
    badge = " email-sent" if card.notified else ""
    return (
        f"  [{card.status.name:<8}] {card.title} on {card.asset_id} ({state})"
        f" current={card.current_value:g}{card.unit and ' ' + card.unit}"
        f" threshold={card.threshold:g} diff={card.difference:+.1f}"
        f" peak={card.peak_level.name}{badge}"
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay recorded readings through the alerting pipeline.",
    )
    parser.add_argument(
        "readings",
        help="Path to readings JSON file",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--status",
        default="ALL",
        help="Only list alerts with this status: ALL, NORMAL, WARNING, CRITICAL",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level",
    )
    return parser.parse_args(argv)


async def run_replay(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(settings.logging, level=args.log_level, fmt="console")

    try:
        statuses = parse_status_filter(args.status)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    try:
        readings = ordered(load_readings(args.readings))
    except (OSError, ValueError) as exc:
        # ValueError covers JSONDecodeError and pydantic's ValidationError.
        print(f"Cannot load readings from {args.readings}: {exc}", file=sys.stderr)
        return 1

    monitor = AlertMonitor.from_settings(settings)
    dispatcher = AlertDispatcher(channels=[LogChannel()], ledger=monitor.ledger)
    monitor.on_transition(dispatcher.on_transition)

    print(f"Replaying {len(readings)} readings")
    print(f"  Policies: {len(monitor.registry)}")
    print()

    try:
        transitions = await monitor.process_many(readings)
    except AlertingError as exc:
        print(f"Replay aborted: {exc}", file=sys.stderr)
        return 1
    finally:
        await dispatcher.close()

    print("TRANSITIONS")
    print("-" * 72)
    for transition in transitions:
        print(render_transition(transition))

    records = by_status(newest_first(monitor.records()), statuses)
    cards = build_alert_cards(
        records, readings, points=settings.dashboard.sparkline_points,
    )
    print()
    print(f"ALERTS ({args.status.upper()})")
    print("-" * 72)
    if not cards:
        print("  No alerts matching the current filter settings.")
    for card in cards:
        print(render_card(card))

    snap = monitor.snapshot()
    print()
    print(
        f"Replay complete: {snap['alerts_total']} alerts,"
        f" {snap['alerts_open']} still open"
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    sys.exit(asyncio.run(run_replay(args)))


if __name__ == "__main__":
    main()
