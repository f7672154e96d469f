"""
CLI for inspecting a tenant schedule without a running store.

Usage:
    python -m booking_engine.cli slots --schedule schedule.json --date 2026-10-20
    python -m booking_engine.cli slots --schedule schedule.json --date 2026-10-20 --duration 45
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as SchemaError

from booking_engine.schemas.schedule_schema import ScheduleConfig, default_schedule
from booking_engine.scheduling.slot_generator import generate_slots
from booking_engine.scheduling.time_math import add_minutes

logger = logging.getLogger(__name__)


def _load_schedule(path: Optional[str]) -> ScheduleConfig:
    if path is None:
        return default_schedule()
    return ScheduleConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))


def _format_slot(start: str, duration: Optional[int]) -> str:
    if duration is None:
        return start
    try:
        return f"{start}-{add_minutes(start, duration)}"
    except ValueError:
        return f"{start}-(past midnight)"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect bookable slots generated from a weekly schedule."
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    slots = subcommands.add_parser("slots", help="List candidate start times for a date.")
    slots.add_argument(
        "--schedule",
        type=str,
        default=None,
        help="Path to a schedule JSON file (default: built-in default schedule).",
    )
    slots.add_argument(
        "--date",
        type=date.fromisoformat,
        required=True,
        help="Calendar date as YYYY-MM-DD.",
    )
    slots.add_argument(
        "--duration",
        type=int,
        default=None,
        help="Show each slot's end for a service of this many minutes.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        schedule = _load_schedule(args.schedule)
    except FileNotFoundError:
        logger.error("Schedule file not found: %s", args.schedule)
        return 1
    except SchemaError as exc:
        logger.error("Invalid schedule file %s: %s", args.schedule, exc)
        return 1

    slots = generate_slots(schedule, args.date)
    if not slots:
        sys.stdout.write(f"Closed on {args.date.isoformat()}\n")
        return 0
    for start in slots:
        sys.stdout.write(_format_slot(start, args.duration) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
