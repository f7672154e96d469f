"""
Slot generation from a tenant's weekly opening hours.

Pure functions of (schedule, date): no store access, no clock. Calling
them twice with the same inputs yields the same sequence.

Boundary policy: a start is emitted whenever it is strictly before the
closing time. Whether the chosen services still fit before closing is
left to the caller, so a 60-minute service may be offered at 17:30 in a
window that closes at 18:00.
"""

import logging
from datetime import date
from typing import Iterator, Optional

from booking_engine.schemas.schedule_schema import DayWindow, ScheduleConfig, Weekday
from booking_engine.scheduling.time_math import format_minutes, to_minutes

logger = logging.getLogger(__name__)


def get_window(config: ScheduleConfig, weekday: Weekday) -> Optional[DayWindow]:
    """Return the usable opening window for a weekday, or None when closed.

    A missing day, ``is_open=False`` and an inverted or empty window all
    read as closed rather than as an error.
    """
    window = config.window_for(weekday)
    if window is None or not window.is_open:
        return None
    try:
        start, end = to_minutes(window.start_time), to_minutes(window.end_time)
    except ValueError:
        logger.warning("Unparseable window for %s: %r", weekday.value, window)
        return None
    if start >= end:
        logger.debug(
            "Window for %s is empty (%s >= %s), treating as closed",
            weekday.value, window.start_time, window.end_time,
        )
        return None
    return window


def window_for_date(config: ScheduleConfig, day: date) -> Optional[DayWindow]:
    return get_window(config, Weekday.from_date(day))


def iter_slots(config: ScheduleConfig, day: date) -> Iterator[str]:
    """Lazily yield candidate start times for ``day`` in ascending order."""
    window = window_for_date(config, day)
    if window is None:
        return

    current = to_minutes(window.start_time)
    end = to_minutes(window.end_time)
    step = config.step_minutes
    while current < end:
        yield format_minutes(current)
        current += step


def generate_slots(config: ScheduleConfig, day: date) -> list[str]:
    """Ordered list of candidate ``HH:MM`` starts for ``day``."""
    return list(iter_slots(config, day))


def full_day_span(config: ScheduleConfig, day: date) -> Optional[tuple[str, int]]:
    """Start and length of the single slot a whole-venue booking occupies."""
    window = window_for_date(config, day)
    if window is None:
        return None
    duration = to_minutes(window.end_time) - to_minutes(window.start_time)
    return window.start_time, duration
