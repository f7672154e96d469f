"""Wall-clock arithmetic on minutes-since-midnight.

``HH:MM`` strings only exist at the edges; every comparison and interval
test in the engine runs on integers. ``24:00`` is accepted as the end of
the day so a service may finish exactly at midnight.
"""

import re

MINUTES_PER_DAY = 24 * 60
END_OF_DAY = "24:00"

_HHMM_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def to_minutes(value: str) -> int:
    """Convert zero-padded ``HH:MM`` (or ``24:00``) to minutes since midnight.

    Raises:
        ValueError: If the string is not a valid wall-clock time.
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    value = value.strip()
    if value == END_OF_DAY:
        return MINUTES_PER_DAY
    if not _HHMM_RE.match(value):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    """Format minutes since midnight as zero-padded ``HH:MM``; 1440 is ``24:00``."""
    if not 0 <= total <= MINUTES_PER_DAY:
        raise ValueError(f"{total} minutes is outside a single day")
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes(value: str, minutes: int) -> str:
    """Shift a wall-clock time forward; raises ValueError past midnight."""
    return format_minutes(to_minutes(value) + minutes)


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval overlap. Touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b
