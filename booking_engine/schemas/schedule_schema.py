"""Weekly opening-hours data models."""

import re
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from booking_engine.config import settings
from booking_engine.scheduling.time_math import END_OF_DAY

TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def validate_hhmm(value: str) -> str:
    """Check a wall-clock time is a zero-padded HH:MM string."""
    if not TIME_PATTERN.match(value):
        raise ValueError(f"expected HH:MM, got {value!r}")
    return value


def validate_end_hhmm(value: str) -> str:
    """Like :func:`validate_hhmm`, but also accepts ``24:00`` as an end time."""
    if value == END_OF_DAY:
        return value
    return validate_hhmm(value)


class Weekday(str, Enum):
    """Days of the week, keyed the way tenant schedules are stored."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        return list(cls)[day.weekday()]


class DayWindow(BaseModel):
    """Opening window for a single weekday."""
    is_open: bool
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return validate_hhmm(value)


class ScheduleConfig(BaseModel):
    """Slot granularity plus one opening window per weekday.

    Windows are written by the owner's profile editor, which enforces
    ``start_time < end_time`` and all seven days. Readers must still
    tolerate a missing day or an inverted window (both mean closed).
    """
    slot_duration_minutes: int = Field(gt=0)
    break_between_slots_minutes: int = Field(default=0, ge=0)
    weekly_windows: dict[Weekday, DayWindow] = Field(default_factory=dict)

    @property
    def step_minutes(self) -> int:
        return self.slot_duration_minutes + self.break_between_slots_minutes

    def window_for(self, weekday: Weekday) -> Optional[DayWindow]:
        return self.weekly_windows.get(weekday)


def default_schedule() -> ScheduleConfig:
    """Schedule used for tenants that never saved one."""
    weekday_hours = DayWindow(is_open=True, start_time="09:00", end_time="18:00")
    return ScheduleConfig(
        slot_duration_minutes=settings.schedule.slot_duration_minutes,
        break_between_slots_minutes=settings.schedule.break_between_slots_minutes,
        weekly_windows={
            Weekday.MONDAY: weekday_hours,
            Weekday.TUESDAY: weekday_hours,
            Weekday.WEDNESDAY: weekday_hours,
            Weekday.THURSDAY: weekday_hours,
            Weekday.FRIDAY: weekday_hours,
            Weekday.SATURDAY: DayWindow(is_open=True, start_time="09:00", end_time="14:00"),
            Weekday.SUNDAY: DayWindow(is_open=False, start_time="09:00", end_time="18:00"),
        },
    )
