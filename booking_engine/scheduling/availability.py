"""
Availability checks for one resource on one day.

A resource (professional, or the whole venue) is free for a candidate
interval when no pending or confirmed reservation overlaps it. Intervals
are half-open, so back-to-back bookings are allowed.

If the store cannot be read the checker answers "unavailable". Offering a
slot that may already be taken is worse than hiding one that is free.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from booking_engine.schemas.reservation_schema import ACTIVE_STATUSES, Reservation
from booking_engine.schemas.schedule_schema import ScheduleConfig
from booking_engine.scheduling.slot_generator import iter_slots
from booking_engine.scheduling.time_math import overlaps, to_minutes

logger = logging.getLogger(__name__)


def find_conflicts(
    start: int, end: int, reservations: Iterable[Reservation]
) -> list[Reservation]:
    """Active reservations whose interval overlaps ``[start, end)``."""
    return [
        r for r in reservations
        if r.status.holds_slot and overlaps(start, end, r.start_minutes, r.end_minutes)
    ]


class AvailabilityChecker:
    """Answers "is this interval still free?" against the reservation store."""

    def __init__(self, store) -> None:
        self._store = store

    def conflicting_reservations(
        self,
        resource_id: str,
        tenant_id: str,
        day: date,
        start_time: str,
        duration_minutes: int,
    ) -> list[Reservation]:
        """Active reservations overlapping the candidate interval.

        Store errors propagate; use :meth:`is_available` for the fail-closed answer.
        """
        start = to_minutes(start_time)
        existing = self._store.find(
            tenant_id, resource_id=resource_id, day=day, statuses=ACTIVE_STATUSES
        )
        return find_conflicts(start, start + duration_minutes, existing)

    def is_available(
        self,
        resource_id: str,
        tenant_id: str,
        day: date,
        start_time: str,
        duration_minutes: int,
    ) -> bool:
        """True iff no active reservation overlaps the candidate interval.

        Store failures of any kind yield False.
        """
        try:
            conflicts = self.conflicting_reservations(
                resource_id, tenant_id, day, start_time, duration_minutes
            )
        except Exception:
            logger.exception(
                "Reservation lookup failed for %s/%s on %s; reporting %s as unavailable",
                tenant_id, resource_id, day, start_time,
            )
            return False

        if conflicts:
            logger.debug(
                "%s %s+%dmin on %s conflicts with %s",
                resource_id, start_time, duration_minutes, day, conflicts[0].id,
            )
            return False
        return True

    def available_slots(
        self,
        config: ScheduleConfig,
        tenant_id: str,
        resource_id: str,
        day: date,
        duration_minutes: int,
        now_local: Optional[datetime] = None,
    ) -> list[str]:
        """Generated starts for ``day`` that are still free for ``duration_minutes``.

        Reads the store once. When ``now_local`` is on ``day``, starts that are
        not strictly later than the current wall-clock minute are dropped.
        """
        candidates = list(iter_slots(config, day))
        if not candidates:
            return []

        if now_local is not None and now_local.date() == day:
            current = now_local.hour * 60 + now_local.minute
            candidates = [s for s in candidates if to_minutes(s) > current]

        try:
            existing = self._store.find(
                tenant_id, resource_id=resource_id, day=day, statuses=ACTIVE_STATUSES
            )
        except Exception:
            logger.exception(
                "Reservation lookup failed for %s/%s on %s; offering no slots",
                tenant_id, resource_id, day,
            )
            return []

        free = []
        for slot in candidates:
            start = to_minutes(slot)
            if not find_conflicts(start, start + duration_minutes, existing):
                free.append(slot)
        return free


def check_availability(
    store,
    tenant_id: str,
    resource_id: str,
    day: date,
    start_time: str,
    duration_minutes: int,
) -> bool:
    """Functional form of :meth:`AvailabilityChecker.is_available`."""
    return AvailabilityChecker(store).is_available(
        resource_id, tenant_id, day, start_time, duration_minutes
    )
