"""In-process reservation store with per-resource locking.

Used by tests and single-process deployments. Conditional writes hold a
lock scoped to (tenant, resource, date) for the length of one call only.
"""

import logging
import threading
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from booking_engine.errors import SlotConflictError
from booking_engine.schemas.reservation_schema import (
    ACTIVE_STATUSES,
    Reservation,
    ReservationStatus,
)
from booking_engine.scheduling.availability import find_conflicts
from booking_engine.store.base import ReservationStore

logger = logging.getLogger(__name__)

SlotKey = tuple[str, str, date]


class InMemoryReservationStore(ReservationStore):
    """Dict-backed store; safe to share between request threads."""

    def __init__(self) -> None:
        self._records: dict[str, Reservation] = {}
        self._records_lock = threading.Lock()
        self._slot_locks: defaultdict[SlotKey, threading.Lock] = defaultdict(threading.Lock)
        self._slot_locks_guard = threading.Lock()

    def _slot_lock(self, reservation: Reservation) -> threading.Lock:
        key = (reservation.tenant_id, reservation.resource_id, reservation.date)
        with self._slot_locks_guard:
            return self._slot_locks[key]

    def get(self, reservation_id: str) -> Optional[Reservation]:
        with self._records_lock:
            return self._records.get(reservation_id)

    def find(
        self,
        tenant_id: str,
        resource_id: Optional[str] = None,
        day: Optional[date] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        statuses: Optional[Iterable[ReservationStatus]] = None,
    ) -> list[Reservation]:
        wanted = set(statuses) if statuses is not None else None
        with self._records_lock:
            records = list(self._records.values())

        matches = [
            r for r in records
            if r.tenant_id == tenant_id
            and (resource_id is None or r.resource_id == resource_id)
            and (day is None or r.date == day)
            and (date_from is None or r.date >= date_from)
            and (date_to is None or r.date <= date_to)
            and (wanted is None or r.status in wanted)
        ]
        return sorted(matches, key=lambda r: (r.date, r.start_minutes, r.created_at))

    def insert_if_free(self, reservation: Reservation) -> Reservation:
        with self._slot_lock(reservation):
            existing = self.find(
                reservation.tenant_id,
                resource_id=reservation.resource_id,
                day=reservation.date,
                statuses=ACTIVE_STATUSES,
            )
            conflicts = find_conflicts(
                reservation.start_minutes, reservation.end_minutes, existing
            )
            if conflicts:
                raise SlotConflictError(
                    f"{reservation.start_time}-{reservation.end_time} on {reservation.date} "
                    f"overlaps reservation {conflicts[0].id}"
                )
            with self._records_lock:
                self._records[reservation.id] = reservation
        logger.debug("Stored reservation %s", reservation.id)
        return reservation

    def compare_and_set(
        self, updated: Reservation, expected_status: ReservationStatus
    ) -> bool:
        with self._records_lock:
            current = self._records.get(updated.id)
            if current is None or current.status != expected_status:
                return False
            self._records[updated.id] = updated
            return True

    def __len__(self) -> int:
        with self._records_lock:
            return len(self._records)
