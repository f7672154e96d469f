"""
Record store contract the engine is written against.

Any backend (document database, SQL, in-memory) must provide two
conditional writes so concurrent requests cannot both win:

- ``insert_if_free`` rejects a new reservation whose interval overlaps an
  active one on the same (tenant, resource, date), atomically with the
  insert.
- ``compare_and_set`` only replaces a reservation whose stored status
  still equals the status the caller read.

Backends raise ``StoreUnavailableError`` when they cannot be reached.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from booking_engine.schemas.reservation_schema import Reservation, ReservationStatus


class ReservationStore(ABC):
    """Abstract reservation persistence."""

    def new_id(self) -> str:
        return uuid.uuid4().hex

    @abstractmethod
    def get(self, reservation_id: str) -> Optional[Reservation]:
        """Fetch one reservation, None if unknown."""

    @abstractmethod
    def find(
        self,
        tenant_id: str,
        resource_id: Optional[str] = None,
        day: Optional[date] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        statuses: Optional[Iterable[ReservationStatus]] = None,
    ) -> list[Reservation]:
        """Reservations of a tenant, optionally narrowed, ordered by date and start."""

    @abstractmethod
    def insert_if_free(self, reservation: Reservation) -> Reservation:
        """Persist ``reservation`` unless an active one overlaps it.

        Raises:
            SlotConflictError: If the store already holds an overlapping
                pending or confirmed reservation for the same resource/date.
        """

    @abstractmethod
    def compare_and_set(
        self, updated: Reservation, expected_status: ReservationStatus
    ) -> bool:
        """Replace the stored record only if its status is still ``expected_status``.

        Returns False (and writes nothing) when another writer got there first.
        """
