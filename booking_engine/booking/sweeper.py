"""
Expiration sweep run on every reservation read.

There is no background job: whoever lists reservations first after a
payment hold runs out performs the ``pending -> expired`` transition.
Losing that write to a concurrent cancel or confirm is fine, the
winner's record is returned instead.
"""

from datetime import datetime
from typing import Callable, Iterable

from booking_engine.booking.state_machine import LifecycleEvent, next_status
from booking_engine.logging_context import get_request_logger
from booking_engine.schemas.reservation_schema import Reservation, ReservationStatus
from booking_engine.utils import utc_now

logger = get_request_logger(__name__)


class ExpirationSweeper:
    """Reclassifies overdue pending reservations as expired."""

    def __init__(self, store, clock: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._clock = clock

    def sweep(self, reservations: Iterable[Reservation]) -> list[Reservation]:
        """Return ``reservations`` with every overdue pending one expired."""
        now = self._clock()
        return [self._expire_if_overdue(r, now) if r.is_overdue(now) else r
                for r in reservations]

    def _expire_if_overdue(self, reservation: Reservation, now: datetime) -> Reservation:
        update = {
            "status": next_status(reservation.status, LifecycleEvent.EXPIRE, reservation.id),
            "updated_at": now,
        }
        if reservation.payment is not None:
            update["payment"] = reservation.payment.abandoned()
        expired = reservation.model_copy(update=update)
        if self._store.compare_and_set(expired, ReservationStatus.PENDING):
            logger.info(
                "Reservation %s expired (hold ended %s)",
                reservation.id, reservation.expires_at.isoformat(),
            )
            return expired

        # Another writer changed it first; report what is stored now.
        current = self._store.get(reservation.id)
        logger.debug("Expiry of %s lost to a concurrent update", reservation.id)
        return current if current is not None else reservation

    @staticmethod
    def needs_notification(reservations: Iterable[Reservation]) -> list[Reservation]:
        """Expired reservations whose customer has not been told yet."""
        return [
            r for r in reservations
            if r.status == ReservationStatus.EXPIRED and not r.expiration_notification_sent
        ]
