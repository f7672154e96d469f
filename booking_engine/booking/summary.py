"""Owner dashboard counters over a list of reservations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from booking_engine.schemas.reservation_schema import Reservation, ReservationStatus

logger = logging.getLogger(__name__)


@dataclass
class ReservationSummary:
    """Counts shown at the top of the owner's reservation list."""

    total: int = 0
    confirmed: int = 0
    pending: int = 0
    cancelled: int = 0
    expired: int = 0
    awaiting_notification: int = 0
    confirmed_revenue: float = 0.0


def summarize_reservations(
    reservations: Iterable[Reservation], now: datetime
) -> ReservationSummary:
    """
    Tally reservations by status.

    A pending reservation whose hold has already run out counts as expired
    even if no sweep has written that yet.
    """
    summary = ReservationSummary()
    for r in reservations:
        summary.total += 1
        status = ReservationStatus.EXPIRED if r.is_overdue(now) else r.status
        if status == ReservationStatus.CONFIRMED:
            summary.confirmed += 1
            summary.confirmed_revenue += r.total_price
        elif status == ReservationStatus.PENDING:
            summary.pending += 1
        elif status == ReservationStatus.CANCELLED:
            summary.cancelled += 1
        else:
            summary.expired += 1
            if not r.expiration_notification_sent:
                summary.awaiting_notification += 1

    summary.confirmed_revenue = round(summary.confirmed_revenue, 2)
    logger.debug("Summarized %d reservation(s)", summary.total)
    return summary
