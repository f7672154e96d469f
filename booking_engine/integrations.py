"""
Seams to collaborators outside the engine.

Notifications are fire-and-forget: a failing dispatcher is logged and
never undoes the reservation change that triggered it. The payment oracle
only answers "has this been paid?"; charging is someone else's job.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from booking_engine.schemas.reservation_schema import Reservation

logger = logging.getLogger(__name__)


class NotificationEvent(str, Enum):
    RESERVATION_CREATED = "reservation_created"
    RESERVATION_CONFIRMED = "reservation_confirmed"
    RESERVATION_CANCELLED = "reservation_cancelled"


class Notifier(ABC):
    """Delivers owner/customer notices (push, WhatsApp, email...)."""

    @abstractmethod
    def notify(self, event: NotificationEvent, reservation: Reservation) -> None:
        """Send a notice. May raise; callers treat delivery as best effort."""


class LoggingNotifier(Notifier):
    """Default notifier: writes the event to the log."""

    def notify(self, event: NotificationEvent, reservation: Reservation) -> None:
        logger.info(
            "Notification %s for reservation %s (%s %s)",
            event.value, reservation.id, reservation.date, reservation.start_time,
        )


class PaymentOracle(ABC):
    """Reports whether the payment for a reservation has completed."""

    @abstractmethod
    def is_paid(self, reservation: Reservation) -> bool:
        """True once the provider reports the payment as settled."""


def dispatch(notifier: Notifier, event: NotificationEvent, reservation: Reservation) -> None:
    """Send a notification, logging instead of raising on failure."""
    try:
        notifier.notify(event, reservation)
    except Exception:
        logger.warning(
            "Notification %s for reservation %s failed; reservation state kept",
            event.value, reservation.id, exc_info=True,
        )
