"""
Reservation lifecycle as an explicit transition table.

    [create, no payment]  -> confirmed
    [create, payment]     -> pending
    pending   --confirm-->   confirmed
    pending   --cancel--->   cancelled
    pending   --expire--->   expired
    confirmed --cancel--->   cancelled

``confirmed`` still accepts ``cancel``; ``cancelled`` and ``expired``
accept nothing. Anything not in the table raises IllegalTransitionError.

Usage:
    next_status(ReservationStatus.PENDING, LifecycleEvent.CONFIRM)
    # -> ReservationStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from enum import Enum

from booking_engine.errors import IllegalTransitionError
from booking_engine.schemas.reservation_schema import ReservationStatus

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    """Events that move a reservation between statuses."""
    CONFIRM = "confirm"
    CANCEL = "cancel"
    EXPIRE = "expire"


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: ReservationStatus
    to_status: ReservationStatus
    event: LifecycleEvent


TRANSITIONS: list[Transition] = [
    Transition(ReservationStatus.PENDING, ReservationStatus.CONFIRMED, LifecycleEvent.CONFIRM),
    Transition(ReservationStatus.PENDING, ReservationStatus.CANCELLED, LifecycleEvent.CANCEL),
    Transition(ReservationStatus.PENDING, ReservationStatus.EXPIRED, LifecycleEvent.EXPIRE),
    Transition(ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED, LifecycleEvent.CANCEL),
]

TERMINAL_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.EXPIRED})


def initial_status(requires_payment: bool) -> ReservationStatus:
    """Status a new reservation starts in."""
    return ReservationStatus.PENDING if requires_payment else ReservationStatus.CONFIRMED


def valid_events(status: ReservationStatus) -> list[LifecycleEvent]:
    """Events accepted from ``status``."""
    return [t.event for t in TRANSITIONS if t.from_status == status]


def can_transition(status: ReservationStatus, event: LifecycleEvent) -> bool:
    return event in valid_events(status)


def next_status(
    status: ReservationStatus, event: LifecycleEvent, reservation_id: str = ""
) -> ReservationStatus:
    """
    Resolve the status reached from ``status`` on ``event``.

    Raises:
        IllegalTransitionError: If the table has no such transition.
    """
    for t in TRANSITIONS:
        if t.from_status == status and t.event == event:
            logger.debug(
                "Reservation %s: %s -> %s (%s)",
                reservation_id or "?", status.value, t.to_status.value, event.value,
            )
            return t.to_status

    if status in TERMINAL_STATUSES or status == ReservationStatus.CONFIRMED:
        message = f"Reservation already finalized ({status.value}); cannot {event.value}"
    else:
        valid = [e.value for e in valid_events(status)]
        message = (
            f"Cannot {event.value} a reservation in '{status.value}'. "
            f"Valid events: {valid}"
        )
    raise IllegalTransitionError(message, reservation_id=reservation_id or None)
