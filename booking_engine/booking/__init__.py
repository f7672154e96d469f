from booking_engine.booking.lifecycle import BookingManager
from booking_engine.booking.state_machine import LifecycleEvent, next_status
from booking_engine.booking.summary import ReservationSummary, summarize_reservations
from booking_engine.booking.sweeper import ExpirationSweeper

__all__ = [
    "BookingManager",
    "ExpirationSweeper",
    "LifecycleEvent",
    "next_status",
    "ReservationSummary",
    "summarize_reservations",
]
