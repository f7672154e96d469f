"""Appointment scheduling and booking-lifecycle engine for multi-tenant venues."""

from booking_engine.booking.lifecycle import BookingManager
from booking_engine.errors import (
    BookingEngineError,
    IllegalTransitionError,
    ResourceNotFoundError,
    SlotConflictError,
    StoreUnavailableError,
    ValidationError,
)
from booking_engine.scheduling.availability import AvailabilityChecker, check_availability
from booking_engine.scheduling.slot_generator import generate_slots, get_window
from booking_engine.store import InMemoryReservationStore, ReservationStore
from booking_engine.tenants import InMemoryTenantDirectory, TenantDirectory

__all__ = [
    "AvailabilityChecker",
    "BookingEngineError",
    "BookingManager",
    "check_availability",
    "generate_slots",
    "get_window",
    "IllegalTransitionError",
    "InMemoryReservationStore",
    "InMemoryTenantDirectory",
    "ReservationStore",
    "ResourceNotFoundError",
    "SlotConflictError",
    "StoreUnavailableError",
    "TenantDirectory",
    "ValidationError",
]
