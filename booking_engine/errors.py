"""Error taxonomy surfaced by the booking engine to its callers."""

from typing import Optional


class BookingEngineError(Exception):
    """Base class for every error the engine reports."""


class ValidationError(BookingEngineError):
    """Malformed or missing customer/booking fields.

    ``field_errors`` maps each offending field to a human readable message
    so the booking form can highlight it.
    """

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = dict(field_errors)
        summary = "; ".join(f"{name}: {msg}" for name, msg in self.field_errors.items())
        super().__init__(f"Invalid booking request ({summary})")


class ResourceNotFoundError(BookingEngineError):
    """Unknown tenant slug, inactive resource, or resource of another tenant."""


class SlotConflictError(BookingEngineError):
    """The requested interval overlaps an active reservation."""


class IllegalTransitionError(BookingEngineError):
    """Lifecycle change attempted on a reservation that cannot accept it."""

    def __init__(self, message: str, reservation_id: Optional[str] = None) -> None:
        self.reservation_id = reservation_id
        super().__init__(message)


class StoreUnavailableError(BookingEngineError):
    """The record store could not be reached or failed mid-operation."""
