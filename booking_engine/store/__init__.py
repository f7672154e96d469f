from booking_engine.store.base import ReservationStore
from booking_engine.store.memory import InMemoryReservationStore

__all__ = ["ReservationStore", "InMemoryReservationStore"]
