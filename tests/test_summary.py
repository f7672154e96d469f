"""Tests for the owner dashboard counters."""

from datetime import timedelta

from booking_engine.booking.summary import summarize_reservations
from booking_engine.schemas.reservation_schema import ReservationStatus
from tests.conftest import START_OF_TEST, make_request, make_reservation


class TestSummarizeReservations:
    def test_counts_by_status(self):
        reservations = [
            make_reservation("a", "09:00", price=50.0),
            make_reservation("b", "10:00", price=30.5),
            make_reservation("c", "11:00", status=ReservationStatus.PENDING,
                             expires_at=START_OF_TEST + timedelta(minutes=30)),
            make_reservation("d", "12:00", status=ReservationStatus.CANCELLED),
            make_reservation("e", "13:00", status=ReservationStatus.EXPIRED, notified=True),
        ]
        summary = summarize_reservations(reservations, START_OF_TEST)
        assert summary.total == 5
        assert summary.confirmed == 2
        assert summary.pending == 1
        assert summary.cancelled == 1
        assert summary.expired == 1
        assert summary.awaiting_notification == 0
        assert summary.confirmed_revenue == 80.5

    def test_overdue_pending_counts_as_expired(self):
        overdue = make_reservation(
            status=ReservationStatus.PENDING,
            expires_at=START_OF_TEST - timedelta(minutes=1),
        )
        summary = summarize_reservations([overdue], START_OF_TEST)
        assert summary.pending == 0
        assert summary.expired == 1
        assert summary.awaiting_notification == 1

    def test_empty(self):
        summary = summarize_reservations([], START_OF_TEST)
        assert summary.total == 0
        assert summary.confirmed_revenue == 0.0


class TestManagerSummary:
    def test_summary_after_expiry(self, manager, clock):
        manager.create_reservation(make_request(
            tenant_slug="navalha-pix", resource_id="tenant-pix-ana",
        ))
        manager.create_reservation(make_request(
            tenant_slug="navalha-pix", resource_id="tenant-pix-bruno",
        ))
        clock.advance(minutes=61)
        summary = manager.summarize("tenant-pix")
        assert summary.total == 2
        assert summary.expired == 2
        assert summary.awaiting_notification == 2

    def test_revenue_from_confirmed_only(self, manager):
        manager.create_reservation(make_request(service_ids=["cut", "beard"]))
        cancelled = manager.create_reservation(make_request(start_time="14:00"))
        manager.cancel_reservation(cancelled.reservation_id)
        summary = manager.summarize("tenant-barber")
        assert summary.confirmed == 1
        assert summary.cancelled == 1
        assert summary.confirmed_revenue == 80.0
