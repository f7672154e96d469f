"""
Booking lifecycle manager: the operations booking pages and the owner
dashboard call.

Create runs: trusted tenant lookup -> resource check -> customer and
service validation -> availability check -> conditional insert. The
insert is what guarantees a single winner when two customers race for
the same slot; the availability check before it only produces a clean
error for the common, non-racing case.

Status changes go through the transition table and a compare-and-set
write, so a cancel racing the expiration sweep ends in whichever state
was written first.

Usage:
    manager = BookingManager(store, directory)
    result = manager.create_reservation(BookingRequest(...))
    manager.confirm_reservation(result.reservation_id)
"""

from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional

from booking_engine.booking.state_machine import LifecycleEvent, initial_status, next_status
from booking_engine.booking.summary import ReservationSummary, summarize_reservations
from booking_engine.booking.sweeper import ExpirationSweeper
from booking_engine.booking.validation import build_customer_snapshot
from booking_engine.config import settings
from booking_engine.errors import (
    IllegalTransitionError,
    ResourceNotFoundError,
    SlotConflictError,
    ValidationError,
)
from booking_engine.integrations import (
    LoggingNotifier,
    NotificationEvent,
    Notifier,
    PaymentOracle,
    dispatch,
)
from booking_engine.logging_context import get_request_logger, in_request_scope
from booking_engine.schemas.reservation_schema import (
    BookingRequest,
    BookingResult,
    PaymentInfo,
    PaymentPrompt,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    ServiceSelection,
)
from booking_engine.schemas.schedule_schema import validate_hhmm
from booking_engine.scheduling.availability import AvailabilityChecker
from booking_engine.scheduling.slot_generator import full_day_span, generate_slots, window_for_date
from booking_engine.scheduling.time_math import add_minutes, to_minutes
from booking_engine.store.base import ReservationStore
from booking_engine.tenants import ResolvedResource, TenantDirectory, resolve_resource
from booking_engine.utils import utc_now

logger = get_request_logger(__name__)


def snapshot_services(resolved: ResolvedResource, service_ids: list[str]) -> list[ServiceSelection]:
    """
    Copy name, duration and price of each requested service from the tenant catalog.

    Raises:
        ValidationError: Unknown, inactive, or not offered by the professional.
    """
    tenant = resolved.tenant
    offered = set(resolved.professional.service_ids) if resolved.professional else set()

    selections: list[ServiceSelection] = []
    for service_id in service_ids:
        service = tenant.get_service(service_id)
        if service is None or not service.is_active:
            raise ValidationError({"service_ids": f"Service '{service_id}' is not available"})
        if offered and service.id not in offered:
            raise ValidationError(
                {"service_ids": f"Service '{service.name}' is not offered by this professional"}
            )
        selections.append(ServiceSelection(
            service_id=service.id,
            name=service.name,
            duration_minutes=service.duration_minutes,
            price=service.price,
        ))
    return selections


class BookingManager:
    """Creates reservations and moves them through their lifecycle."""

    def __init__(
        self,
        store: ReservationStore,
        directory: TenantDirectory,
        notifier: Optional[Notifier] = None,
        payment_oracle: Optional[PaymentOracle] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._directory = directory
        self._notifier = notifier or LoggingNotifier()
        self._payment_oracle = payment_oracle
        self._clock = clock
        self.availability = AvailabilityChecker(store)
        self.sweeper = ExpirationSweeper(store, clock)

    # --- Slots and availability ---

    def generate_slots(self, tenant_slug: str, resource_id: Optional[str], day: date) -> list[str]:
        """Candidate starts for a resource's schedule on ``day``."""
        resolved = resolve_resource(self._directory.resolve_slug(tenant_slug), resource_id)
        return generate_slots(resolved.schedule, day)

    def check_availability(
        self,
        tenant_id: str,
        resource_id: str,
        day: date,
        start_time: str,
        duration_minutes: int,
    ) -> bool:
        return self.availability.is_available(
            resource_id, tenant_id, day, start_time, duration_minutes
        )

    def list_available_slots(
        self,
        tenant_slug: str,
        resource_id: Optional[str],
        day: date,
        service_ids: list[str],
        now_local: Optional[datetime] = None,
    ) -> list[str]:
        """Starts a customer can still pick for the chosen services."""
        resolved = resolve_resource(self._directory.resolve_slug(tenant_slug), resource_id)
        if day in resolved.tenant.blocked_dates:
            return []

        if resolved.is_whole_venue:
            span = full_day_span(resolved.schedule, day)
            if span is None:
                return []
            start_time, duration = span
            free = self.availability.is_available(
                resolved.resource_id, resolved.tenant.id, day, start_time, duration
            )
            return [start_time] if free else []

        services = snapshot_services(resolved, service_ids)
        duration = sum(s.duration_minutes for s in services) or resolved.schedule.slot_duration_minutes
        return self.availability.available_slots(
            resolved.schedule, resolved.tenant.id, resolved.resource_id, day, duration, now_local
        )

    # --- Create ---

    @in_request_scope
    def create_reservation(self, request: BookingRequest) -> BookingResult:
        """
        Validate and persist a public booking request.

        Raises:
            ResourceNotFoundError: Unknown slug, forged tenant id, or bad resource.
            ValidationError: Invalid customer, service or time fields.
            SlotConflictError: Blocked day, or the interval is already taken.
            StoreUnavailableError: The store failed; nothing was written.
        """
        tenant = self._directory.resolve_slug(request.tenant_slug)
        resolved = resolve_resource(tenant, request.resource_id, request.claimed_tenant_id)

        customer = build_customer_snapshot(request, requires_party_size=resolved.is_whole_venue)

        services: list[ServiceSelection] = []
        if resolved.is_whole_venue:
            # A venue day is booked as a whole; it carries no service lines.
            start_time, duration = self._full_day_timing(resolved, request.date)
        else:
            if not request.service_ids:
                raise ValidationError({"service_ids": "Select at least one service"})
            services = snapshot_services(resolved, request.service_ids)
            duration = sum(s.duration_minutes for s in services)
            start_time = self._validated_start(resolved, request.date, request.start_time)

        try:
            end_time = add_minutes(start_time, duration)
        except ValueError:
            raise ValidationError(
                {"start_time": "Selected services would run past midnight"}
            ) from None

        if request.date in tenant.blocked_dates:
            raise SlotConflictError(f"{tenant.name} is not taking bookings on {request.date}")

        conflicts = self.availability.conflicting_reservations(
            resolved.resource_id, tenant.id, request.date, start_time, duration
        )
        if conflicts:
            logger.warning(
                "Slot %s %s-%s for %s already taken",
                request.date, start_time, end_time, resolved.resource_id,
            )
            raise SlotConflictError(f"{start_time} on {request.date} is not available")

        now = self._clock()
        total_price = round(sum(s.price for s in services), 2)
        requires_payment = tenant.requires_payment
        reservation = Reservation(
            id=self._store.new_id(),
            tenant_id=tenant.id,
            resource_id=resolved.resource_id,
            date=request.date,
            start_time=start_time,
            end_time=end_time,
            total_duration_minutes=duration,
            services=services,
            total_price=total_price,
            customer=customer,
            status=initial_status(requires_payment),
            payment=PaymentInfo(amount=total_price) if requires_payment else None,
            created_at=now,
            updated_at=now,
            expires_at=(
                now + timedelta(minutes=settings.booking.payment_hold_minutes)
                if requires_payment else None
            ),
        )

        # Raises SlotConflictError if a concurrent request won the slot.
        self._store.insert_if_free(reservation)
        logger.info(
            "Reservation %s created for %s on %s %s-%s (%s)",
            reservation.id, resolved.resource_id, reservation.date,
            start_time, end_time, reservation.status.value,
        )
        dispatch(self._notifier, NotificationEvent.RESERVATION_CREATED, reservation)

        prompt = None
        if requires_payment:
            prompt = PaymentPrompt(amount=total_price, expires_at=reservation.expires_at)
        return BookingResult(
            reservation_id=reservation.id,
            status=reservation.status,
            requires_payment=requires_payment,
            payment_prompt=prompt,
            business_name=tenant.name,
            owner_phone=tenant.owner_phone,
            message=(
                "Reservation created. Complete the payment to confirm it."
                if requires_payment else "Reservation confirmed."
            ),
        )

    def _validated_start(
        self, resolved: ResolvedResource, day: date, start_time: Optional[str]
    ) -> str:
        if not start_time:
            raise ValidationError({"start_time": "Select a time"})
        start_time = start_time.strip()
        try:
            start = to_minutes(validate_hhmm(start_time))
        except ValueError:
            raise ValidationError({"start_time": "Time must be HH:MM"}) from None

        window = window_for_date(resolved.schedule, day)
        if window is None:
            raise ValidationError({"date": "Closed on the selected day"})
        if not to_minutes(window.start_time) <= start < to_minutes(window.end_time):
            raise ValidationError(
                {"start_time": f"Outside opening hours ({window.start_time}-{window.end_time})"}
            )
        return start_time

    def _full_day_timing(self, resolved: ResolvedResource, day: date) -> tuple[str, int]:
        span = full_day_span(resolved.schedule, day)
        if span is None:
            raise ValidationError({"date": "Closed on the selected day"})
        return span

    # --- Lifecycle transitions ---

    @in_request_scope
    def confirm_reservation(self, reservation_id: str) -> Reservation:
        """Move a pending reservation to confirmed and drop its payment hold."""
        def changes(current: Reservation, now: datetime) -> dict[str, Any]:
            update: dict[str, Any] = {"expires_at": None}
            if current.payment is not None:
                update["payment"] = current.payment.model_copy(
                    update={"status": PaymentStatus.PAID}
                )
            return update

        updated = self._transition(reservation_id, LifecycleEvent.CONFIRM, changes)
        dispatch(self._notifier, NotificationEvent.RESERVATION_CONFIRMED, updated)
        return updated

    @in_request_scope
    def cancel_reservation(self, reservation_id: str) -> Reservation:
        """Cancel a pending or confirmed reservation, freeing its slot.

        A payment still pending on the cancelled reservation is marked failed.
        """
        def changes(current: Reservation, now: datetime) -> dict[str, Any]:
            if current.payment is None:
                return {}
            return {"payment": current.payment.abandoned()}

        updated = self._transition(reservation_id, LifecycleEvent.CANCEL, changes)
        dispatch(self._notifier, NotificationEvent.RESERVATION_CANCELLED, updated)
        return updated

    def _transition(
        self,
        reservation_id: str,
        event: LifecycleEvent,
        changes: Callable[[Reservation, datetime], dict[str, Any]],
    ) -> Reservation:
        for attempt in range(settings.booking.transition_retries):
            current = self.get_reservation(reservation_id)
            new_status = next_status(current.status, event, reservation_id)
            now = self._clock()
            update = {"status": new_status, "updated_at": now}
            update.update(changes(current, now))
            updated = current.model_copy(update=update)

            if self._store.compare_and_set(updated, current.status):
                logger.info(
                    "Reservation %s: %s -> %s",
                    reservation_id, current.status.value, new_status.value,
                )
                return updated
            logger.info(
                "Reservation %s changed during %s (attempt %d), re-reading",
                reservation_id, event.value, attempt + 1,
            )

        raise IllegalTransitionError(
            f"Reservation {reservation_id} kept changing; {event.value} not applied",
            reservation_id=reservation_id,
        )

    # --- Payment ---

    @in_request_scope
    def apply_payment_signal(self, reservation_id: str, paid: bool) -> Reservation:
        """
        Record the payment provider's verdict.

        ``paid=True`` confirms the reservation. ``paid=False`` marks the
        payment failed and leaves the reservation pending until its hold ends.
        """
        if paid:
            return self.confirm_reservation(reservation_id)

        current = self.get_reservation(reservation_id)
        if current.payment is None:
            raise IllegalTransitionError(
                f"Reservation {reservation_id} does not require payment",
                reservation_id=reservation_id,
            )
        if current.status != ReservationStatus.PENDING:
            raise IllegalTransitionError(
                f"Reservation already finalized ({current.status.value})",
                reservation_id=reservation_id,
            )
        updated = current.model_copy(update={
            "payment": current.payment.model_copy(update={"status": PaymentStatus.FAILED}),
            "updated_at": self._clock(),
        })
        if not self._store.compare_and_set(updated, ReservationStatus.PENDING):
            raise IllegalTransitionError(
                f"Reservation {reservation_id} changed while recording payment",
                reservation_id=reservation_id,
            )
        logger.warning("Payment failed for reservation %s", reservation_id)
        return updated

    @in_request_scope
    def refresh_payment(self, reservation_id: str) -> Reservation:
        """Ask the payment oracle and confirm if it reports the payment settled."""
        current = self.get_reservation(reservation_id)
        if (
            self._payment_oracle is None
            or current.status != ReservationStatus.PENDING
            or current.payment is None
        ):
            return current
        if self._payment_oracle.is_paid(current):
            return self.confirm_reservation(reservation_id)
        return current

    # --- Reads ---

    @in_request_scope
    def get_reservation(self, reservation_id: str) -> Reservation:
        """One reservation, swept for expiry."""
        reservation = self._store.get(reservation_id)
        if reservation is None:
            raise ResourceNotFoundError(f"Reservation {reservation_id} not found")
        return self.sweeper.sweep([reservation])[0]

    @in_request_scope
    def list_reservations(
        self,
        tenant_id: str,
        resource_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Reservation]:
        """Reservations of a tenant, with overdue holds expired first."""
        reservations = self._store.find(
            tenant_id, resource_id=resource_id, date_from=date_from, date_to=date_to
        )
        return self.sweeper.sweep(reservations)

    def pending_notifications(self, tenant_id: str) -> list[Reservation]:
        """Expired reservations the owner still has to tell the customer about."""
        return self.sweeper.needs_notification(self.list_reservations(tenant_id))

    @in_request_scope
    def mark_expiration_notified(self, reservation_id: str) -> Reservation:
        """Record that the customer was told their reservation expired.

        The flag only ever goes from False to True; repeating the call is a no-op.
        """
        current = self.get_reservation(reservation_id)
        if current.status != ReservationStatus.EXPIRED:
            raise IllegalTransitionError(
                f"Reservation {reservation_id} is {current.status.value}, not expired",
                reservation_id=reservation_id,
            )
        if current.expiration_notification_sent:
            return current

        updated = current.model_copy(update={
            "expiration_notification_sent": True,
            "updated_at": self._clock(),
        })
        if not self._store.compare_and_set(updated, ReservationStatus.EXPIRED):
            # Terminal status cannot change, so only a concurrent mark can get here.
            return self.get_reservation(reservation_id)
        logger.info("Expiration notice recorded for reservation %s", reservation_id)
        return updated

    def summarize(
        self,
        tenant_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> ReservationSummary:
        return summarize_reservations(
            self.list_reservations(tenant_id, date_from=date_from, date_to=date_to),
            self._clock(),
        )
