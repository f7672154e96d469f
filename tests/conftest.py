"""Shared test fixtures and helpers."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from booking_engine.booking.lifecycle import BookingManager
from booking_engine.errors import StoreUnavailableError
from booking_engine.integrations import NotificationEvent, Notifier, PaymentOracle
from booking_engine.schemas.reservation_schema import (
    BookingRequest,
    CustomerSnapshot,
    PaymentInfo,
    Reservation,
    ReservationStatus,
    ServiceSelection,
)
from booking_engine.schemas.schedule_schema import DayWindow, ScheduleConfig, Weekday
from booking_engine.schemas.tenant_schema import Professional, ServiceOffering, Tenant, TenantKind
from booking_engine.store.memory import InMemoryReservationStore
from booking_engine.tenants import InMemoryTenantDirectory

SUNDAY = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)
WEDNESDAY = date(2026, 10, 21)
SATURDAY = date(2026, 10, 24)

START_OF_TEST = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock the tests move forward by hand."""

    def __init__(self, now: datetime = START_OF_TEST) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.events: list[tuple[NotificationEvent, str]] = []

    def notify(self, event, reservation) -> None:
        self.events.append((event, reservation.id))


class ExplodingNotifier(Notifier):
    def notify(self, event, reservation) -> None:
        raise RuntimeError("push gateway down")


class StubPaymentOracle(PaymentOracle):
    def __init__(self, paid: bool) -> None:
        self.paid = paid
        self.calls = 0

    def is_paid(self, reservation) -> bool:
        self.calls += 1
        return self.paid


class FailingStore(InMemoryReservationStore):
    """In-memory store that raises StoreUnavailableError while ``failing`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def _check(self) -> None:
        if self.failing:
            raise StoreUnavailableError("connection refused")

    def get(self, reservation_id):
        self._check()
        return super().get(reservation_id)

    def find(self, *args, **kwargs):
        self._check()
        return super().find(*args, **kwargs)

    def insert_if_free(self, reservation):
        self._check()
        return super().insert_if_free(reservation)

    def compare_and_set(self, updated, expected_status):
        self._check()
        return super().compare_and_set(updated, expected_status)


def make_schedule(
    start: str = "09:00",
    end: str = "18:00",
    slot: int = 30,
    brk: int = 0,
    closed: tuple[Weekday, ...] = (Weekday.SUNDAY,),
) -> ScheduleConfig:
    """Same window every day except the ``closed`` ones."""
    return ScheduleConfig(
        slot_duration_minutes=slot,
        break_between_slots_minutes=brk,
        weekly_windows={
            day: DayWindow(is_open=day not in closed, start_time=start, end_time=end)
            for day in Weekday
        },
    )


def make_barbershop(
    tenant_id: str = "tenant-barber",
    slug: str = "navalha",
    requires_payment: bool = False,
) -> Tenant:
    return Tenant(
        id=tenant_id,
        slug=slug,
        name="Navalha Barbearia",
        kind=TenantKind.BARBERSHOP,
        requires_payment=requires_payment,
        owner_phone="11988887777",
        schedule=make_schedule(),
        services=[
            ServiceOffering(id="cut", name="Corte", duration_minutes=30, price=50.0),
            ServiceOffering(id="beard", name="Barba", duration_minutes=20, price=30.0),
            ServiceOffering(id="massage", name="Massagem", duration_minutes=40, price=80.0),
            ServiceOffering(id="color", name="Coloração", duration_minutes=60, price=120.0,
                            is_active=False),
        ],
        professionals=[
            Professional(id=f"{tenant_id}-ana", name="Ana", service_ids=["cut", "beard"]),
            Professional(id=f"{tenant_id}-bruno", name="Bruno"),
            Professional(id=f"{tenant_id}-carlos", name="Carlos", is_active=False),
        ],
        blocked_dates={WEDNESDAY},
    )


def make_venue(tenant_id: str = "tenant-venue", slug: str = "chacara-sol") -> Tenant:
    return Tenant(
        id=tenant_id,
        slug=slug,
        name="Chácara do Sol",
        kind=TenantKind.VENUE,
        requires_payment=False,
        schedule=make_schedule(start="08:00", end="22:00"),
    )


def make_request(**overrides) -> BookingRequest:
    """BookingRequest for Ana's 10:00 haircut on MONDAY, with overrides."""
    fields = {
        "tenant_slug": "navalha",
        "resource_id": "tenant-barber-ana",
        "date": MONDAY,
        "start_time": "10:00",
        "service_ids": ["cut"],
        "customer_name": "João Pereira",
        "customer_phone": "(11) 98765-4321",
    }
    fields.update(overrides)
    return BookingRequest(**fields)


def make_reservation(
    reservation_id: str = "r-1",
    start_time: str = "10:00",
    duration: int = 30,
    status: ReservationStatus = ReservationStatus.CONFIRMED,
    day: date = MONDAY,
    tenant_id: str = "tenant-barber",
    resource_id: str = "tenant-barber-ana",
    expires_at: Optional[datetime] = None,
    price: float = 50.0,
    notified: bool = False,
) -> Reservation:
    """Reservation written straight to a store, bypassing the manager."""
    start_hour, start_minute = (int(part) for part in start_time.split(":"))
    end = start_hour * 60 + start_minute + duration
    return Reservation(
        id=reservation_id,
        tenant_id=tenant_id,
        resource_id=resource_id,
        date=day,
        start_time=start_time,
        end_time=f"{end // 60:02d}:{end % 60:02d}",
        total_duration_minutes=duration,
        services=[ServiceSelection(service_id="svc", name="Serviço",
                                   duration_minutes=duration, price=price)],
        total_price=price,
        customer=CustomerSnapshot(name="Maria Lima", phone="11912345678"),
        status=status,
        payment=PaymentInfo(amount=price) if expires_at is not None else None,
        created_at=START_OF_TEST,
        updated_at=START_OF_TEST,
        expires_at=expires_at,
        expiration_notification_sent=notified,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryReservationStore()


@pytest.fixture
def directory():
    return InMemoryTenantDirectory([
        make_barbershop(),
        make_barbershop(tenant_id="tenant-pix", slug="navalha-pix", requires_payment=True),
        make_barbershop(tenant_id="tenant-other", slug="outra"),
        make_venue(),
    ])


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def manager(store, directory, notifier, clock):
    return BookingManager(store, directory, notifier=notifier, clock=clock)
