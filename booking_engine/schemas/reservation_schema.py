"""Reservation records and the booking request/result shapes."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from booking_engine.schemas.schedule_schema import validate_end_hhmm, validate_hhmm
from booking_engine.scheduling.time_math import to_minutes


class ReservationStatus(str, Enum):
    """Lifecycle status of a reservation."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @property
    def holds_slot(self) -> bool:
        return self in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


class PaymentStatus(str, Enum):
    NONE = "none"
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentInfo(BaseModel):
    """Present only on reservations of tenants that charge up front."""
    model_config = ConfigDict(frozen=True)

    status: PaymentStatus = PaymentStatus.PENDING
    amount: float = Field(ge=0)

    def abandoned(self) -> "PaymentInfo":
        """Payment of a reservation that ended unpaid: a pending charge becomes failed."""
        if self.status == PaymentStatus.PENDING:
            return self.model_copy(update={"status": PaymentStatus.FAILED})
        return self


class ServiceSelection(BaseModel):
    """Catalog entry copied at booking time; later catalog edits don't touch it."""
    model_config = ConfigDict(frozen=True)

    service_id: str
    name: str
    duration_minutes: int = Field(gt=0)
    price: float = Field(ge=0)


class CustomerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    email: Optional[str] = None
    notes: Optional[str] = None
    party_size: Optional[int] = None


class Reservation(BaseModel):
    """A customer's hold on one resource for one interval of one day."""
    model_config = ConfigDict(frozen=True)

    id: str
    tenant_id: str
    resource_id: str
    date: dt.date
    start_time: str
    end_time: str
    total_duration_minutes: int = Field(gt=0)
    services: list[ServiceSelection] = Field(default_factory=list)
    total_price: float = 0.0
    customer: CustomerSnapshot
    status: ReservationStatus
    payment: Optional[PaymentInfo] = None
    created_at: dt.datetime
    updated_at: dt.datetime
    expires_at: Optional[dt.datetime] = None
    expiration_notification_sent: bool = False

    @field_validator("start_time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return validate_hhmm(value)

    @field_validator("end_time")
    @classmethod
    def check_end_time(cls, value: str) -> str:
        return validate_end_hhmm(value)

    @model_validator(mode="after")
    def check_interval(self) -> "Reservation":
        if to_minutes(self.end_time) <= to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        if self.services:
            expected = sum(s.duration_minutes for s in self.services)
            if expected != self.total_duration_minutes:
                raise ValueError(
                    f"total_duration_minutes {self.total_duration_minutes} "
                    f"does not match services ({expected})"
                )
        return self

    @property
    def requires_payment(self) -> bool:
        return self.payment is not None

    @property
    def payment_status(self) -> PaymentStatus:
        return self.payment.status if self.payment else PaymentStatus.NONE

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.total_duration_minutes

    def is_overdue(self, now: dt.datetime) -> bool:
        """Pending with a payment hold that has run out."""
        return (
            self.status == ReservationStatus.PENDING
            and self.expires_at is not None
            and now > self.expires_at
        )


class BookingRequest(BaseModel):
    """Public booking form payload.

    ``tenant_slug`` is the only tenant identity the engine trusts.
    ``claimed_tenant_id`` is whatever the client sent; a mismatch is rejected.
    """
    tenant_slug: str
    resource_id: Optional[str] = None
    date: dt.date
    start_time: Optional[str] = None
    service_ids: list[str] = Field(default_factory=list)
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: Optional[str] = None
    notes: Optional[str] = None
    party_size: Optional[int] = None
    claimed_tenant_id: Optional[str] = None


class PaymentPrompt(BaseModel):
    """What the booking page needs to ask for payment."""
    amount: float
    expires_at: dt.datetime


class BookingResult(BaseModel):
    """Outcome of a successful create."""
    reservation_id: str
    status: ReservationStatus
    requires_payment: bool
    payment_prompt: Optional[PaymentPrompt] = None
    business_name: str = ""
    owner_phone: Optional[str] = None
    message: str = ""
