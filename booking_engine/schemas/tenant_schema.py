"""Tenant, professional and service catalog data models."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from booking_engine.schemas.schedule_schema import ScheduleConfig


class TenantKind(str, Enum):
    """How a tenant is booked."""
    BARBERSHOP = "barbershop"  # per-professional time slots
    VENUE = "venue"  # the whole venue for a day


class ServiceOffering(BaseModel):
    """Catalog entry as edited by the owner."""
    id: str
    name: str
    duration_minutes: int = Field(gt=0)
    price: float = Field(default=0.0, ge=0)
    is_active: bool = True


class Professional(BaseModel):
    """A bookable person working for a barbershop tenant."""
    id: str
    name: str
    is_active: bool = True
    service_ids: list[str] = Field(default_factory=list)
    schedule: Optional[ScheduleConfig] = None


class Tenant(BaseModel):
    """Trusted tenant record as returned by the tenant directory."""
    id: str
    slug: str
    name: str
    kind: TenantKind = TenantKind.BARBERSHOP
    is_active: bool = True
    requires_payment: bool = False
    owner_phone: Optional[str] = None
    schedule: Optional[ScheduleConfig] = None
    professionals: list[Professional] = Field(default_factory=list)
    services: list[ServiceOffering] = Field(default_factory=list)
    blocked_dates: set[date] = Field(default_factory=set)

    def get_professional(self, professional_id: str) -> Optional[Professional]:
        for professional in self.professionals:
            if professional.id == professional_id:
                return professional
        return None

    def get_service(self, service_id: str) -> Optional[ServiceOffering]:
        for service in self.services:
            if service.id == service_id:
                return service
        return None
