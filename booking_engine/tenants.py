"""
Trusted tenant and resource lookup.

Public booking pages only know a tenant's slug. Every tenant id and
resource id the engine writes comes from here, never from the request.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from booking_engine.errors import ResourceNotFoundError
from booking_engine.schemas.schedule_schema import ScheduleConfig, default_schedule
from booking_engine.schemas.tenant_schema import Professional, Tenant, TenantKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedResource:
    """A tenant/resource pair that passed server-side checks."""
    tenant: Tenant
    resource_id: str
    schedule: ScheduleConfig
    professional: Optional[Professional] = None

    @property
    def is_whole_venue(self) -> bool:
        return self.professional is None


class TenantDirectory(ABC):
    """Lookup service for tenants, keyed by public slug."""

    @abstractmethod
    def find_by_slug(self, slug: str) -> Optional[Tenant]:
        """Tenant for a public slug, None if unknown."""

    @abstractmethod
    def find_by_id(self, tenant_id: str) -> Optional[Tenant]:
        """Tenant by internal id, None if unknown."""

    def resolve_slug(self, slug: str) -> Tenant:
        """
        Resolve a public slug to an active tenant.

        Raises:
            ResourceNotFoundError: Unknown slug or inactive tenant.
        """
        tenant = self.find_by_slug(slug.strip().lower()) if slug else None
        if tenant is None or not tenant.is_active:
            logger.warning("Booking attempted for unknown or inactive tenant '%s'", slug)
            raise ResourceNotFoundError(f"Tenant '{slug}' not found")
        return tenant

    def get_tenant(self, tenant_id: str) -> Tenant:
        tenant = self.find_by_id(tenant_id)
        if tenant is None:
            raise ResourceNotFoundError(f"Tenant '{tenant_id}' not found")
        return tenant


class InMemoryTenantDirectory(TenantDirectory):
    """Directory backed by a dict; used in tests and local runs."""

    def __init__(self, tenants: Optional[list[Tenant]] = None) -> None:
        self._by_id: dict[str, Tenant] = {}
        for tenant in tenants or []:
            self.add(tenant)

    def add(self, tenant: Tenant) -> None:
        self._by_id[tenant.id] = tenant

    def find_by_slug(self, slug: str) -> Optional[Tenant]:
        for tenant in self._by_id.values():
            if tenant.slug == slug:
                return tenant
        return None

    def find_by_id(self, tenant_id: str) -> Optional[Tenant]:
        return self._by_id.get(tenant_id)


def resolve_resource(
    tenant: Tenant,
    resource_id: Optional[str],
    claimed_tenant_id: Optional[str] = None,
) -> ResolvedResource:
    """
    Check that ``resource_id`` is bookable at ``tenant``.

    Barbershops book an active professional of their own. Venues book
    themselves, so the resource id is the tenant id (or omitted).

    Raises:
        ResourceNotFoundError: On a forged tenant id, an unknown or
            inactive professional, or a resource of another tenant.
    """
    if claimed_tenant_id is not None and claimed_tenant_id != tenant.id:
        logger.warning(
            "Request for slug '%s' claimed tenant '%s' (actual '%s')",
            tenant.slug, claimed_tenant_id, tenant.id,
        )
        raise ResourceNotFoundError("Tenant does not match the booking page")

    if tenant.kind == TenantKind.VENUE:
        if resource_id not in (None, "", tenant.id):
            raise ResourceNotFoundError(
                f"Resource '{resource_id}' does not belong to '{tenant.slug}'"
            )
        return ResolvedResource(
            tenant=tenant,
            resource_id=tenant.id,
            schedule=tenant.schedule or default_schedule(),
        )

    if not resource_id:
        raise ResourceNotFoundError("A professional must be selected")
    professional = tenant.get_professional(resource_id)
    if professional is None or not professional.is_active:
        raise ResourceNotFoundError(
            f"Professional '{resource_id}' not found at '{tenant.slug}'"
        )
    return ResolvedResource(
        tenant=tenant,
        resource_id=professional.id,
        schedule=professional.schedule or tenant.schedule or default_schedule(),
        professional=professional,
    )
