"""Landlord-scoped entity lookups.

Every read on behalf of an authenticated actor goes through here. An id
owned by another landlord raises the same ``NotFound`` as an id that
does not exist.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import NotFound
from forvaltaren.models.invoice import RentInvoice
from forvaltaren.models.lease import Lease
from forvaltaren.models.property import Property, Unit
from forvaltaren.models.tenant import Tenant
from forvaltaren.models.ticket import Ticket


async def get_property(
    session: AsyncSession, landlord_id: uuid.UUID, property_id: uuid.UUID
) -> Property:
    stmt = select(Property).where(
        Property.id == property_id,
        Property.landlord_id == landlord_id,
    )
    prop = (await session.execute(stmt)).scalar_one_or_none()
    if prop is None:
        raise NotFound("Property not found", field="property_id")
    return prop


async def get_unit(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    unit_id: uuid.UUID,
    property_id: uuid.UUID | None = None,
) -> Unit:
    """Units carry no landlord id of their own; scope through the property."""
    stmt = (
        select(Unit)
        .join(Property, Unit.property_id == Property.id)
        .where(Unit.id == unit_id, Property.landlord_id == landlord_id)
    )
    if property_id is not None:
        stmt = stmt.where(Unit.property_id == property_id)
    unit = (await session.execute(stmt)).scalar_one_or_none()
    if unit is None:
        raise NotFound("Unit not found", field="unit_id")
    return unit


async def get_tenant(
    session: AsyncSession, landlord_id: uuid.UUID, tenant_id: uuid.UUID
) -> Tenant:
    stmt = select(Tenant).where(Tenant.id == tenant_id, Tenant.landlord_id == landlord_id)
    tenant = (await session.execute(stmt)).scalar_one_or_none()
    if tenant is None:
        raise NotFound("Tenant not found", field="tenant_id")
    return tenant


async def get_lease(
    session: AsyncSession, landlord_id: uuid.UUID, lease_id: uuid.UUID
) -> Lease:
    stmt = select(Lease).where(Lease.id == lease_id, Lease.landlord_id == landlord_id)
    lease = (await session.execute(stmt)).scalar_one_or_none()
    if lease is None:
        raise NotFound("Lease not found", field="lease_id")
    return lease


async def get_invoice(
    session: AsyncSession, landlord_id: uuid.UUID, invoice_id: uuid.UUID
) -> RentInvoice:
    stmt = select(RentInvoice).where(
        RentInvoice.id == invoice_id,
        RentInvoice.landlord_id == landlord_id,
    )
    invoice = (await session.execute(stmt)).scalar_one_or_none()
    if invoice is None:
        raise NotFound("Invoice not found")
    return invoice


async def get_ticket(
    session: AsyncSession, landlord_id: uuid.UUID, ticket_id: uuid.UUID
) -> Ticket:
    stmt = select(Ticket).where(Ticket.id == ticket_id, Ticket.landlord_id == landlord_id)
    ticket = (await session.execute(stmt)).scalar_one_or_none()
    if ticket is None:
        raise NotFound("Ticket not found")
    return ticket
