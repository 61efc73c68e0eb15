"""Multi-row tenant operations: cascade delete and first tenant + lease."""

import logging
import uuid
from datetime import date

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import OperationFailed
from forvaltaren.core.plans import ResourceKind
from forvaltaren.models.invoice import Payment, RentInvoice
from forvaltaren.models.lease import Lease
from forvaltaren.models.tenant import Tenant
from forvaltaren.models.ticket import Ticket
from forvaltaren.services.lookups import get_tenant, get_unit
from forvaltaren.services.quota import enforce_quota

logger = logging.getLogger(__name__)


async def delete_tenant_cascade(
    session: AsyncSession, landlord_id: uuid.UUID, tenant_id: uuid.UUID
) -> None:
    """Delete a tenant with its leases, invoices and payments.

    Runs in one transaction, children first: Payments → RentInvoices →
    Leases → Tenant. Tickets survive with their tenant reference cleared.
    """
    tenant = await get_tenant(session, landlord_id, tenant_id)

    lease_ids = select(Lease.id).where(Lease.tenant_id == tenant.id)
    invoice_ids = select(RentInvoice.id).where(
        RentInvoice.lease_id.in_(lease_ids)  # type: ignore[union-attr]
    )
    try:
        await session.execute(
            delete(Payment).where(Payment.rent_invoice_id.in_(invoice_ids))  # type: ignore[union-attr]
        )
        await session.execute(
            delete(RentInvoice).where(RentInvoice.lease_id.in_(lease_ids))  # type: ignore[union-attr]
        )
        await session.execute(delete(Lease).where(Lease.tenant_id == tenant.id))
        await session.execute(
            update(Ticket).where(Ticket.tenant_id == tenant.id).values(tenant_id=None)
        )
        await session.delete(tenant)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Cascade delete of tenant %s failed", tenant_id)
        raise OperationFailed("Could not delete the tenant") from exc

    logger.info("Tenant %s deleted with all leases, invoices and payments", tenant_id)


async def create_tenant_with_lease(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    *,
    property_id: uuid.UUID,
    unit_id: uuid.UUID,
    name: str,
    email: str | None,
    phone: str | None,
    rent_amount: int,
    due_day: int,
    start_date: date,
) -> tuple[Tenant, Lease]:
    """Create a tenant and its first lease together; neither exists if either fails."""
    unit = await get_unit(session, landlord_id, unit_id, property_id=property_id)
    await enforce_quota(session, landlord_id, ResourceKind.TENANTS)

    tenant = Tenant(landlord_id=landlord_id, name=name, email=email, phone=phone)
    session.add(tenant)
    try:
        await session.flush()  # populate tenant.id
        lease = Lease(
            landlord_id=landlord_id,
            unit_id=unit.id,
            tenant_id=tenant.id,
            rent_amount=rent_amount,
            due_day=due_day,
            start_date=start_date,
        )
        session.add(lease)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Creating first tenant and lease failed for landlord %s", landlord_id)
        raise OperationFailed("Could not create tenant and lease") from exc

    await session.refresh(tenant)
    await session.refresh(lease)
    return tenant, lease
