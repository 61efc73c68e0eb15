"""Leases: create/update with ownership checks, listing by state."""

import uuid
from datetime import date
from typing import Literal

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.calendar import local_today
from forvaltaren.models.base import utcnow
from forvaltaren.models.lease import Lease, LeaseCreate, LeaseRead
from forvaltaren.models.property import Unit
from forvaltaren.services.lookups import get_lease, get_tenant, get_unit


def to_read(lease: Lease, today: date | None = None) -> LeaseRead:
    today = today or local_today(utcnow())
    return LeaseRead.model_validate(lease).model_copy(update={"is_active": lease.active_on(today)})


async def create_lease(
    session: AsyncSession, landlord_id: uuid.UUID, body: LeaseCreate
) -> Lease:
    unit = await get_unit(session, landlord_id, body.unit_id, property_id=body.property_id)
    tenant = await get_tenant(session, landlord_id, body.tenant_id)

    lease = Lease(
        landlord_id=landlord_id,
        unit_id=unit.id,
        tenant_id=tenant.id,
        rent_amount=body.rent_amount,
        due_day=body.due_day,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    session.add(lease)
    await session.commit()
    await session.refresh(lease)
    return lease


async def update_lease(
    session: AsyncSession, landlord_id: uuid.UUID, lease_id: uuid.UUID, body: LeaseCreate
) -> Lease:
    lease = await get_lease(session, landlord_id, lease_id)
    unit = await get_unit(session, landlord_id, body.unit_id, property_id=body.property_id)
    tenant = await get_tenant(session, landlord_id, body.tenant_id)

    lease.unit_id = unit.id
    lease.tenant_id = tenant.id
    lease.rent_amount = body.rent_amount
    lease.due_day = body.due_day
    lease.start_date = body.start_date
    lease.end_date = body.end_date
    lease.touch()
    session.add(lease)
    await session.commit()
    await session.refresh(lease)
    return lease


async def list_leases(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    *,
    property_id: uuid.UUID | None = None,
    state: Literal["active", "ended"] | None = None,
    tenant_id: uuid.UUID | None = None,
    today: date | None = None,
) -> list[Lease]:
    today = today or local_today(utcnow())
    stmt = select(Lease).where(Lease.landlord_id == landlord_id)
    if property_id is not None:
        stmt = stmt.join(Unit, Lease.unit_id == Unit.id).where(Unit.property_id == property_id)
    if tenant_id is not None:
        stmt = stmt.where(Lease.tenant_id == tenant_id)
    if state == "active":
        stmt = stmt.where(
            Lease.start_date <= today,
            or_(Lease.end_date.is_(None), Lease.end_date > today),  # type: ignore[union-attr]
        )
    elif state == "ended":
        stmt = stmt.where(Lease.end_date <= today)  # type: ignore[operator]
    stmt = stmt.order_by(Lease.start_date.desc())  # type: ignore[union-attr]
    return list((await session.execute(stmt)).scalars().all())
