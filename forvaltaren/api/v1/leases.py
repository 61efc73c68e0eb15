"""Leases CRUD — landlord-scoped."""

import uuid
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, status

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.models.lease import LeaseCreate, LeaseRead, LeaseUpdate
from forvaltaren.services import leases as svc
from forvaltaren.services.lookups import get_lease
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/leases", tags=["leases"])

CanCreateLease = Annotated[LandlordContext, Depends(requires(Permission.LEASE_CREATE))]
CanUpdateLease = Annotated[LandlordContext, Depends(requires(Permission.LEASE_UPDATE))]


@router.post("", response_model=LeaseRead, status_code=status.HTTP_201_CREATED)
async def create_lease(body: LeaseCreate, ctx: CanCreateLease, session: Session) -> LeaseRead:
    lease = await svc.create_lease(session, ctx.landlord_id, body)
    return svc.to_read(lease)


@router.get("", response_model=list[LeaseRead])
async def list_leases(
    ctx: Landlord,
    session: Session,
    property_id: uuid.UUID | None = None,
    status: Literal["active", "ended"] | None = None,
) -> list[LeaseRead]:
    rows = await svc.list_leases(session, ctx.landlord_id, property_id=property_id, state=status)
    return [svc.to_read(lease) for lease in rows]


@router.get("/{lease_id}", response_model=LeaseRead)
async def get_lease_detail(lease_id: uuid.UUID, ctx: Landlord, session: Session) -> LeaseRead:
    return svc.to_read(await get_lease(session, ctx.landlord_id, lease_id))


@router.put("/{lease_id}", response_model=LeaseRead)
async def update_lease(
    lease_id: uuid.UUID, body: LeaseUpdate, ctx: CanUpdateLease, session: Session
) -> LeaseRead:
    lease = await svc.update_lease(session, ctx.landlord_id, lease_id, body)
    return svc.to_read(lease)
