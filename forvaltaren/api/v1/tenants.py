"""Tenants (occupants) CRUD — landlord-scoped, delete cascades."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import select

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.errors import ValidationError
from forvaltaren.core.permissions import Permission
from forvaltaren.core.plans import ResourceKind
from forvaltaren.models.lease import LeaseRead
from forvaltaren.models.tenant import Tenant, TenantCreate, TenantRead
from forvaltaren.services import leases
from forvaltaren.services.lookups import get_tenant
from forvaltaren.services.occupants import delete_tenant_cascade
from forvaltaren.services.quota import enforce_quota
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/tenants", tags=["tenants"])

CanCreateTenant = Annotated[LandlordContext, Depends(requires(Permission.TENANT_CREATE))]
CanDeleteTenant = Annotated[LandlordContext, Depends(requires(Permission.TENANT_DELETE))]


class TenantDetail(TenantRead):
    leases: list[LeaseRead]


@router.post("", response_model=TenantRead, status_code=status.HTTP_201_CREATED)
async def create_tenant(body: TenantCreate, ctx: CanCreateTenant, session: Session) -> TenantRead:
    await enforce_quota(session, ctx.landlord_id, ResourceKind.TENANTS)
    tenant = Tenant(
        landlord_id=ctx.landlord_id,
        name=body.name.strip(),
        email=body.email.lower() if body.email else None,
        phone=body.phone,
    )
    session.add(tenant)
    await session.commit()
    await session.refresh(tenant)
    return TenantRead.model_validate(tenant)


@router.get("", response_model=list[TenantRead])
async def list_tenants(ctx: Landlord, session: Session) -> list[TenantRead]:
    stmt = (
        select(Tenant)
        .where(Tenant.landlord_id == ctx.landlord_id)
        .order_by(Tenant.name.asc())  # type: ignore[union-attr]
    )
    rows = (await session.execute(stmt)).scalars().all()
    return [TenantRead.model_validate(t) for t in rows]


@router.get("/{tenant_id}", response_model=TenantDetail)
async def get_tenant_detail(tenant_id: uuid.UUID, ctx: Landlord, session: Session) -> TenantDetail:
    tenant = await get_tenant(session, ctx.landlord_id, tenant_id)
    rows = await leases.list_leases(session, ctx.landlord_id, tenant_id=tenant.id)
    return TenantDetail(
        **TenantRead.model_validate(tenant).model_dump(),
        leases=[leases.to_read(lease) for lease in rows],
    )


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_id: uuid.UUID,
    ctx: CanDeleteTenant,
    session: Session,
    confirm: bool = Query(default=False),
) -> None:
    """Irreversible: removes the tenant's leases, invoices and payments too."""
    if not confirm:
        raise ValidationError("Pass confirm=true to delete the tenant and its history", field="confirm")
    await delete_tenant_cascade(session, ctx.landlord_id, tenant_id)
