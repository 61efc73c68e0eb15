"""First-run onboarding: organization profile, then first tenant + lease."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from forvaltaren.api.deps import Session, requires
from forvaltaren.core.errors import ValidationError
from forvaltaren.core.money import kr_to_ore
from forvaltaren.core.permissions import Permission
from forvaltaren.models.landlord import LandlordRead
from forvaltaren.models.lease import LeaseRead
from forvaltaren.models.tenant import TenantRead
from forvaltaren.services import leases, tenancy
from forvaltaren.services.access import require_permission
from forvaltaren.services.occupants import create_tenant_with_lease
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

CanChangeSettings = Annotated[LandlordContext, Depends(requires(Permission.SETTINGS))]
CanCreateTenant = Annotated[LandlordContext, Depends(requires(Permission.TENANT_CREATE))]


class ProfileRequest(BaseModel):
    org_name: str = Field(min_length=2, max_length=255)


class FirstLeaseRequest(BaseModel):
    property_id: uuid.UUID
    unit_id: uuid.UUID
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=6, max_length=50)
    # Kronor as typed by the user, e.g. "8 500" or "8500,50"
    rent: str
    due_day: int = Field(default=1, ge=1, le=28)
    start_date: date


class FirstLeaseResponse(BaseModel):
    tenant: TenantRead
    lease: LeaseRead


@router.post("/profile", response_model=LandlordRead)
async def save_profile(
    body: ProfileRequest, ctx: CanChangeSettings, session: Session
) -> LandlordRead:
    """Name the landlord organization; the landlord itself was provisioned on resolve."""
    landlord = await tenancy.rename_landlord(session, ctx.landlord_id, body.org_name)
    return LandlordRead.model_validate(landlord)


@router.post("/first-lease", response_model=FirstLeaseResponse, status_code=status.HTTP_201_CREATED)
async def create_first_lease(
    body: FirstLeaseRequest, ctx: CanCreateTenant, session: Session
) -> FirstLeaseResponse:
    await require_permission(session, ctx.landlord_id, ctx.user_id, Permission.LEASE_CREATE)
    try:
        rent = kr_to_ore(body.rent)
    except ValueError as exc:
        raise ValidationError("Enter the rent in kronor", field="rent") from exc
    if rent < 1:
        raise ValidationError("Rent must be positive", field="rent")

    tenant, lease = await create_tenant_with_lease(
        session,
        ctx.landlord_id,
        property_id=body.property_id,
        unit_id=body.unit_id,
        name=body.name.strip(),
        email=body.email.lower() if body.email else None,
        phone=body.phone,
        rent_amount=rent,
        due_day=body.due_day,
        start_date=body.start_date,
    )
    return FirstLeaseResponse(tenant=TenantRead.model_validate(tenant), lease=leases.to_read(lease))
