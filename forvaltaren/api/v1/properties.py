"""Properties and their units, plus the QR code for the public report link."""

import uuid
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Response, status

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.models.property import (
    PropertyCreate,
    PropertyDetail,
    PropertyRead,
    UnitBulkCreate,
    UnitBulkResult,
    UnitCreate,
    UnitRead,
)
from forvaltaren.services import properties as svc
from forvaltaren.services.lookups import get_property
from forvaltaren.services.qr import MEDIA_TYPES, intake_url, render_qr
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(tags=["properties"])

CanCreateProperty = Annotated[LandlordContext, Depends(requires(Permission.PROPERTY_CREATE))]
CanCreateUnit = Annotated[LandlordContext, Depends(requires(Permission.UNIT_CREATE))]


# ── Properties ───────────────────────────────────────────────

@router.post("/properties", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate, ctx: CanCreateProperty, session: Session
) -> PropertyRead:
    prop = await svc.create_property(session, ctx.landlord_id, body.name, body.address)
    return PropertyRead.model_validate(prop)


@router.get("/properties", response_model=list[PropertyRead])
async def list_properties(ctx: Landlord, session: Session) -> list[PropertyRead]:
    return await svc.list_properties(session, ctx.landlord_id)


@router.get("/properties/{property_id}", response_model=PropertyDetail)
async def get_property_detail(
    property_id: uuid.UUID, ctx: Landlord, session: Session
) -> PropertyDetail:
    prop = await get_property(session, ctx.landlord_id, property_id)
    units = await svc.list_units(session, ctx.landlord_id, prop.id)
    return PropertyDetail(
        **PropertyRead.model_validate(prop).model_dump(exclude={"unit_count"}),
        unit_count=len(units),
        units=[UnitRead.model_validate(u) for u in units],
        intake_url=intake_url(prop.intake_token),
    )


@router.get("/properties/{property_id}/qr")
async def get_property_qr(
    property_id: uuid.UUID,
    ctx: Landlord,
    session: Session,
    format: Literal["svg", "png"] = Query(default="svg"),
) -> Response:
    """QR code pointing at the property's public report page."""
    prop = await get_property(session, ctx.landlord_id, property_id)
    return Response(
        content=render_qr(intake_url(prop.intake_token), format),
        media_type=MEDIA_TYPES[format],
        headers={"Cache-Control": "no-store"},
    )


# ── Units ────────────────────────────────────────────────────

@router.post("/units", response_model=UnitRead, status_code=status.HTTP_201_CREATED)
async def create_unit(body: UnitCreate, ctx: CanCreateUnit, session: Session) -> UnitRead:
    unit = await svc.create_unit(session, ctx.landlord_id, body.property_id, body.label)
    return UnitRead.model_validate(unit)


@router.post("/units/bulk", response_model=UnitBulkResult, status_code=status.HTTP_201_CREATED)
async def bulk_create_units(
    body: UnitBulkCreate, ctx: CanCreateUnit, session: Session
) -> UnitBulkResult:
    created, skipped = await svc.bulk_create_units(
        session, ctx.landlord_id, body.property_id, body.labels
    )
    return UnitBulkResult(
        created=[UnitRead.model_validate(u) for u in created],
        skipped=skipped,
    )


@router.get("/units", response_model=list[UnitRead])
async def list_units(
    ctx: Landlord,
    session: Session,
    property_id: uuid.UUID | None = None,
) -> list[UnitRead]:
    units = await svc.list_units(session, ctx.landlord_id, property_id)
    return [UnitRead.model_validate(u) for u in units]
