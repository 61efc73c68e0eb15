"""Landlord profile and usage — the caller's own scope."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.core.plans import Plan
from forvaltaren.models.landlord import LandlordRead, LandlordUpdate
from forvaltaren.services.quota import usage_report
from forvaltaren.services import tenancy
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(tags=["landlord"])

CanChangeSettings = Annotated[LandlordContext, Depends(requires(Permission.SETTINGS))]


class UsageItem(BaseModel):
    kind: str
    used: int
    limit: int
    remaining: int


class UsageResponse(BaseModel):
    plan: Plan
    items: list[UsageItem]


@router.get("/landlord", response_model=LandlordRead)
async def get_landlord(ctx: Landlord, session: Session) -> LandlordRead:
    landlord = await tenancy.get_landlord(session, ctx.landlord_id)
    return LandlordRead.model_validate(landlord)


@router.patch("/landlord", response_model=LandlordRead)
async def update_landlord(
    body: LandlordUpdate, ctx: CanChangeSettings, session: Session
) -> LandlordRead:
    landlord = await tenancy.rename_landlord(session, ctx.landlord_id, body.org_name)
    return LandlordRead.model_validate(landlord)


@router.get("/usage", response_model=UsageResponse)
async def get_usage(ctx: Landlord, session: Session) -> UsageResponse:
    """Plan ceilings next to current counts for every gated resource."""
    plan, statuses = await usage_report(session, ctx.landlord_id)
    return UsageResponse(
        plan=plan,
        items=[
            UsageItem(kind=s.kind.value, used=s.used, limit=s.limit, remaining=s.remaining)
            for s in statuses
        ],
    )
