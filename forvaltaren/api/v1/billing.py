"""Billing — subscription state and redirects to the provider's hosted pages."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from forvaltaren.api.deps import Landlord, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.core.plans import Plan
from forvaltaren.services import billing
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/billing", tags=["billing"])

CanChangeSettings = Annotated[LandlordContext, Depends(requires(Permission.SETTINGS))]


class SubscriptionResponse(BaseModel):
    plan: Plan
    current_period_end: datetime | None


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(ctx: Landlord) -> SubscriptionResponse:
    state = await billing.get_subscription_state(ctx.landlord_id)
    return SubscriptionResponse(plan=state.plan, current_period_end=state.current_period_end)


@router.get("/checkout/{plan_slug}")
async def start_checkout(plan_slug: str, ctx: CanChangeSettings) -> RedirectResponse:
    url = await billing.create_checkout_url(plan_slug, ctx.landlord_id)
    return RedirectResponse(url, status_code=303)


@router.get("/portal")
async def open_portal(ctx: CanChangeSettings) -> RedirectResponse:
    url = await billing.create_portal_url(ctx.landlord_id)
    return RedirectResponse(url, status_code=303)
