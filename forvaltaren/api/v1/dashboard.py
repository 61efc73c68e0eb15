"""Landlord dashboard — overview counts for the current local month."""

from fastapi import APIRouter

from forvaltaren.api.deps import Landlord, Session
from forvaltaren.services.dashboard import DashboardSummary, build_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(ctx: Landlord, session: Session) -> DashboardSummary:
    return await build_summary(session, ctx.landlord_id)
