"""Landlord members — invite staff by email, change roles, remove."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.models.member import (
    LandlordMemberCreate,
    LandlordMemberRead,
    LandlordMemberUpdate,
)
from forvaltaren.services import members
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/members", tags=["members"])

CanChangeSettings = Annotated[LandlordContext, Depends(requires(Permission.SETTINGS))]


@router.get("", response_model=list[LandlordMemberRead])
async def list_members(ctx: Landlord, session: Session) -> list[LandlordMemberRead]:
    return await members.list_members(session, ctx.landlord_id)


@router.post("", response_model=LandlordMemberRead, status_code=status.HTTP_201_CREATED)
async def add_member(
    body: LandlordMemberCreate, ctx: CanChangeSettings, session: Session
) -> LandlordMemberRead:
    return await members.add_member(session, ctx.landlord_id, body.email.lower(), body.role)


@router.patch("/{user_id}", response_model=LandlordMemberRead)
async def update_member(
    user_id: uuid.UUID,
    body: LandlordMemberUpdate,
    ctx: CanChangeSettings,
    session: Session,
) -> LandlordMemberRead:
    return await members.update_member_role(session, ctx.landlord_id, user_id, body.role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(user_id: uuid.UUID, ctx: CanChangeSettings, session: Session) -> None:
    await members.remove_member(session, ctx.landlord_id, user_id)
