"""Role checks for landlord and organization scopes, plus the last-owner guard."""

import uuid
from collections.abc import Collection

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import CannotRemoveLastOwner, Forbidden, NotFound, Unauthorized
from forvaltaren.core.permissions import Permission, has_permission
from forvaltaren.models.member import LandlordMember, LandlordRole
from forvaltaren.models.organization import Membership, OrgRole


# ── Landlord scope ────────────────────────────────────────────

async def get_landlord_role(
    session: AsyncSession, landlord_id: uuid.UUID, user_id: uuid.UUID
) -> LandlordRole | None:
    stmt = select(LandlordMember.role).where(
        LandlordMember.landlord_id == landlord_id,
        LandlordMember.user_id == user_id,
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def require_permission(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    user_id: uuid.UUID | None,
    permission: Permission,
) -> LandlordRole:
    """Return the caller's role if it grants ``permission``.

    Entity queries are already scoped to the caller's landlord; this
    only separates roles within that scope.
    """
    if user_id is None:
        raise Unauthorized()
    role = await get_landlord_role(session, landlord_id, user_id)
    if role is None or not has_permission(role, permission):
        raise Forbidden()
    return role


async def assert_not_last_landlord_owner(
    session: AsyncSession, landlord_id: uuid.UUID, current_role: LandlordRole
) -> None:
    """Reject removing/demoting an OWNER when it is the only one left."""
    if current_role != LandlordRole.OWNER:
        return
    stmt = select(func.count()).select_from(LandlordMember).where(
        LandlordMember.landlord_id == landlord_id,
        LandlordMember.role == LandlordRole.OWNER,
    )
    if (await session.execute(stmt)).scalar_one() <= 1:
        raise CannotRemoveLastOwner()


# ── Organization scope ────────────────────────────────────────

async def get_org_role(
    session: AsyncSession, user_id: uuid.UUID, organization_id: uuid.UUID
) -> OrgRole | None:
    stmt = select(Membership.role).where(
        Membership.user_id == user_id,
        Membership.organization_id == organization_id,
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def require_org_role(
    session: AsyncSession,
    user_id: uuid.UUID,
    organization_id: uuid.UUID,
    allowed: Collection[OrgRole],
) -> OrgRole:
    """Non-members get NotFound so organization ids cannot be probed."""
    role = await get_org_role(session, user_id, organization_id)
    if role is None:
        raise NotFound("Organization not found")
    if role not in allowed:
        raise Forbidden()
    return role


async def assert_not_last_org_owner(
    session: AsyncSession, organization_id: uuid.UUID, current_role: OrgRole
) -> None:
    if current_role != OrgRole.OWNER:
        return
    stmt = select(func.count()).select_from(Membership).where(
        Membership.organization_id == organization_id,
        Membership.role == OrgRole.OWNER,
    )
    if (await session.execute(stmt)).scalar_one() <= 1:
        raise CannotRemoveLastOwner()
