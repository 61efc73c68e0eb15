"""Landlord member management — invite, change role, remove."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import NotFound
from forvaltaren.core.plans import ResourceKind
from forvaltaren.models.member import LandlordMember, LandlordMemberRead, LandlordRole
from forvaltaren.models.user import User
from forvaltaren.services.access import assert_not_last_landlord_owner
from forvaltaren.services.quota import enforce_quota

logger = logging.getLogger(__name__)


def _to_read(member: LandlordMember, user: User) -> LandlordMemberRead:
    return LandlordMemberRead(
        user_id=member.user_id,
        email=user.email,
        name=user.name,
        role=member.role,
    )


async def list_members(
    session: AsyncSession, landlord_id: uuid.UUID
) -> list[LandlordMemberRead]:
    stmt = (
        select(LandlordMember, User)
        .join(User, LandlordMember.user_id == User.id)
        .where(LandlordMember.landlord_id == landlord_id)
        .order_by(User.email.asc())  # type: ignore[union-attr]
    )
    rows = (await session.execute(stmt)).all()
    return [_to_read(m, u) for m, u in rows]


async def _get_member(
    session: AsyncSession, landlord_id: uuid.UUID, user_id: uuid.UUID
) -> LandlordMember:
    stmt = select(LandlordMember).where(
        LandlordMember.landlord_id == landlord_id,
        LandlordMember.user_id == user_id,
    )
    member = (await session.execute(stmt)).scalar_one_or_none()
    if member is None:
        raise NotFound("Member not found")
    return member


async def add_member(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    email: str,
    role: LandlordRole,
) -> LandlordMemberRead:
    """Add an existing user by email; re-adding updates the role."""
    user = (await session.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None:
        raise NotFound("No user with that email", field="email")

    stmt = select(LandlordMember).where(
        LandlordMember.landlord_id == landlord_id,
        LandlordMember.user_id == user.id,
    )
    member = (await session.execute(stmt)).scalar_one_or_none()
    if member is None:
        await enforce_quota(session, landlord_id, ResourceKind.MEMBERS)
        member = LandlordMember(landlord_id=landlord_id, user_id=user.id, role=role)
    else:
        if role != LandlordRole.OWNER:
            await assert_not_last_landlord_owner(session, landlord_id, member.role)
        member.role = role
        member.touch()

    session.add(member)
    await session.commit()
    await session.refresh(member)
    logger.info("User %s is %s of landlord %s", user.id, role.value, landlord_id)
    return _to_read(member, user)


async def update_member_role(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    user_id: uuid.UUID,
    role: LandlordRole,
) -> LandlordMemberRead:
    member = await _get_member(session, landlord_id, user_id)
    if role != LandlordRole.OWNER:
        await assert_not_last_landlord_owner(session, landlord_id, member.role)

    member.role = role
    member.touch()
    session.add(member)
    await session.commit()
    await session.refresh(member)
    user = await session.get(User, user_id)
    return _to_read(member, user)


async def remove_member(
    session: AsyncSession, landlord_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    member = await _get_member(session, landlord_id, user_id)
    await assert_not_last_landlord_owner(session, landlord_id, member.role)
    await session.delete(member)
    await session.commit()
    logger.info("User %s removed from landlord %s", user_id, landlord_id)
