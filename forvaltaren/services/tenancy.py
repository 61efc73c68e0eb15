"""Identity → landlord scope resolution and idempotent provisioning."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import NotFound, Unauthenticated
from forvaltaren.core.plans import Plan
from forvaltaren.models.base import new_uuid, utcnow
from forvaltaren.models.landlord import Landlord
from forvaltaren.models.member import LandlordMember, LandlordRole
from forvaltaren.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LandlordContext:
    """The landlord scope an authenticated request acts in."""

    landlord_id: uuid.UUID
    user_id: uuid.UUID
    role: LandlordRole | None
    plan: Plan


def _insert_for(session: AsyncSession):
    """Dialect-specific INSERT supporting ON CONFLICT DO NOTHING."""
    if session.get_bind().dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


async def _owned_landlord_id(session: AsyncSession, user_id: uuid.UUID) -> uuid.UUID | None:
    stmt = select(Landlord.id).where(Landlord.user_id == user_id)
    return (await session.execute(stmt)).scalar_one_or_none()


async def _member_landlord_id(session: AsyncSession, user_id: uuid.UUID) -> uuid.UUID | None:
    stmt = (
        select(LandlordMember.landlord_id)
        .where(LandlordMember.user_id == user_id)
        .order_by(LandlordMember.created_at.asc())  # type: ignore[union-attr]
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def provision_landlord(session: AsyncSession, user_id: uuid.UUID) -> uuid.UUID:
    """Create-or-fetch the landlord owned by ``user_id`` plus its OWNER membership.

    Both inserts are ON CONFLICT DO NOTHING against unique keys, so
    concurrent first requests for the same user converge on one row.
    """
    insert = _insert_for(session)
    now = utcnow()

    await session.execute(
        insert(Landlord)
        .values(
            id=new_uuid(),
            user_id=user_id,
            plan=Plan.FREE,
            created_at=now,
            updated_at=now,
        )
        .on_conflict_do_nothing(index_elements=["user_id"])
    )
    landlord_id = await _owned_landlord_id(session, user_id)

    await session.execute(
        insert(LandlordMember)
        .values(
            id=new_uuid(),
            landlord_id=landlord_id,
            user_id=user_id,
            role=LandlordRole.OWNER,
            created_at=now,
            updated_at=now,
        )
        .on_conflict_do_nothing(index_elements=["landlord_id", "user_id"])
    )
    await session.commit()
    logger.info("Landlord %s ready for user %s", landlord_id, user_id)
    return landlord_id


async def resolve_landlord(
    session: AsyncSession, user_id: uuid.UUID, *, ensure: bool = False
) -> uuid.UUID | None:
    """Return the landlord scope for a user.

    Order: the landlord the user owns, then the landlord the user was
    invited into. With ``ensure`` a user with neither gets a fresh FREE
    landlord; without it ``None`` is returned and the caller sends the
    user to onboarding.
    """
    landlord_id = await _owned_landlord_id(session, user_id)
    if landlord_id is not None:
        return landlord_id

    landlord_id = await _member_landlord_id(session, user_id)
    if landlord_id is not None:
        return landlord_id

    if not ensure:
        return None
    return await provision_landlord(session, user_id)


async def require_landlord(session: AsyncSession, user: User | None) -> uuid.UUID:
    if user is None:
        raise Unauthenticated()
    landlord_id = await resolve_landlord(session, user.id)
    if landlord_id is None:
        landlord_id = await provision_landlord(session, user.id)
    return landlord_id


async def load_context(session: AsyncSession, user: User | None) -> LandlordContext:
    """Resolve the landlord scope, the caller's role in it and its plan."""
    if user is None:
        raise Unauthenticated()
    landlord_id = await require_landlord(session, user)

    landlord = await session.get(Landlord, landlord_id)
    role_stmt = select(LandlordMember.role).where(
        LandlordMember.landlord_id == landlord_id,
        LandlordMember.user_id == user.id,
    )
    role = (await session.execute(role_stmt)).scalar_one_or_none()
    return LandlordContext(
        landlord_id=landlord_id,
        user_id=user.id,
        role=role,
        plan=landlord.plan if landlord else Plan.FREE,
    )


async def get_landlord(session: AsyncSession, landlord_id: uuid.UUID) -> Landlord:
    landlord = await session.get(Landlord, landlord_id)
    if landlord is None:
        raise NotFound("Landlord not found")
    return landlord


async def rename_landlord(
    session: AsyncSession, landlord_id: uuid.UUID, org_name: str
) -> Landlord:
    landlord = await get_landlord(session, landlord_id)
    landlord.org_name = org_name.strip()
    landlord.touch()
    session.add(landlord)
    await session.commit()
    await session.refresh(landlord)
    return landlord
