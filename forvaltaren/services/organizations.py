"""Collaborative organizations and their memberships."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import Forbidden, NotFound
from forvaltaren.models.organization import (
    Membership,
    MembershipRead,
    Organization,
    OrganizationDetail,
    OrganizationRead,
    OrgRole,
)
from forvaltaren.models.user import User
from forvaltaren.services.access import assert_not_last_org_owner, require_org_role

logger = logging.getLogger(__name__)

MANAGE_MEMBERS = (OrgRole.OWNER, OrgRole.ADMIN)
CHANGE_ROLES = (OrgRole.OWNER,)
DEFAULT_ORG_NAME = "Min organisation"


async def create_organization(
    session: AsyncSession, user_id: uuid.UUID, name: str
) -> Organization:
    """Create an organization with its creator as OWNER, in one transaction."""
    org = Organization(name=name, created_by_id=user_id)
    session.add(org)
    await session.flush()  # populate org.id
    session.add(Membership(user_id=user_id, organization_id=org.id, role=OrgRole.OWNER))
    await session.commit()
    await session.refresh(org)
    return org


async def ensure_personal_org(
    session: AsyncSession, user_id: uuid.UUID, name: str | None = None
) -> Organization:
    """Return the user's first organization, creating one if they have none."""
    stmt = (
        select(Organization)
        .join(Membership, Membership.organization_id == Organization.id)
        .where(Membership.user_id == user_id)
        .order_by(Membership.created_at.asc())  # type: ignore[union-attr]
        .limit(1)
    )
    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing is not None:
        return existing
    return await create_organization(session, user_id, name or DEFAULT_ORG_NAME)


async def list_my_organizations(session: AsyncSession, user_id: uuid.UUID) -> list[Organization]:
    stmt = (
        select(Organization)
        .join(Membership, Membership.organization_id == Organization.id)
        .where(Membership.user_id == user_id)
        .order_by(Membership.created_at.asc())  # type: ignore[union-attr]
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_organization(
    session: AsyncSession, user_id: uuid.UUID, organization_id: uuid.UUID
) -> OrganizationDetail:
    await require_org_role(session, user_id, organization_id, tuple(OrgRole))
    org = await session.get(Organization, organization_id)
    if org is None:
        raise NotFound("Organization not found")

    stmt = (
        select(Membership, User)
        .join(User, Membership.user_id == User.id)
        .where(Membership.organization_id == organization_id)
        .order_by(Membership.role.asc(), User.email.asc())  # type: ignore[union-attr]
    )
    rows = (await session.execute(stmt)).all()
    return OrganizationDetail(
        **OrganizationRead.model_validate(org).model_dump(),
        members=[
            MembershipRead(user_id=m.user_id, email=u.email, name=u.name, role=m.role)
            for m, u in rows
        ],
    )


async def _get_membership(
    session: AsyncSession, organization_id: uuid.UUID, user_id: uuid.UUID
) -> Membership:
    stmt = select(Membership).where(
        Membership.organization_id == organization_id,
        Membership.user_id == user_id,
    )
    membership = (await session.execute(stmt)).scalar_one_or_none()
    if membership is None:
        raise NotFound("Member not found")
    return membership


async def add_member(
    session: AsyncSession,
    actor_id: uuid.UUID,
    organization_id: uuid.UUID,
    email: str,
    role: OrgRole,
) -> Membership:
    """Upsert a membership for an existing user (OWNER/ADMIN only).

    Changing an existing member's role or granting OWNER is reserved for
    owners, the same as the role-change endpoint.
    """
    actor_role = await require_org_role(session, actor_id, organization_id, MANAGE_MEMBERS)

    user = (await session.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None:
        raise NotFound("No user with that email", field="email")

    stmt = select(Membership).where(
        Membership.organization_id == organization_id,
        Membership.user_id == user.id,
    )
    membership = (await session.execute(stmt)).scalar_one_or_none()
    changes_role = membership is not None and membership.role != role
    if (changes_role or role == OrgRole.OWNER) and actor_role not in CHANGE_ROLES:
        raise Forbidden("Only owners can change roles", field="role")

    if membership is None:
        membership = Membership(user_id=user.id, organization_id=organization_id, role=role)
    else:
        if role != OrgRole.OWNER:
            await assert_not_last_org_owner(session, organization_id, membership.role)
        membership.role = role
        membership.touch()

    session.add(membership)
    await session.commit()
    await session.refresh(membership)
    return membership


async def update_member_role(
    session: AsyncSession,
    actor_id: uuid.UUID,
    organization_id: uuid.UUID,
    user_id: uuid.UUID,
    role: OrgRole,
) -> Membership:
    await require_org_role(session, actor_id, organization_id, CHANGE_ROLES)
    membership = await _get_membership(session, organization_id, user_id)
    if role != OrgRole.OWNER:
        await assert_not_last_org_owner(session, organization_id, membership.role)

    membership.role = role
    membership.touch()
    session.add(membership)
    await session.commit()
    await session.refresh(membership)
    return membership


async def remove_member(
    session: AsyncSession,
    actor_id: uuid.UUID,
    organization_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    await require_org_role(session, actor_id, organization_id, MANAGE_MEMBERS)
    membership = await _get_membership(session, organization_id, user_id)
    await assert_not_last_org_owner(session, organization_id, membership.role)
    await session.delete(membership)
    await session.commit()
    logger.info("User %s removed from organization %s", user_id, organization_id)
