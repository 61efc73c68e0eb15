"""Organizations — collaborative workspaces with OWNER/ADMIN/MEMBER roles."""

import uuid

from fastapi import APIRouter, status
from sqlalchemy.ext.asyncio import AsyncSession

from forvaltaren.api.deps import Auth, Session
from forvaltaren.models.organization import (
    Membership,
    MembershipCreate,
    MembershipRead,
    MembershipUpdate,
    OrganizationCreate,
    OrganizationDetail,
    OrganizationRead,
)
from forvaltaren.models.user import User
from forvaltaren.services import organizations as orgs

router = APIRouter(prefix="/organizations", tags=["organizations"])


async def _membership_read(session: AsyncSession, membership: Membership) -> MembershipRead:
    user = await session.get(User, membership.user_id)
    return MembershipRead(
        user_id=membership.user_id,
        email=user.email if user else "",
        name=user.name if user else "",
        role=membership.role,
    )


@router.post("", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
async def create_organization(
    body: OrganizationCreate, auth: Auth, session: Session
) -> OrganizationRead:
    org = await orgs.create_organization(session, auth.user_id, body.name.strip())
    return OrganizationRead.model_validate(org)


@router.post("/personal", response_model=OrganizationRead)
async def ensure_personal_organization(auth: Auth, session: Session) -> OrganizationRead:
    """Idempotent: returns the caller's first organization, creating one if needed."""
    org = await orgs.ensure_personal_org(session, auth.user_id)
    return OrganizationRead.model_validate(org)


@router.get("", response_model=list[OrganizationRead])
async def list_organizations(auth: Auth, session: Session) -> list[OrganizationRead]:
    rows = await orgs.list_my_organizations(session, auth.user_id)
    return [OrganizationRead.model_validate(o) for o in rows]


@router.get("/{organization_id}", response_model=OrganizationDetail)
async def get_organization(
    organization_id: uuid.UUID, auth: Auth, session: Session
) -> OrganizationDetail:
    return await orgs.get_organization(session, auth.user_id, organization_id)


@router.post(
    "/{organization_id}/members",
    response_model=MembershipRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    organization_id: uuid.UUID,
    body: MembershipCreate,
    auth: Auth,
    session: Session,
) -> MembershipRead:
    membership = await orgs.add_member(
        session, auth.user_id, organization_id, body.email.lower(), body.role
    )
    return await _membership_read(session, membership)


@router.patch("/{organization_id}/members/{user_id}", response_model=MembershipRead)
async def update_member(
    organization_id: uuid.UUID,
    user_id: uuid.UUID,
    body: MembershipUpdate,
    auth: Auth,
    session: Session,
) -> MembershipRead:
    membership = await orgs.update_member_role(
        session, auth.user_id, organization_id, user_id, body.role
    )
    return await _membership_read(session, membership)


@router.delete(
    "/{organization_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_member(
    organization_id: uuid.UUID,
    user_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> None:
    await orgs.remove_member(session, auth.user_id, organization_id, user_id)
