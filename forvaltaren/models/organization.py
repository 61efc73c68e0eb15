"""Organization + Membership — collaborative scopes separate from landlords."""

import uuid
from enum import StrEnum

from pydantic import EmailStr
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from forvaltaren.models.base import TimestampMixin, new_uuid


class OrgRole(StrEnum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Organization(TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    created_by_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)


class Membership(TimestampMixin, SQLModel, table=True):
    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_memberships_user_org"),
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    role: OrgRole = Field(default=OrgRole.MEMBER)


# ── Pydantic schemas ─────────────────────────────────────────

class OrganizationCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)


class OrganizationRead(SQLModel):
    id: uuid.UUID
    name: str
    created_by_id: uuid.UUID


class MembershipCreate(SQLModel):
    email: EmailStr
    role: OrgRole = OrgRole.MEMBER


class MembershipUpdate(SQLModel):
    role: OrgRole


class MembershipRead(SQLModel):
    user_id: uuid.UUID
    email: str
    name: str
    role: OrgRole


class OrganizationDetail(OrganizationRead):
    members: list[MembershipRead]
