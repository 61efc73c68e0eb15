"""LandlordMember model — a user's role inside a landlord scope."""

import uuid
from enum import StrEnum

from pydantic import EmailStr
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from forvaltaren.models.base import TimestampMixin, new_uuid


class LandlordRole(StrEnum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    ACCOUNTANT = "ACCOUNTANT"
    STAFF = "STAFF"


class LandlordMember(TimestampMixin, SQLModel, table=True):
    __tablename__ = "landlord_members"
    __table_args__ = (
        UniqueConstraint("landlord_id", "user_id", name="uq_landlord_members_landlord_user"),
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    landlord_id: uuid.UUID = Field(foreign_key="landlords.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role: LandlordRole = Field(default=LandlordRole.STAFF)


# ── Pydantic schemas ─────────────────────────────────────────

class LandlordMemberCreate(SQLModel):
    email: EmailStr
    role: LandlordRole = LandlordRole.STAFF


class LandlordMemberUpdate(SQLModel):
    role: LandlordRole


class LandlordMemberRead(SQLModel):
    user_id: uuid.UUID
    email: str
    name: str
    role: LandlordRole
