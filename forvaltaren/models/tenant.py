"""Tenant model — an occupant renting from a landlord."""

import uuid

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from forvaltaren.models.base import TimestampMixin, new_uuid


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    landlord_id: uuid.UUID = Field(foreign_key="landlords.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=50)


# ── Pydantic schemas ─────────────────────────────────────────

class TenantCreate(SQLModel):
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=6, max_length=50)


class TenantRead(SQLModel):
    id: uuid.UUID
    landlord_id: uuid.UUID
    name: str
    email: str | None
    phone: str | None
