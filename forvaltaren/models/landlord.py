"""Landlord model — top-level isolation boundary, one per owning user."""

import uuid

from sqlmodel import Field, SQLModel

from forvaltaren.core.plans import Plan
from forvaltaren.models.base import TimestampMixin, new_uuid


class Landlord(TimestampMixin, SQLModel, table=True):
    __tablename__ = "landlords"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    # Unique: provisioning upserts on this column
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, unique=True, index=True)
    org_name: str | None = Field(default=None, max_length=255)

    # Synced from the billing provider; only the plan id is stored here
    plan: Plan = Field(default=Plan.FREE)


# ── Pydantic schemas ─────────────────────────────────────────

class LandlordUpdate(SQLModel):
    org_name: str = Field(min_length=1, max_length=255)


class LandlordRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    org_name: str | None
    plan: Plan
