"""Property + Unit models."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from forvaltaren.models.base import TimestampMixin, new_uuid


class Property(TimestampMixin, SQLModel, table=True):
    __tablename__ = "properties"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    landlord_id: uuid.UUID = Field(foreign_key="landlords.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
    address: str = Field(max_length=500, nullable=False)

    # Capability secret for the public report URL — issued once, never rotated
    intake_token: str = Field(max_length=64, nullable=False, unique=True, index=True)


class Unit(TimestampMixin, SQLModel, table=True):
    __tablename__ = "units"
    __table_args__ = (
        UniqueConstraint("property_id", "label", name="uq_units_property_label"),
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    property_id: uuid.UUID = Field(foreign_key="properties.id", nullable=False, index=True)
    label: str = Field(max_length=100, nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class PropertyCreate(SQLModel):
    name: str = Field(min_length=2, max_length=255)
    address: str = Field(min_length=5, max_length=500)


class UnitCreate(SQLModel):
    property_id: uuid.UUID
    label: str = Field(min_length=1, max_length=100)


class UnitBulkCreate(SQLModel):
    property_id: uuid.UUID
    # One label per line, e.g. "A-101\nA-102"
    labels: str = Field(min_length=1)


class UnitRead(SQLModel):
    id: uuid.UUID
    property_id: uuid.UUID
    label: str


class UnitBulkResult(SQLModel):
    created: list[UnitRead]
    skipped: list[str]


class PropertyRead(SQLModel):
    id: uuid.UUID
    landlord_id: uuid.UUID
    name: str
    address: str
    intake_token: str
    unit_count: int = 0


class PropertyDetail(PropertyRead):
    units: list[UnitRead]
    intake_url: str
