"""Lease model — a tenant renting a unit at a fixed monthly rent."""

import uuid
from datetime import date

from pydantic import model_validator
from sqlmodel import Field, SQLModel

from forvaltaren.models.base import TimestampMixin, new_uuid


class Lease(TimestampMixin, SQLModel, table=True):
    __tablename__ = "leases"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    landlord_id: uuid.UUID = Field(foreign_key="landlords.id", nullable=False, index=True)
    unit_id: uuid.UUID = Field(foreign_key="units.id", nullable=False, index=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    rent_amount: int = Field(nullable=False)  # öre
    # Capped at 28 so every month, February included, has the day
    due_day: int = Field(default=1, nullable=False)
    start_date: date = Field(nullable=False)
    end_date: date | None = Field(default=None)

    def active_on(self, today: date) -> bool:
        return self.start_date <= today and (self.end_date is None or self.end_date > today)


# ── Pydantic schemas ─────────────────────────────────────────

class LeaseCreate(SQLModel):
    property_id: uuid.UUID
    unit_id: uuid.UUID
    tenant_id: uuid.UUID
    rent_amount: int = Field(ge=1)
    due_day: int = Field(ge=1, le=28)
    start_date: date
    end_date: date | None = None

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class LeaseUpdate(LeaseCreate):
    pass


class LeaseRead(SQLModel):
    id: uuid.UUID
    landlord_id: uuid.UUID
    unit_id: uuid.UUID
    tenant_id: uuid.UUID
    rent_amount: int
    due_day: int
    start_date: date
    end_date: date | None
    is_active: bool = False
