"""Ticket model — maintenance requests."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from forvaltaren.models.base import TimestampMixin, new_uuid


class TicketStatus(StrEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class Ticket(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tickets"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    landlord_id: uuid.UUID = Field(foreign_key="landlords.id", nullable=False, index=True)
    property_id: uuid.UUID = Field(foreign_key="properties.id", nullable=False, index=True)
    unit_id: uuid.UUID | None = Field(default=None, foreign_key="units.id")
    tenant_id: uuid.UUID | None = Field(default=None, foreign_key="tenants.id")

    title: str = Field(max_length=255, nullable=False)
    description: str | None = Field(default=None)
    status: TicketStatus = Field(default=TicketStatus.OPEN, index=True)
    closed_at: datetime | None = Field(default=None)


# ── Pydantic schemas ─────────────────────────────────────────

class TicketCreate(SQLModel):
    property_id: uuid.UUID
    unit_id: uuid.UUID | None = None
    tenant_id: uuid.UUID | None = None
    title: str = Field(min_length=3, max_length=255)
    description: str | None = None


class TicketUpdate(SQLModel):
    title: str = Field(min_length=3, max_length=255)
    description: str | None = None
    property_id: uuid.UUID | None = None
    unit_id: uuid.UUID | None = None
    tenant_id: uuid.UUID | None = None


class TicketStatusUpdate(SQLModel):
    status: TicketStatus


class TicketRead(SQLModel):
    id: uuid.UUID
    landlord_id: uuid.UUID
    property_id: uuid.UUID
    unit_id: uuid.UUID | None
    tenant_id: uuid.UUID | None
    title: str
    description: str | None
    status: TicketStatus
    created_at: datetime
    closed_at: datetime | None
