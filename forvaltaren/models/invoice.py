"""RentInvoice + Payment models."""

import uuid
from datetime import date, datetime
from enum import StrEnum

from pydantic import computed_field
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from forvaltaren.core.money import format_sek
from forvaltaren.models.base import TimestampMixin, new_uuid


class InvoiceStatus(StrEnum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class RentInvoice(TimestampMixin, SQLModel, table=True):
    __tablename__ = "rent_invoices"
    __table_args__ = (
        UniqueConstraint(
            "lease_id", "period_year", "period_month", name="uq_rent_invoices_lease_period"
        ),
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    landlord_id: uuid.UUID = Field(foreign_key="landlords.id", nullable=False, index=True)
    lease_id: uuid.UUID = Field(foreign_key="leases.id", nullable=False, index=True)

    amount: int = Field(nullable=False)  # öre
    due_date: datetime = Field(nullable=False, index=True)
    status: InvoiceStatus = Field(default=InvoiceStatus.PENDING, index=True)
    period_year: int = Field(nullable=False)
    period_month: int = Field(nullable=False)  # 1-12, local month of due_date

    # Set iff status == PAID
    paid_at: datetime | None = Field(default=None)


class Payment(TimestampMixin, SQLModel, table=True):
    __tablename__ = "payments"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    rent_invoice_id: uuid.UUID = Field(
        foreign_key="rent_invoices.id", nullable=False, index=True
    )
    amount: int = Field(nullable=False)  # öre
    paid_date: datetime = Field(nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class InvoiceCreate(SQLModel):
    lease_id: uuid.UUID
    amount: int = Field(ge=1)
    due_date: date


class InvoiceGenerate(SQLModel):
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)


class InvoiceGenerateResult(SQLModel):
    created: int
    skipped: int


class PaymentRead(SQLModel):
    id: uuid.UUID
    rent_invoice_id: uuid.UUID
    amount: int
    paid_date: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount_display(self) -> str:
        return format_sek(self.amount)


class InvoiceRead(SQLModel):
    id: uuid.UUID
    landlord_id: uuid.UUID
    lease_id: uuid.UUID
    amount: int
    due_date: datetime
    status: InvoiceStatus
    period_year: int
    period_month: int
    paid_at: datetime | None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount_display(self) -> str:
        return format_sek(self.amount)


class InvoiceDetail(InvoiceRead):
    payments: list[PaymentRead]
