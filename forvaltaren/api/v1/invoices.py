"""Rent invoices — create, list, mark paid, monthly generation, overdue sweep."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.models.invoice import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceGenerate,
    InvoiceGenerateResult,
    InvoiceRead,
    InvoiceStatus,
    PaymentRead,
    RentInvoice,
)
from forvaltaren.services import invoicing
from forvaltaren.services.lookups import get_invoice
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/invoices", tags=["invoices"])

CanCreateInvoice = Annotated[LandlordContext, Depends(requires(Permission.INVOICE_CREATE))]
CanMarkPaid = Annotated[LandlordContext, Depends(requires(Permission.INVOICE_MARK_PAID))]


class SweepResult(BaseModel):
    updated: int


async def _detail(session: AsyncSession, invoice: RentInvoice) -> InvoiceDetail:
    payments = await invoicing.list_payments(session, invoice.id)
    return InvoiceDetail(
        **InvoiceRead.model_validate(invoice).model_dump(),
        payments=[PaymentRead.model_validate(p) for p in payments],
    )


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceCreate, ctx: CanCreateInvoice, session: Session
) -> InvoiceRead:
    invoice = await invoicing.create_invoice(
        session, ctx.landlord_id, body.lease_id, body.amount, body.due_date
    )
    return InvoiceRead.model_validate(invoice)


@router.get("", response_model=list[InvoiceRead])
async def list_invoices(
    ctx: Landlord,
    session: Session,
    status: InvoiceStatus | None = None,
    property_id: uuid.UUID | None = None,
) -> list[InvoiceRead]:
    rows = await invoicing.list_invoices(
        session, ctx.landlord_id, status=status, property_id=property_id
    )
    return [InvoiceRead.model_validate(i) for i in rows]


@router.post("/generate", response_model=InvoiceGenerateResult)
async def generate_invoices(
    body: InvoiceGenerate, ctx: CanCreateInvoice, session: Session
) -> InvoiceGenerateResult:
    """Invoice every lease active in the given month; existing periods are skipped."""
    created, skipped = await invoicing.generate_invoices(
        session, ctx.landlord_id, body.year, body.month
    )
    return InvoiceGenerateResult(created=created, skipped=skipped)


@router.post("/sweep-overdue", response_model=SweepResult)
async def sweep_overdue(ctx: CanCreateInvoice, session: Session) -> SweepResult:
    updated = await invoicing.mark_overdue_invoices(session, landlord_id=ctx.landlord_id)
    return SweepResult(updated=updated)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice_detail(
    invoice_id: uuid.UUID, ctx: Landlord, session: Session
) -> InvoiceDetail:
    invoice = await get_invoice(session, ctx.landlord_id, invoice_id)
    return await _detail(session, invoice)


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceDetail)
async def mark_paid(invoice_id: uuid.UUID, ctx: CanMarkPaid, session: Session) -> InvoiceDetail:
    invoice = await invoicing.mark_invoice_paid(session, ctx.landlord_id, invoice_id)
    return await _detail(session, invoice)
