"""Landlord dashboard aggregates.

All counts in one summary are evaluated against a single ``now`` so the
month window and the "active lease" cut-off cannot drift between
queries.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.calendar import local_today, month_window
from forvaltaren.models.base import utcnow
from forvaltaren.models.invoice import (
    InvoiceRead,
    InvoiceStatus,
    Payment,
    PaymentRead,
    RentInvoice,
)
from forvaltaren.models.lease import Lease
from forvaltaren.models.property import Property
from forvaltaren.models.tenant import Tenant
from forvaltaren.models.ticket import Ticket, TicketStatus

RECENT_LIMIT = 6


class DashboardSummary(BaseModel):
    month_start: datetime
    month_end: datetime
    overdue_count: int
    due_this_month: int
    paid_this_month: int
    open_tickets: int
    properties: int
    tenants: int
    active_leases: int
    upcoming_due: list[InvoiceRead]
    recent_payments: list[PaymentRead]


async def _count(session: AsyncSession, stmt) -> int:
    return (await session.execute(stmt)).scalar_one()


async def build_summary(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> DashboardSummary:
    now = now or utcnow()
    month_start, month_end = month_window(now)
    today = local_today(now)

    overdue = await _count(session, select(func.count()).select_from(RentInvoice).where(
        RentInvoice.landlord_id == landlord_id,
        RentInvoice.status == InvoiceStatus.OVERDUE,
    ))
    due_this_month = await _count(session, select(func.count()).select_from(RentInvoice).where(
        RentInvoice.landlord_id == landlord_id,
        RentInvoice.status == InvoiceStatus.PENDING,
        RentInvoice.due_date >= month_start,
        RentInvoice.due_date <= month_end,
    ))
    paid_this_month = await _count(session, select(func.count()).select_from(RentInvoice).where(
        RentInvoice.landlord_id == landlord_id,
        RentInvoice.status == InvoiceStatus.PAID,
        RentInvoice.paid_at >= month_start,  # type: ignore[operator]
        RentInvoice.paid_at <= month_end,  # type: ignore[operator]
    ))
    open_tickets = await _count(session, select(func.count()).select_from(Ticket).where(
        Ticket.landlord_id == landlord_id,
        Ticket.status.in_((TicketStatus.OPEN, TicketStatus.IN_PROGRESS)),  # type: ignore[union-attr]
    ))
    properties = await _count(session, select(func.count()).select_from(Property).where(
        Property.landlord_id == landlord_id
    ))
    tenants = await _count(session, select(func.count()).select_from(Tenant).where(
        Tenant.landlord_id == landlord_id
    ))
    active_leases = await _count(session, select(func.count()).select_from(Lease).where(
        Lease.landlord_id == landlord_id,
        Lease.start_date <= today,
        or_(Lease.end_date.is_(None), Lease.end_date > today),  # type: ignore[union-attr]
    ))

    upcoming_stmt = (
        select(RentInvoice)
        .where(
            RentInvoice.landlord_id == landlord_id,
            RentInvoice.status == InvoiceStatus.PENDING,
            RentInvoice.due_date >= now,
        )
        .order_by(RentInvoice.due_date.asc())  # type: ignore[union-attr]
        .limit(RECENT_LIMIT)
    )
    upcoming = (await session.execute(upcoming_stmt)).scalars().all()

    payments_stmt = (
        select(Payment)
        .join(RentInvoice, Payment.rent_invoice_id == RentInvoice.id)
        .where(RentInvoice.landlord_id == landlord_id)
        .order_by(Payment.paid_date.desc())  # type: ignore[union-attr]
        .limit(RECENT_LIMIT)
    )
    payments = (await session.execute(payments_stmt)).scalars().all()

    return DashboardSummary(
        month_start=month_start,
        month_end=month_end,
        overdue_count=overdue,
        due_this_month=due_this_month,
        paid_this_month=paid_this_month,
        open_tickets=open_tickets,
        properties=properties,
        tenants=tenants,
        active_leases=active_leases,
        upcoming_due=[InvoiceRead.model_validate(i) for i in upcoming],
        recent_payments=[PaymentRead.model_validate(p) for p in payments],
    )
