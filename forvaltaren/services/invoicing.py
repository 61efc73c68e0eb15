"""Rent invoice lifecycle: creation, payment, overdue sweep, monthly generation.

Status transitions::

    PENDING ──mark paid──▶ PAID (terminal)
       │
       └──due date passed──▶ OVERDUE ──mark paid──▶ PAID

OVERDUE is stored, not derived; ``mark_overdue_invoices`` writes it.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.calendar import (
    due_date_for,
    local_midnight,
    local_today,
    period_of,
)
from forvaltaren.core.errors import (
    DuplicatePeriod,
    InvalidTransition,
    InvoiceAlreadyPaid,
    OperationFailed,
)
from forvaltaren.models.base import utcnow
from forvaltaren.models.invoice import InvoiceStatus, Payment, RentInvoice
from forvaltaren.models.lease import Lease
from forvaltaren.models.property import Unit
from forvaltaren.services.lookups import get_invoice, get_lease

logger = logging.getLogger(__name__)

INVOICE_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.PAID, InvoiceStatus.OVERDUE}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.PAID: frozenset(),
}

# States a payment may be recorded against
PAYABLE = tuple(s for s, targets in INVOICE_TRANSITIONS.items() if InvoiceStatus.PAID in targets)


def ensure_invoice_transition(current: InvoiceStatus, target: InvoiceStatus) -> None:
    if target in INVOICE_TRANSITIONS[current]:
        return
    if current == InvoiceStatus.PAID:
        raise InvoiceAlreadyPaid()
    raise InvalidTransition(f"Invoice cannot move from {current.value} to {target.value}")


async def _period_taken(
    session: AsyncSession, lease_id: uuid.UUID, year: int, month: int
) -> bool:
    stmt = select(RentInvoice.id).where(
        RentInvoice.lease_id == lease_id,
        RentInvoice.period_year == year,
        RentInvoice.period_month == month,
    )
    return (await session.execute(stmt)).first() is not None


async def create_invoice(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    lease_id: uuid.UUID,
    amount: int,
    due_date: date,
) -> RentInvoice:
    """Create a PENDING invoice for the period ``due_date`` falls in.

    ``due_date`` is a calendar date; it is stored as local midnight of
    that day in the reference zone.
    """
    lease = await get_lease(session, landlord_id, lease_id)

    due_at = local_midnight(due_date)
    period_year, period_month = period_of(due_at)
    if await _period_taken(session, lease.id, period_year, period_month):
        raise DuplicatePeriod()

    invoice = RentInvoice(
        landlord_id=landlord_id,
        lease_id=lease.id,
        amount=amount,
        due_date=due_at,
        period_year=period_year,
        period_month=period_month,
        status=InvoiceStatus.PENDING,
    )
    session.add(invoice)
    try:
        await session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent creation for the same period
        await session.rollback()
        raise DuplicatePeriod() from exc
    await session.refresh(invoice)
    logger.info("Invoice %s created for lease %s (%d-%02d)",
                invoice.id, lease.id, period_year, period_month)
    return invoice


async def mark_invoice_paid(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    invoice_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> RentInvoice:
    """Record one full payment and flip the invoice to PAID, atomically.

    The status change is a compare-and-swap on PENDING/OVERDUE; if it
    matches no row the invoice was paid concurrently and no Payment is
    written.
    """
    invoice = await get_invoice(session, landlord_id, invoice_id)
    ensure_invoice_transition(invoice.status, InvoiceStatus.PAID)

    now = now or utcnow()
    try:
        result = await session.execute(
            update(RentInvoice)
            .where(
                RentInvoice.id == invoice.id,
                RentInvoice.landlord_id == landlord_id,
                RentInvoice.status.in_(PAYABLE),  # type: ignore[union-attr]
            )
            .values(status=InvoiceStatus.PAID, paid_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await session.rollback()
            raise InvoiceAlreadyPaid()

        session.add(Payment(rent_invoice_id=invoice.id, amount=invoice.amount, paid_date=now))
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Marking invoice %s as paid failed", invoice_id)
        raise OperationFailed("Could not register the payment") from exc

    await session.refresh(invoice)
    logger.info("Invoice %s marked paid (%d öre)", invoice.id, invoice.amount)
    return invoice


async def list_payments(session: AsyncSession, invoice_id: uuid.UUID) -> list[Payment]:
    stmt = (
        select(Payment)
        .where(Payment.rent_invoice_id == invoice_id)
        .order_by(Payment.paid_date.asc())  # type: ignore[union-attr]
    )
    return list((await session.execute(stmt)).scalars().all())


async def list_invoices(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    *,
    status: InvoiceStatus | None = None,
    property_id: uuid.UUID | None = None,
    limit: int = 100,
) -> list[RentInvoice]:
    stmt = select(RentInvoice).where(RentInvoice.landlord_id == landlord_id)
    if status is not None:
        stmt = stmt.where(RentInvoice.status == status)
    if property_id is not None:
        stmt = (
            stmt.join(Lease, RentInvoice.lease_id == Lease.id)
            .join(Unit, Lease.unit_id == Unit.id)
            .where(Unit.property_id == property_id)
        )
    stmt = stmt.order_by(RentInvoice.due_date.desc()).limit(limit)  # type: ignore[union-attr]
    return list((await session.execute(stmt)).scalars().all())


async def mark_overdue_invoices(
    session: AsyncSession,
    *,
    now: datetime | None = None,
    landlord_id: uuid.UUID | None = None,
) -> int:
    """Move PENDING invoices whose due day has passed to OVERDUE.

    An invoice due today (local time) is not overdue until tomorrow.
    Returns the number of invoices moved.
    """
    now = now or utcnow()
    cutoff = local_midnight(local_today(now))

    stmt = (
        update(RentInvoice)
        .where(
            RentInvoice.status == InvoiceStatus.PENDING,
            RentInvoice.due_date < cutoff,
        )
        .values(status=InvoiceStatus.OVERDUE, updated_at=now)
    )
    if landlord_id is not None:
        stmt = stmt.where(RentInvoice.landlord_id == landlord_id)

    result = await session.execute(stmt)
    await session.commit()
    moved = result.rowcount or 0
    if moved:
        logger.info("Marked %d invoices overdue", moved)
    return moved


async def generate_invoices(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    year: int,
    month: int,
) -> tuple[int, int]:
    """Create the period's invoice for every lease active on its due date.

    Leases that already have an invoice for the period are skipped.
    Returns (created, skipped).
    """
    last_possible_due = due_date_for(year, month, 28)
    stmt = select(Lease).where(
        Lease.landlord_id == landlord_id,
        Lease.start_date <= last_possible_due,
    )
    leases = list((await session.execute(stmt)).scalars().all())

    taken_stmt = select(RentInvoice.lease_id).where(
        RentInvoice.landlord_id == landlord_id,
        RentInvoice.period_year == year,
        RentInvoice.period_month == month,
    )
    taken = set((await session.execute(taken_stmt)).scalars().all())

    created = skipped = 0
    for lease in leases:
        due = due_date_for(year, month, lease.due_day)
        if not lease.active_on(due):
            continue
        if lease.id in taken:
            skipped += 1
            continue
        session.add(RentInvoice(
            landlord_id=landlord_id,
            lease_id=lease.id,
            amount=lease.rent_amount,
            due_date=local_midnight(due),
            period_year=year,
            period_month=month,
            status=InvoiceStatus.PENDING,
        ))
        created += 1

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.exception("Invoice generation for %d-%02d collided", year, month)
        raise OperationFailed("Invoices were created concurrently; try again") from exc

    logger.info("Generated %d invoices for %d-%02d (skipped %d)", created, year, month, skipped)
    return created, skipped
