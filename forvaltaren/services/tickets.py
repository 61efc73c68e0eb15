"""Maintenance ticket workflow — staff and public intake."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.calendar import local_today
from forvaltaren.core.errors import InvalidTransition, NotFound, ValidationError
from forvaltaren.models.base import utcnow
from forvaltaren.models.lease import Lease
from forvaltaren.models.property import Property, Unit
from forvaltaren.models.ticket import Ticket, TicketStatus
from forvaltaren.services.lookups import get_property, get_tenant, get_ticket, get_unit

logger = logging.getLogger(__name__)

TITLE_MAX = 255
DESCRIPTION_MAX = 5000
# Keyed by report form field
CONTACT_MAX = {"name": 120, "email": 255, "phone": 40}

TICKET_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.OPEN: frozenset({TicketStatus.IN_PROGRESS, TicketStatus.CLOSED}),
    TicketStatus.IN_PROGRESS: frozenset({TicketStatus.OPEN, TicketStatus.CLOSED}),
    # Reopen only; resuming work goes through OPEN
    TicketStatus.CLOSED: frozenset({TicketStatus.OPEN}),
}


def ensure_ticket_transition(current: TicketStatus, target: TicketStatus) -> None:
    if target not in TICKET_TRANSITIONS[current]:
        raise InvalidTransition(
            f"Ticket cannot move from {current.value} to {target.value}", field="status"
        )


async def _validate_refs(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    property_id: uuid.UUID,
    unit_id: uuid.UUID | None,
    tenant_id: uuid.UUID | None,
) -> None:
    """Property, unit and tenant must all belong to the landlord (unit to the property)."""
    await get_property(session, landlord_id, property_id)
    if unit_id is not None:
        await get_unit(session, landlord_id, unit_id, property_id=property_id)
    if tenant_id is not None:
        await get_tenant(session, landlord_id, tenant_id)


async def create_ticket(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    *,
    property_id: uuid.UUID,
    title: str,
    unit_id: uuid.UUID | None = None,
    tenant_id: uuid.UUID | None = None,
    description: str | None = None,
) -> Ticket:
    await _validate_refs(session, landlord_id, property_id, unit_id, tenant_id)

    ticket = Ticket(
        landlord_id=landlord_id,
        property_id=property_id,
        unit_id=unit_id,
        tenant_id=tenant_id,
        title=title,
        description=description,
        status=TicketStatus.OPEN,
    )
    session.add(ticket)
    await session.commit()
    await session.refresh(ticket)
    return ticket


async def update_ticket(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    ticket_id: uuid.UUID,
    *,
    title: str,
    description: str | None = None,
    property_id: uuid.UUID | None = None,
    unit_id: uuid.UUID | None = None,
    tenant_id: uuid.UUID | None = None,
) -> Ticket:
    """Edit ticket metadata; the property defaults to the current one."""
    ticket = await get_ticket(session, landlord_id, ticket_id)
    target_property = property_id or ticket.property_id
    await _validate_refs(session, landlord_id, target_property, unit_id, tenant_id)

    ticket.property_id = target_property
    ticket.unit_id = unit_id
    ticket.tenant_id = tenant_id
    ticket.title = title
    ticket.description = description
    ticket.touch()
    session.add(ticket)
    await session.commit()
    await session.refresh(ticket)
    return ticket


async def update_ticket_status(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    ticket_id: uuid.UUID,
    new_status: TicketStatus,
) -> Ticket:
    ticket = await get_ticket(session, landlord_id, ticket_id)
    ensure_ticket_transition(ticket.status, new_status)

    now = utcnow()
    ticket.status = new_status
    ticket.closed_at = now if new_status == TicketStatus.CLOSED else None
    ticket.updated_at = now
    session.add(ticket)
    await session.commit()
    await session.refresh(ticket)
    return ticket


async def delete_ticket(
    session: AsyncSession, landlord_id: uuid.UUID, ticket_id: uuid.UUID
) -> None:
    ticket = await get_ticket(session, landlord_id, ticket_id)
    await session.delete(ticket)
    await session.commit()
    logger.info("Ticket %s deleted", ticket_id)


async def list_tickets(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    *,
    status: TicketStatus | None = None,
    q: str | None = None,
    limit: int = 100,
) -> list[Ticket]:
    stmt = select(Ticket).where(Ticket.landlord_id == landlord_id)
    if status is not None:
        stmt = stmt.where(Ticket.status == status)
    if q and q.strip():
        pattern = f"%{q.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Ticket.title).like(pattern),
                func.lower(Ticket.description).like(pattern),
            )
        )
    stmt = stmt.order_by(Ticket.created_at.desc()).limit(limit)  # type: ignore[union-attr]
    return list((await session.execute(stmt)).scalars().all())


# ── Public intake ─────────────────────────────────────────────

async def get_property_by_token(session: AsyncSession, intake_token: str) -> Property:
    stmt = select(Property).where(Property.intake_token == intake_token)
    prop = (await session.execute(stmt)).scalar_one_or_none()
    if prop is None:
        raise NotFound("Unknown report link")
    return prop


async def list_property_units(session: AsyncSession, property_id: uuid.UUID) -> list[Unit]:
    stmt = (
        select(Unit)
        .where(Unit.property_id == property_id)
        .order_by(Unit.label.asc())  # type: ignore[union-attr]
    )
    return list((await session.execute(stmt)).scalars().all())


async def find_active_tenant_id(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    unit_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> uuid.UUID | None:
    """Tenant of the unit's most recently started active lease, if any."""
    today = local_today(now or utcnow())
    stmt = (
        select(Lease.tenant_id)
        .where(
            Lease.unit_id == unit_id,
            Lease.landlord_id == landlord_id,
            Lease.start_date <= today,
            or_(Lease.end_date.is_(None), Lease.end_date > today),  # type: ignore[union-attr]
        )
        .order_by(Lease.start_date.desc())  # type: ignore[union-attr]
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


def compose_public_description(
    description: str,
    contact_name: str | None = None,
    contact_email: str | None = None,
    contact_phone: str | None = None,
) -> str:
    """Append the anonymous reporter's contact details to the free text."""
    lines = [description.strip()]
    contact = [
        f"Namn: {contact_name}" if contact_name else None,
        f"E-post: {contact_email}" if contact_email else None,
        f"Telefon: {contact_phone}" if contact_phone else None,
    ]
    contact = [c for c in contact if c]
    if contact:
        lines.append("\nKontaktuppgifter:\n" + "\n".join(contact))
    return "\n".join(lines)


async def public_create_ticket(
    session: AsyncSession,
    intake_token: str,
    *,
    title: str,
    description: str,
    unit_id: uuid.UUID | None = None,
    contact_name: str | None = None,
    contact_email: str | None = None,
    contact_phone: str | None = None,
) -> Ticket:
    """Create a ticket from the anonymous report form.

    Holding the intake token is the only authorization.
    """
    prop = await get_property_by_token(session, intake_token)

    title = title.strip()
    if len(title) < 3:
        raise ValidationError("Give the problem a short title", field="title")
    if len(title) > TITLE_MAX:
        raise ValidationError(f"Keep the title under {TITLE_MAX} characters", field="title")
    if not description.strip():
        raise ValidationError("Describe the problem", field="description")
    if len(description) > DESCRIPTION_MAX:
        raise ValidationError("The description is too long", field="description")
    contact = {"name": contact_name, "email": contact_email, "phone": contact_phone}
    for field, value in contact.items():
        if value and len(value) > CONTACT_MAX[field]:
            raise ValidationError("Contact detail is too long", field=field)

    tenant_id = None
    if unit_id is not None:
        unit = await session.get(Unit, unit_id)
        if unit is None or unit.property_id != prop.id:
            raise ValidationError("Unknown unit for this property", field="unit_id")
        tenant_id = await find_active_tenant_id(session, prop.landlord_id, unit_id)

    ticket = Ticket(
        landlord_id=prop.landlord_id,
        property_id=prop.id,
        unit_id=unit_id,
        tenant_id=tenant_id,
        title=title,
        description=compose_public_description(
            description, contact_name, contact_email, contact_phone
        ),
        status=TicketStatus.OPEN,
    )
    session.add(ticket)
    await session.commit()
    await session.refresh(ticket)
    logger.info("Public ticket %s filed for property %s", ticket.id, prop.id)
    return ticket
