"""Maintenance tickets — staff side."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status

from forvaltaren.api.deps import Landlord, Session, requires
from forvaltaren.core.permissions import Permission
from forvaltaren.models.ticket import (
    TicketCreate,
    TicketRead,
    TicketStatus,
    TicketStatusUpdate,
    TicketUpdate,
)
from forvaltaren.services import tickets as svc
from forvaltaren.services.lookups import get_ticket
from forvaltaren.services.tenancy import LandlordContext

router = APIRouter(prefix="/tickets", tags=["tickets"])

CanCreateTicket = Annotated[LandlordContext, Depends(requires(Permission.TICKET_CREATE))]
CanUpdateTicket = Annotated[LandlordContext, Depends(requires(Permission.TICKET_UPDATE))]
CanDeleteTicket = Annotated[LandlordContext, Depends(requires(Permission.TICKET_DELETE))]


@router.post("", response_model=TicketRead, status_code=status.HTTP_201_CREATED)
async def create_ticket(body: TicketCreate, ctx: CanCreateTicket, session: Session) -> TicketRead:
    ticket = await svc.create_ticket(
        session,
        ctx.landlord_id,
        property_id=body.property_id,
        title=body.title,
        unit_id=body.unit_id,
        tenant_id=body.tenant_id,
        description=body.description,
    )
    return TicketRead.model_validate(ticket)


@router.get("", response_model=list[TicketRead])
async def list_tickets(
    ctx: Landlord,
    session: Session,
    status: TicketStatus | None = None,
    q: str | None = None,
) -> list[TicketRead]:
    rows = await svc.list_tickets(session, ctx.landlord_id, status=status, q=q)
    return [TicketRead.model_validate(t) for t in rows]


@router.get("/{ticket_id}", response_model=TicketRead)
async def get_ticket_detail(ticket_id: uuid.UUID, ctx: Landlord, session: Session) -> TicketRead:
    return TicketRead.model_validate(await get_ticket(session, ctx.landlord_id, ticket_id))


@router.put("/{ticket_id}", response_model=TicketRead)
async def update_ticket(
    ticket_id: uuid.UUID, body: TicketUpdate, ctx: CanUpdateTicket, session: Session
) -> TicketRead:
    ticket = await svc.update_ticket(
        session,
        ctx.landlord_id,
        ticket_id,
        title=body.title,
        description=body.description,
        property_id=body.property_id,
        unit_id=body.unit_id,
        tenant_id=body.tenant_id,
    )
    return TicketRead.model_validate(ticket)


@router.patch("/{ticket_id}/status", response_model=TicketRead)
async def update_ticket_status(
    ticket_id: uuid.UUID, body: TicketStatusUpdate, ctx: CanUpdateTicket, session: Session
) -> TicketRead:
    ticket = await svc.update_ticket_status(session, ctx.landlord_id, ticket_id, body.status)
    return TicketRead.model_validate(ticket)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket(ticket_id: uuid.UUID, ctx: CanDeleteTicket, session: Session) -> None:
    await svc.delete_ticket(session, ctx.landlord_id, ticket_id)
