"""Dashboard aggregates evaluated against a single clock reading."""

from datetime import date, datetime

import pytest
from httpx import AsyncClient

from forvaltaren.core.security import create_jwt, generate_intake_token, hash_password
from forvaltaren.models.lease import Lease
from forvaltaren.models.property import Property, Unit
from forvaltaren.models.tenant import Tenant
from forvaltaren.models.ticket import TicketStatus
from forvaltaren.models.user import User
from forvaltaren.services.dashboard import build_summary
from forvaltaren.services.invoicing import create_invoice, mark_invoice_paid, mark_overdue_invoices
from forvaltaren.services.tenancy import provision_landlord
from forvaltaren.services.tickets import create_ticket, update_ticket_status

NOW = datetime(2025, 5, 15, 10, 0)


async def _seed(session) -> dict:
    user = User(email="dash@example.com", password_hash=hash_password("testpass123"))
    session.add(user)
    await session.commit()
    landlord_id = await provision_landlord(session, user.id)

    prop = Property(landlord_id=landlord_id, name="Storgatan 1", address="Storgatan 1",
                    intake_token=generate_intake_token())
    session.add(prop)
    await session.flush()
    unit = Unit(property_id=prop.id, label="A-101")
    tenant = Tenant(landlord_id=landlord_id, name="Anna Andersson")
    session.add_all([unit, tenant])
    await session.flush()
    lease = Lease(landlord_id=landlord_id, unit_id=unit.id, tenant_id=tenant.id,
                  rent_amount=850000, due_day=1, start_date=date(2025, 1, 1))
    session.add(lease)
    await session.commit()
    return {"user": user, "landlord_id": landlord_id, "property": prop, "lease": lease}


@pytest.mark.asyncio
async def test_summary_counts(session):
    ctx = await _seed(session)
    landlord_id, lease_id = ctx["landlord_id"], ctx["lease"].id

    await create_invoice(session, landlord_id, lease_id, 850000, date(2025, 3, 1))
    april = await create_invoice(session, landlord_id, lease_id, 850000, date(2025, 4, 1))
    await mark_invoice_paid(session, landlord_id, april.id, now=datetime(2025, 5, 2, 9, 0))
    await mark_overdue_invoices(session, now=NOW)
    await create_invoice(session, landlord_id, lease_id, 850000, date(2025, 5, 25))

    first = await create_ticket(session, landlord_id, property_id=ctx["property"].id, title="Läckage")
    await create_ticket(session, landlord_id, property_id=ctx["property"].id, title="Trasig lampa")
    await update_ticket_status(session, landlord_id, first.id, TicketStatus.CLOSED)

    summary = await build_summary(session, landlord_id, now=NOW)
    assert summary.month_start == datetime(2025, 4, 30, 22, 0)
    assert summary.overdue_count == 1
    assert summary.due_this_month == 1
    assert summary.paid_this_month == 1
    assert summary.open_tickets == 1
    assert (summary.properties, summary.tenants, summary.active_leases) == (1, 1, 1)
    assert [i.period_month for i in summary.upcoming_due] == [5]
    assert [p.amount for p in summary.recent_payments] == [850000]


@pytest.mark.asyncio
async def test_summary_is_empty_for_new_landlord(client: AsyncClient, session):
    ctx = await _seed(session)
    other = User(email="empty@example.com", password_hash=hash_password("testpass123"))
    session.add(other)
    await session.commit()
    await create_invoice(session, ctx["landlord_id"], ctx["lease"].id, 850000, date(2025, 3, 1))

    headers = {"Authorization": f"Bearer {create_jwt(str(other.id))}"}
    resp = await client.get("/v1/dashboard", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["properties"] == 0
    assert data["overdue_count"] == 0
    assert data["upcoming_due"] == []
