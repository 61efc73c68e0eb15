"""Overdue sweep (service, worker, endpoint) and monthly invoice generation."""

from datetime import date, datetime
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from forvaltaren.core.security import create_jwt, generate_intake_token, hash_password
from forvaltaren.models.invoice import InvoiceStatus
from forvaltaren.models.lease import Lease
from forvaltaren.models.property import Property, Unit
from forvaltaren.models.tenant import Tenant
from forvaltaren.models.user import User
from forvaltaren.services.invoicing import (
    create_invoice,
    generate_invoices,
    mark_invoice_paid,
    mark_overdue_invoices,
)
from forvaltaren.services.tenancy import provision_landlord
from forvaltaren.workers.overdue import sweep_overdue_invoices


async def _seed(session, email: str = "jobs@example.com", **lease_kwargs) -> dict:
    """Helper: landlord with one property/unit/tenant/lease, built directly."""
    user = User(email=email, password_hash=hash_password("testpass123"))
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
    lease = Lease(
        landlord_id=landlord_id,
        unit_id=unit.id,
        tenant_id=tenant.id,
        rent_amount=lease_kwargs.get("rent_amount", 850000),
        due_day=lease_kwargs.get("due_day", 1),
        start_date=lease_kwargs.get("start_date", date(2025, 1, 1)),
        end_date=lease_kwargs.get("end_date"),
    )
    session.add(lease)
    await session.commit()
    return {"user": user, "landlord_id": landlord_id, "unit": unit, "tenant": tenant, "lease": lease}


# ── Overdue sweep ────────────────────────────────────────────

@pytest.mark.asyncio
async def test_invoice_due_today_is_not_overdue(session):
    ctx = await _seed(session)
    invoice = await create_invoice(session, ctx["landlord_id"], ctx["lease"].id, 850000, date(2025, 5, 1))

    # 12:00 local on the due date
    assert await mark_overdue_invoices(session, now=datetime(2025, 5, 1, 10, 0)) == 0
    await session.refresh(invoice)
    assert invoice.status == InvoiceStatus.PENDING

    # 00:30 local the day after
    assert await mark_overdue_invoices(session, now=datetime(2025, 5, 1, 22, 30)) == 1
    await session.refresh(invoice)
    assert invoice.status == InvoiceStatus.OVERDUE


@pytest.mark.asyncio
async def test_sweep_skips_paid_and_is_repeatable(session):
    ctx = await _seed(session)
    lease_id = ctx["lease"].id
    paid = await create_invoice(session, ctx["landlord_id"], lease_id, 850000, date(2025, 3, 1))
    await create_invoice(session, ctx["landlord_id"], lease_id, 850000, date(2025, 4, 1))
    await mark_invoice_paid(session, ctx["landlord_id"], paid.id, now=datetime(2025, 3, 1, 9, 0))

    now = datetime(2025, 6, 1, 12, 0)
    assert await mark_overdue_invoices(session, now=now) == 1
    assert await mark_overdue_invoices(session, now=now) == 0
    await session.refresh(paid)
    assert paid.status == InvoiceStatus.PAID


@pytest.mark.asyncio
async def test_overdue_invoice_can_still_be_paid(session):
    ctx = await _seed(session)
    invoice = await create_invoice(session, ctx["landlord_id"], ctx["lease"].id, 850000, date(2025, 3, 1))
    await mark_overdue_invoices(session, now=datetime(2025, 4, 1))

    invoice = await mark_invoice_paid(session, ctx["landlord_id"], invoice.id)
    assert invoice.status == InvoiceStatus.PAID
    assert invoice.paid_at is not None


@pytest.mark.asyncio
async def test_worker_sweeps_all_landlords(session, test_session_factory):
    a = await _seed(session, "a@example.com")
    b = await _seed(session, "b@example.com")
    await create_invoice(session, a["landlord_id"], a["lease"].id, 100, date(2025, 3, 1))
    await create_invoice(session, b["landlord_id"], b["lease"].id, 100, date(2025, 3, 1))

    with patch("forvaltaren.workers.overdue.async_session_factory", test_session_factory):
        result = await sweep_overdue_invoices({})
    assert result == {"updated": 2}


@pytest.mark.asyncio
async def test_sweep_endpoint_is_scoped_to_caller(client: AsyncClient, session):
    a = await _seed(session, "a@example.com")
    b = await _seed(session, "b@example.com")
    await create_invoice(session, a["landlord_id"], a["lease"].id, 100, date(2025, 3, 1))
    await create_invoice(session, b["landlord_id"], b["lease"].id, 100, date(2025, 3, 1))

    headers = {"Authorization": f"Bearer {create_jwt(str(a['user'].id))}"}
    resp = await client.post("/v1/invoices/sweep-overdue", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"updated": 1}

    resp = await client.get("/v1/invoices", params={"status": "OVERDUE"}, headers=headers)
    assert len(resp.json()) == 1


# ── Monthly generation ───────────────────────────────────────

@pytest.mark.asyncio
async def test_generate_skips_existing_period(session):
    ctx = await _seed(session, due_day=27)

    assert await generate_invoices(session, ctx["landlord_id"], 2025, 2) == (1, 0)
    assert await generate_invoices(session, ctx["landlord_id"], 2025, 2) == (0, 1)


@pytest.mark.asyncio
async def test_generate_ignores_inactive_leases(session):
    ctx = await _seed(session, start_date=date(2025, 1, 1), end_date=date(2025, 3, 1))

    assert await generate_invoices(session, ctx["landlord_id"], 2024, 12) == (0, 0)
    assert await generate_invoices(session, ctx["landlord_id"], 2025, 2) == (1, 0)
    # Lease ends on the due date of March
    assert await generate_invoices(session, ctx["landlord_id"], 2025, 3) == (0, 0)


@pytest.mark.asyncio
async def test_generate_endpoint(client: AsyncClient, session):
    ctx = await _seed(session)
    headers = {"Authorization": f"Bearer {create_jwt(str(ctx['user'].id))}"}

    resp = await client.post("/v1/invoices/generate", json={"year": 2025, "month": 6}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"created": 1, "skipped": 0}

    resp = await client.get("/v1/invoices", headers=headers)
    invoice = resp.json()[0]
    assert invoice["amount"] == 850000
    assert (invoice["period_year"], invoice["period_month"]) == (2025, 6)
