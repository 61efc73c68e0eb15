"""Rent invoice lifecycle: creation, duplicate periods, mark-paid."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlmodel import select

from forvaltaren.core.errors import InvalidTransition, InvoiceAlreadyPaid
from forvaltaren.models.invoice import InvoiceStatus, Payment
from forvaltaren.services.invoicing import ensure_invoice_transition


async def _bootstrap(client: AsyncClient, email: str) -> dict:
    """Helper: owner account with one property, unit, tenant and lease."""
    resp = await client.post("/v1/auth/register", json={
        "email": email, "password": "testpass123",
    })
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    prop = (await client.post("/v1/properties", json={
        "name": "Storgatan 1", "address": "Storgatan 1, 111 22 Stockholm",
    }, headers=headers)).json()
    unit = (await client.post("/v1/units", json={
        "property_id": prop["id"], "label": "A-101",
    }, headers=headers)).json()
    tenant = (await client.post("/v1/tenants", json={
        "name": "Anna Andersson", "email": "anna@example.com",
    }, headers=headers)).json()
    resp = await client.post("/v1/leases", json={
        "property_id": prop["id"],
        "unit_id": unit["id"],
        "tenant_id": tenant["id"],
        "rent_amount": 850000,
        "due_day": 1,
        "start_date": "2025-01-01",
    }, headers=headers)
    assert resp.status_code == 201
    return {"headers": headers, "property": prop, "unit": unit, "tenant": tenant, "lease": resp.json()}


@pytest.mark.asyncio
async def test_create_invoice(client: AsyncClient):
    ctx = await _bootstrap(client, "inv-create@example.com")

    resp = await client.post("/v1/invoices", json={
        "lease_id": ctx["lease"]["id"], "amount": 850000, "due_date": "2025-05-01",
    }, headers=ctx["headers"])
    assert resp.status_code == 201
    invoice = resp.json()
    assert invoice["status"] == "PENDING"
    assert invoice["amount"] == 850000
    assert invoice["amount_display"] == "8\u00a0500,00 kr"
    assert (invoice["period_year"], invoice["period_month"]) == (2025, 5)
    assert invoice["paid_at"] is None


@pytest.mark.asyncio
async def test_duplicate_period_rejected(client: AsyncClient):
    ctx = await _bootstrap(client, "inv-dup@example.com")
    body = {"lease_id": ctx["lease"]["id"], "amount": 850000, "due_date": "2025-05-01"}

    assert (await client.post("/v1/invoices", json=body, headers=ctx["headers"])).status_code == 201

    body["due_date"] = "2025-05-27"
    resp = await client.post("/v1/invoices", json=body, headers=ctx["headers"])
    assert resp.status_code == 409
    assert resp.json()["code"] == "duplicate_period"

    body["due_date"] = "2025-06-01"
    assert (await client.post("/v1/invoices", json=body, headers=ctx["headers"])).status_code == 201


@pytest.mark.asyncio
async def test_mark_paid_once(client: AsyncClient, session):
    ctx = await _bootstrap(client, "inv-paid@example.com")
    invoice = (await client.post("/v1/invoices", json={
        "lease_id": ctx["lease"]["id"], "amount": 850000, "due_date": "2025-05-01",
    }, headers=ctx["headers"])).json()

    resp = await client.post(f"/v1/invoices/{invoice['id']}/mark-paid", headers=ctx["headers"])
    assert resp.status_code == 200
    paid = resp.json()
    assert paid["status"] == "PAID"
    assert paid["paid_at"] is not None
    assert [p["amount"] for p in paid["payments"]] == [850000]
    assert paid["payments"][0]["amount_display"] == "8\u00a0500,00 kr"

    resp = await client.post(f"/v1/invoices/{invoice['id']}/mark-paid", headers=ctx["headers"])
    assert resp.status_code == 409
    assert resp.json()["code"] == "invoice_already_paid"

    count = await session.execute(select(func.count()).select_from(Payment))
    assert count.scalar_one() == 1


@pytest.mark.asyncio
async def test_list_and_filter_invoices(client: AsyncClient):
    ctx = await _bootstrap(client, "inv-list@example.com")
    ids = []
    for due in ("2025-03-01", "2025-04-01", "2025-05-01"):
        resp = await client.post("/v1/invoices", json={
            "lease_id": ctx["lease"]["id"], "amount": 850000, "due_date": due,
        }, headers=ctx["headers"])
        ids.append(resp.json()["id"])
    await client.post(f"/v1/invoices/{ids[0]}/mark-paid", headers=ctx["headers"])

    resp = await client.get("/v1/invoices", headers=ctx["headers"])
    rows = resp.json()
    assert [r["id"] for r in rows] == list(reversed(ids))  # newest due date first

    resp = await client.get("/v1/invoices", params={"status": "PAID"}, headers=ctx["headers"])
    assert [r["id"] for r in resp.json()] == [ids[0]]

    resp = await client.get(
        "/v1/invoices", params={"property_id": ctx["property"]["id"]}, headers=ctx["headers"]
    )
    assert len(resp.json()) == 3


@pytest.mark.asyncio
async def test_invoice_for_foreign_lease_is_404(client: AsyncClient):
    a = await _bootstrap(client, "inv-a@example.com")
    b = await _bootstrap(client, "inv-b@example.com")

    resp = await client.post("/v1/invoices", json={
        "lease_id": a["lease"]["id"], "amount": 100, "due_date": "2025-05-01",
    }, headers=b["headers"])
    assert resp.status_code == 404


def test_invoice_transition_table():
    ensure_invoice_transition(InvoiceStatus.PENDING, InvoiceStatus.PAID)
    ensure_invoice_transition(InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)
    ensure_invoice_transition(InvoiceStatus.OVERDUE, InvoiceStatus.PAID)

    with pytest.raises(InvoiceAlreadyPaid):
        ensure_invoice_transition(InvoiceStatus.PAID, InvoiceStatus.PAID)
    with pytest.raises(InvalidTransition):
        ensure_invoice_transition(InvoiceStatus.OVERDUE, InvoiceStatus.PENDING)
    with pytest.raises(InvalidTransition):
        ensure_invoice_transition(InvoiceStatus.PENDING, InvoiceStatus.PENDING)
