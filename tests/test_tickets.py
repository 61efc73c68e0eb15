"""Ticket workflow: staff CRUD, status transitions, search."""

import pytest
from httpx import AsyncClient

from forvaltaren.core.errors import InvalidTransition
from forvaltaren.models.ticket import TicketStatus
from forvaltaren.services.tickets import compose_public_description, ensure_ticket_transition


async def _bootstrap(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/v1/auth/register", json={"email": email, "password": "testpass123"})
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
    prop = (await client.post("/v1/properties", json={
        "name": "Storgatan 1", "address": "Storgatan 1, Stockholm",
    }, headers=headers)).json()
    unit = (await client.post("/v1/units", json={
        "property_id": prop["id"], "label": "A-101",
    }, headers=headers)).json()
    return {"headers": headers, "property": prop, "unit": unit}


@pytest.mark.parametrize(
    "current, target",
    [
        (TicketStatus.OPEN, TicketStatus.IN_PROGRESS),
        (TicketStatus.OPEN, TicketStatus.CLOSED),
        (TicketStatus.IN_PROGRESS, TicketStatus.CLOSED),
        (TicketStatus.IN_PROGRESS, TicketStatus.OPEN),
        (TicketStatus.CLOSED, TicketStatus.OPEN),
    ],
)
def test_allowed_transitions(current, target):
    ensure_ticket_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (TicketStatus.CLOSED, TicketStatus.IN_PROGRESS),
        (TicketStatus.OPEN, TicketStatus.OPEN),
        (TicketStatus.CLOSED, TicketStatus.CLOSED),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidTransition):
        ensure_ticket_transition(current, target)


def test_compose_public_description():
    text = compose_public_description("Kranen läcker", "Anna", None, "070-1234567")
    assert text == "Kranen läcker\n\nKontaktuppgifter:\nNamn: Anna\nTelefon: 070-1234567"
    assert compose_public_description("  Bara text ") == "Bara text"


@pytest.mark.asyncio
async def test_ticket_lifecycle(client: AsyncClient):
    ctx = await _bootstrap(client, "tickets@example.com")
    h = ctx["headers"]

    resp = await client.post("/v1/tickets", json={
        "property_id": ctx["property"]["id"],
        "unit_id": ctx["unit"]["id"],
        "title": "Trasig diskmaskin",
    }, headers=h)
    assert resp.status_code == 201
    ticket = resp.json()
    assert ticket["status"] == "OPEN"
    assert ticket["closed_at"] is None

    url = f"/v1/tickets/{ticket['id']}/status"
    resp = await client.patch(url, json={"status": "CLOSED"}, headers=h)
    assert resp.status_code == 200
    assert resp.json()["closed_at"] is not None

    resp = await client.patch(url, json={"status": "IN_PROGRESS"}, headers=h)
    assert resp.status_code == 409
    assert resp.json()["code"] == "invalid_transition"

    resp = await client.patch(url, json={"status": "OPEN"}, headers=h)
    assert resp.status_code == 200
    assert resp.json()["status"] == "OPEN"
    assert resp.json()["closed_at"] is None

    resp = await client.put(f"/v1/tickets/{ticket['id']}", json={
        "title": "Diskmaskinen läcker", "description": "Vatten på golvet",
    }, headers=h)
    assert resp.status_code == 200
    assert resp.json()["unit_id"] is None
    assert resp.json()["property_id"] == ctx["property"]["id"]

    resp = await client.delete(f"/v1/tickets/{ticket['id']}", headers=h)
    assert resp.status_code == 204
    resp = await client.get(f"/v1/tickets/{ticket['id']}", headers=h)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_ticket_unit_must_belong_to_property(client: AsyncClient):
    ctx = await _bootstrap(client, "tickets-unit@example.com")
    other = await _bootstrap(client, "tickets-other@example.com")

    resp = await client.post("/v1/tickets", json={
        "property_id": ctx["property"]["id"],
        "unit_id": other["unit"]["id"],
        "title": "Fel enhet",
    }, headers=ctx["headers"])
    assert resp.status_code == 404
    assert resp.json()["field"] == "unit_id"


@pytest.mark.asyncio
async def test_list_tickets_filters(client: AsyncClient):
    ctx = await _bootstrap(client, "tickets-list@example.com")
    h = ctx["headers"]
    for title, description in [
        ("Stopp i avloppet", "Köket"),
        ("Trasig lampa", "Trapphuset är mörkt"),
        ("Element kallt", None),
    ]:
        await client.post("/v1/tickets", json={
            "property_id": ctx["property"]["id"], "title": title, "description": description,
        }, headers=h)

    resp = await client.get("/v1/tickets", params={"q": "TRAPP"}, headers=h)
    assert [t["title"] for t in resp.json()] == ["Trasig lampa"]

    resp = await client.get("/v1/tickets", params={"q": "avlopp"}, headers=h)
    assert [t["title"] for t in resp.json()] == ["Stopp i avloppet"]

    resp = await client.get("/v1/tickets", params={"status": "CLOSED"}, headers=h)
    assert resp.json() == []
    resp = await client.get("/v1/tickets", params={"status": "OPEN"}, headers=h)
    assert len(resp.json()) == 3
