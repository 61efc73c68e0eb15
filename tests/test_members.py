"""Landlord members and organizations, including the last-owner guard."""

import uuid

import pytest
from httpx import AsyncClient

from forvaltaren.core.plans import Plan
from forvaltaren.models.landlord import Landlord


async def _register(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/v1/auth/register", json={
        "email": email, "password": "testpass123", "name": email.split("@")[0],
    })
    return {"Authorization": f"Bearer {resp.json()['access_token']}", "user_id": resp.json()["user"]["id"]}


def _h(account: dict) -> dict:
    return {"Authorization": account["Authorization"]}


# ── Landlord members ─────────────────────────────────────────

@pytest.mark.asyncio
async def test_landlord_member_roles_and_last_owner(client: AsyncClient, session):
    owner = await _register(client, "owner@example.com")
    other = await _register(client, "other@example.com")
    landlord_id = (await client.get("/v1/landlord", headers=_h(owner))).json()["id"]
    landlord = await session.get(Landlord, uuid.UUID(landlord_id))
    landlord.plan = Plan.BASIC
    session.add(landlord)
    await session.commit()

    resp = await client.post("/v1/members", json={"email": "nobody@example.com"}, headers=_h(owner))
    assert resp.status_code == 404
    assert resp.json()["field"] == "email"

    resp = await client.post("/v1/members", json={"email": "other@example.com", "role": "ACCOUNTANT"},
                             headers=_h(owner))
    assert resp.status_code == 201

    resp = await client.get("/v1/members", headers=_h(other))
    assert {m["email"]: m["role"] for m in resp.json()} == {
        "other@example.com": "ACCOUNTANT",
        "owner@example.com": "OWNER",
    }

    # Sole owner can be neither demoted nor removed
    resp = await client.patch(f"/v1/members/{owner['user_id']}", json={"role": "ADMIN"}, headers=_h(owner))
    assert resp.status_code == 409
    assert resp.json()["code"] == "cannot_remove_last_owner"
    resp = await client.delete(f"/v1/members/{owner['user_id']}", headers=_h(owner))
    assert resp.status_code == 409

    # With a second owner the first may step down
    resp = await client.patch(f"/v1/members/{other['user_id']}", json={"role": "OWNER"}, headers=_h(owner))
    assert resp.status_code == 200
    resp = await client.patch(f"/v1/members/{owner['user_id']}", json={"role": "ADMIN"}, headers=_h(owner))
    assert resp.status_code == 200
    assert resp.json()["role"] == "ADMIN"

    resp = await client.delete(f"/v1/members/{owner['user_id']}", headers=_h(other))
    assert resp.status_code == 204


# ── Organizations ────────────────────────────────────────────

@pytest.mark.asyncio
async def test_organization_lifecycle(client: AsyncClient):
    alice = await _register(client, "alice@example.com")
    bob = await _register(client, "bob@example.com")

    resp = await client.post("/v1/organizations", json={"name": "Förvaltning AB"}, headers=_h(alice))
    assert resp.status_code == 201
    org_id = resp.json()["id"]

    # Non-members cannot see it
    resp = await client.get(f"/v1/organizations/{org_id}", headers=_h(bob))
    assert resp.status_code == 404

    resp = await client.post(f"/v1/organizations/{org_id}/members",
                             json={"email": "bob@example.com"}, headers=_h(alice))
    assert resp.status_code == 201
    assert resp.json()["role"] == "MEMBER"

    # Upsert: adding again changes the role
    resp = await client.post(f"/v1/organizations/{org_id}/members",
                             json={"email": "bob@example.com", "role": "ADMIN"}, headers=_h(alice))
    assert resp.json()["role"] == "ADMIN"

    detail = (await client.get(f"/v1/organizations/{org_id}", headers=_h(bob))).json()
    assert {m["email"]: m["role"] for m in detail["members"]} == {
        "alice@example.com": "OWNER",
        "bob@example.com": "ADMIN",
    }

    # Only owners change roles
    resp = await client.patch(f"/v1/organizations/{org_id}/members/{alice['user_id']}",
                              json={"role": "MEMBER"}, headers=_h(bob))
    assert resp.status_code == 403

    resp = await client.patch(f"/v1/organizations/{org_id}/members/{alice['user_id']}",
                              json={"role": "MEMBER"}, headers=_h(alice))
    assert resp.status_code == 409

    resp = await client.delete(f"/v1/organizations/{org_id}/members/{alice['user_id']}",
                               headers=_h(bob))
    assert resp.status_code == 409

    resp = await client.delete(f"/v1/organizations/{org_id}/members/{bob['user_id']}",
                               headers=_h(alice))
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_personal_organization_is_idempotent(client: AsyncClient):
    carol = await _register(client, "carol@example.com")

    first = (await client.post("/v1/organizations/personal", headers=_h(carol))).json()
    second = (await client.post("/v1/organizations/personal", headers=_h(carol))).json()
    assert first["id"] == second["id"]

    listed = (await client.get("/v1/organizations", headers=_h(carol))).json()
    assert [o["id"] for o in listed] == [first["id"]]


@pytest.mark.asyncio
async def test_org_admin_cannot_change_roles_through_add(client: AsyncClient):
    owner = await _register(client, "dana@example.com")
    admin = await _register(client, "erik@example.com")
    await _register(client, "frida@example.com")
    org_id = (await client.post("/v1/organizations", json={"name": "Hyresbolaget"},
                                headers=_h(owner))).json()["id"]
    await client.post(f"/v1/organizations/{org_id}/members",
                      json={"email": "erik@example.com", "role": "ADMIN"}, headers=_h(owner))

    # Re-adding oneself as OWNER is a role change
    resp = await client.post(f"/v1/organizations/{org_id}/members",
                             json={"email": "erik@example.com", "role": "OWNER"}, headers=_h(admin))
    assert resp.status_code == 403
    assert resp.json()["field"] == "role"

    # Demoting the owner through re-add is refused too
    resp = await client.post(f"/v1/organizations/{org_id}/members",
                             json={"email": "dana@example.com", "role": "MEMBER"}, headers=_h(admin))
    assert resp.status_code == 403

    # New members may not be granted OWNER by an admin
    resp = await client.post(f"/v1/organizations/{org_id}/members",
                             json={"email": "frida@example.com", "role": "OWNER"}, headers=_h(admin))
    assert resp.status_code == 403

    resp = await client.post(f"/v1/organizations/{org_id}/members",
                             json={"email": "frida@example.com"}, headers=_h(admin))
    assert resp.status_code == 201
    assert resp.json()["role"] == "MEMBER"

    detail = (await client.get(f"/v1/organizations/{org_id}", headers=_h(owner))).json()
    assert {m["email"]: m["role"] for m in detail["members"]} == {
        "dana@example.com": "OWNER",
        "erik@example.com": "ADMIN",
        "frida@example.com": "MEMBER",
    }
