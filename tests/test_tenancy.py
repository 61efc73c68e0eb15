"""Tests for landlord scope resolution and idempotent provisioning."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlmodel import select

from forvaltaren.core.errors import NotFound, Unauthenticated
from forvaltaren.core.plans import Plan
from forvaltaren.core.security import hash_password
from forvaltaren.models.landlord import Landlord
from forvaltaren.models.member import LandlordMember, LandlordRole
from forvaltaren.models.user import User
from forvaltaren.services.tenancy import (
    get_landlord,
    load_context,
    provision_landlord,
    rename_landlord,
    require_landlord,
    resolve_landlord,
)


async def _user(session, email: str) -> User:
    user = User(email=email, password_hash=hash_password("testpass123"))
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.mark.asyncio
async def test_resolve_without_ensure_returns_none(session):
    user = await _user(session, "fresh@example.com")
    assert await resolve_landlord(session, user.id) is None


@pytest.mark.asyncio
async def test_ensure_is_idempotent(session):
    user = await _user(session, "owner@example.com")

    first = await resolve_landlord(session, user.id, ensure=True)
    second = await resolve_landlord(session, user.id, ensure=True)
    again = await provision_landlord(session, user.id)
    assert first == second == again

    count = await session.execute(
        select(func.count()).select_from(Landlord).where(Landlord.user_id == user.id)
    )
    assert count.scalar_one() == 1

    members = (await session.execute(
        select(LandlordMember).where(LandlordMember.landlord_id == first)
    )).scalars().all()
    assert [(m.user_id, m.role) for m in members] == [(user.id, LandlordRole.OWNER)]


@pytest.mark.asyncio
async def test_staff_member_resolves_to_employer(session):
    owner = await _user(session, "boss@example.com")
    staff = await _user(session, "staff@example.com")
    landlord_id = await provision_landlord(session, owner.id)
    session.add(LandlordMember(landlord_id=landlord_id, user_id=staff.id, role=LandlordRole.STAFF))
    await session.commit()

    assert await resolve_landlord(session, staff.id, ensure=True) == landlord_id
    ctx = await load_context(session, staff)
    assert ctx.landlord_id == landlord_id
    assert ctx.role == LandlordRole.STAFF
    assert ctx.plan == Plan.FREE


@pytest.mark.asyncio
async def test_landlord_endpoint_provisions_and_updates(client: AsyncClient):
    resp = await client.post("/v1/auth/register", json={
        "email": "api@example.com", "password": "testpass123",
    })
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    resp = await client.get("/v1/landlord", headers=headers)
    assert resp.status_code == 200
    landlord = resp.json()
    assert landlord["plan"] == "FREE"

    resp = await client.get("/v1/landlord", headers=headers)
    assert resp.json()["id"] == landlord["id"]

    resp = await client.patch("/v1/landlord", json={"org_name": "Fastighets AB"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["org_name"] == "Fastighets AB"

    resp = await client.get("/v1/auth/me", headers=headers)
    assert resp.json()["landlord"]["id"] == landlord["id"]


@pytest.mark.asyncio
async def test_missing_identity_and_landlord(session):
    with pytest.raises(Unauthenticated):
        await require_landlord(session, None)
    with pytest.raises(Unauthenticated):
        await load_context(session, None)
    with pytest.raises(NotFound):
        await get_landlord(session, uuid.uuid4())
    with pytest.raises(NotFound):
        await rename_landlord(session, uuid.uuid4(), "Ingen AB")


@pytest.mark.asyncio
async def test_require_landlord_provisions_then_renames(session):
    user = await _user(session, "namer@example.com")
    landlord_id = await require_landlord(session, user)
    assert await require_landlord(session, user) == landlord_id

    landlord = await rename_landlord(session, landlord_id, "  Hyresvärden AB ")
    assert landlord.org_name == "Hyresvärden AB"
    assert (await get_landlord(session, landlord_id)).org_name == "Hyresvärden AB"
