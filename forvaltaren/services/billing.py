"""Billing provider client — subscription state, checkout and portal links.

The provider owns subscriptions and customers. Customers are keyed by
the landlord id (sent as ``external_customer_id`` at checkout), so the
only thing persisted locally is the plan id on the landlord row, kept in
sync by the provider's webhooks, which are handled elsewhere.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

import httpx

from forvaltaren.core.config import get_settings
from forvaltaren.core.errors import NotFound, UpstreamFailed, ValidationError
from forvaltaren.core.plans import PLAN_SLUGS, Plan

logger = logging.getLogger(__name__)

TIMEOUT = 10.0


@dataclass(frozen=True)
class SubscriptionState:
    plan: Plan
    current_period_end: datetime | None


def _headers() -> dict[str, str]:
    return {
        "Authorization": f"Bearer {get_settings().billing_api_token}",
        "Accept": "application/json",
    }


def _product_ids() -> dict[Plan, str]:
    settings = get_settings()
    return {
        Plan.BASIC: settings.billing_product_basic,
        Plan.PRO: settings.billing_product_pro,
    }


def plan_for_product(product_id: str | None) -> Plan:
    for plan, pid in _product_ids().items():
        if pid and pid == product_id:
            return plan
    return Plan.FREE


async def _request(method: str, path: str, **kwargs) -> dict:
    url = f"{get_settings().billing_api_url.rstrip('/')}{path}"
    try:
        async with httpx.AsyncClient(timeout=TIMEOUT) as client:
            resp = await client.request(method, url, headers=_headers(), **kwargs)
            resp.raise_for_status()
            return resp.json()
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == 404:
            raise NotFound("Billing account not found") from exc
        logger.warning("Billing provider call %s %s failed: %s", method, path, exc)
        raise UpstreamFailed() from exc
    except httpx.HTTPError as exc:
        logger.warning("Billing provider call %s %s failed: %s", method, path, exc)
        raise UpstreamFailed() from exc


async def get_subscription_state(landlord_id: uuid.UUID) -> SubscriptionState:
    """Current plan and period end; no active subscription means the FREE tier."""
    data = await _request(
        "GET",
        "/subscriptions/",
        params={"external_customer_id": str(landlord_id), "active": "true", "limit": 1},
    )
    items = data.get("items") or []
    if not items:
        return SubscriptionState(plan=Plan.FREE, current_period_end=None)

    sub = items[0]
    period_end = sub.get("current_period_end")
    return SubscriptionState(
        plan=plan_for_product(sub.get("product_id")),
        current_period_end=datetime.fromisoformat(period_end) if period_end else None,
    )


async def create_checkout_url(plan_slug: str, landlord_id: uuid.UUID) -> str:
    plan = PLAN_SLUGS.get(plan_slug.lower())
    product_id = _product_ids().get(plan) if plan else None
    if not product_id:
        raise ValidationError(f"Unknown plan '{plan_slug}'", field="plan")

    data = await _request(
        "POST",
        "/checkouts/",
        json={
            "products": [product_id],
            "success_url": get_settings().billing_checkout_success_url,
            "external_customer_id": str(landlord_id),
        },
    )
    return data["url"]


async def create_portal_url(landlord_id: uuid.UUID) -> str:
    try:
        data = await _request(
            "POST", "/customer-sessions/", json={"external_customer_id": str(landlord_id)}
        )
    except NotFound as exc:
        raise ValidationError("No billing account yet; start a checkout first") from exc
    return data["customer_portal_url"]
