"""Centralized subscription plan limits.

Maps each plan to the ceilings enforced by ``services.quota`` and
exposed via GET /v1/usage.
"""

from dataclasses import dataclass
from enum import StrEnum


class Plan(StrEnum):
    FREE = "FREE"
    BASIC = "BASIC"
    PRO = "PRO"


class ResourceKind(StrEnum):
    PROPERTIES = "properties"
    UNITS = "units"
    TENANTS = "tenants"
    MEMBERS = "members"


@dataclass(frozen=True)
class PlanLimits:
    max_properties: int
    max_units: int
    max_tenants: int
    max_members: int

    def ceiling(self, kind: ResourceKind) -> int:
        return getattr(self, f"max_{kind.value}")


PLAN_LIMITS: dict[Plan, PlanLimits] = {
    Plan.FREE:  PlanLimits(max_properties=1,   max_units=5,   max_tenants=5,   max_members=1),
    Plan.BASIC: PlanLimits(max_properties=10,  max_units=50,  max_tenants=50,  max_members=5),
    Plan.PRO:   PlanLimits(max_properties=100, max_units=500, max_tenants=500, max_members=25),
}

# Checkout slugs offered by the billing provider
PLAN_SLUGS: dict[str, Plan] = {
    "basic": Plan.BASIC,
    "pro": Plan.PRO,
}


def limits_for(plan: Plan | str) -> PlanLimits:
    """Return the limits for a plan; unknown identifiers fall back to FREE."""
    try:
        return PLAN_LIMITS[Plan(plan)]
    except ValueError:
        return PLAN_LIMITS[Plan.FREE]
