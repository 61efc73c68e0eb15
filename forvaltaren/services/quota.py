"""Plan quota checks for gated resources.

Every creation path for a gated resource calls ``enforce_quota`` before
writing. The check is advisory: two concurrent creations may both pass
and overshoot the ceiling by one.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import QuotaExceeded
from forvaltaren.core.plans import Plan, ResourceKind, limits_for
from forvaltaren.models.landlord import Landlord
from forvaltaren.models.member import LandlordMember
from forvaltaren.models.property import Property, Unit
from forvaltaren.models.tenant import Tenant


@dataclass(frozen=True)
class QuotaStatus:
    kind: ResourceKind
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


async def get_plan(session: AsyncSession, landlord_id: uuid.UUID) -> Plan:
    stmt = select(Landlord.plan).where(Landlord.id == landlord_id)
    plan = (await session.execute(stmt)).scalar_one_or_none()
    return plan or Plan.FREE


async def count_usage(
    session: AsyncSession, landlord_id: uuid.UUID, kind: ResourceKind
) -> int:
    if kind == ResourceKind.PROPERTIES:
        stmt = select(func.count()).select_from(Property).where(
            Property.landlord_id == landlord_id
        )
    elif kind == ResourceKind.UNITS:
        stmt = (
            select(func.count())
            .select_from(Unit)
            .join(Property, Unit.property_id == Property.id)
            .where(Property.landlord_id == landlord_id)
        )
    elif kind == ResourceKind.TENANTS:
        stmt = select(func.count()).select_from(Tenant).where(Tenant.landlord_id == landlord_id)
    else:
        stmt = select(func.count()).select_from(LandlordMember).where(
            LandlordMember.landlord_id == landlord_id
        )
    return (await session.execute(stmt)).scalar_one()


async def check_quota(
    session: AsyncSession, landlord_id: uuid.UUID, kind: ResourceKind
) -> QuotaStatus:
    plan = await get_plan(session, landlord_id)
    used = await count_usage(session, landlord_id, kind)
    return QuotaStatus(kind=kind, used=used, limit=limits_for(plan).ceiling(kind))


async def enforce_quota(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    kind: ResourceKind,
    adding: int = 1,
) -> QuotaStatus:
    status = await check_quota(session, landlord_id, kind)
    if status.used + adding > status.limit:
        raise QuotaExceeded(
            f"Plan limit reached for {kind.value}: {status.used} of {status.limit} used"
        )
    return status


async def usage_report(
    session: AsyncSession, landlord_id: uuid.UUID
) -> tuple[Plan, list[QuotaStatus]]:
    plan = await get_plan(session, landlord_id)
    limits = limits_for(plan)
    statuses = []
    for kind in ResourceKind:
        used = await count_usage(session, landlord_id, kind)
        statuses.append(QuotaStatus(kind=kind, used=used, limit=limits.ceiling(kind)))
    return plan, statuses
