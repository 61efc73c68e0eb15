"""Properties and units: creation under quota, listing with counts."""

import logging
import uuid

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from forvaltaren.core.errors import ValidationError
from forvaltaren.core.plans import ResourceKind
from forvaltaren.core.security import generate_intake_token
from forvaltaren.models.property import Property, PropertyRead, Unit
from forvaltaren.services.lookups import get_property
from forvaltaren.services.quota import enforce_quota

logger = logging.getLogger(__name__)


async def create_property(
    session: AsyncSession, landlord_id: uuid.UUID, name: str, address: str
) -> Property:
    await enforce_quota(session, landlord_id, ResourceKind.PROPERTIES)
    prop = Property(
        landlord_id=landlord_id,
        name=name.strip(),
        address=address.strip(),
        intake_token=generate_intake_token(),
    )
    session.add(prop)
    await session.commit()
    await session.refresh(prop)
    logger.info("Property %s created for landlord %s", prop.id, landlord_id)
    return prop


async def list_properties(session: AsyncSession, landlord_id: uuid.UUID) -> list[PropertyRead]:
    unit_count = func.count(Unit.id).label("unit_count")
    stmt = (
        select(Property, unit_count)
        .outerjoin(Unit, Unit.property_id == Property.id)
        .where(Property.landlord_id == landlord_id)
        .group_by(Property.id)
        .order_by(Property.created_at.desc())  # type: ignore[union-attr]
    )
    rows = (await session.execute(stmt)).all()
    return [
        PropertyRead.model_validate(p).model_copy(update={"unit_count": n})
        for p, n in rows
    ]


async def list_units(
    session: AsyncSession,
    landlord_id: uuid.UUID,
    property_id: uuid.UUID | None = None,
) -> list[Unit]:
    stmt = (
        select(Unit)
        .join(Property, Unit.property_id == Property.id)
        .where(Property.landlord_id == landlord_id)
        .order_by(Unit.label.asc())  # type: ignore[union-attr]
    )
    if property_id is not None:
        stmt = stmt.where(Unit.property_id == property_id)
    return list((await session.execute(stmt)).scalars().all())


async def _existing_labels(session: AsyncSession, property_id: uuid.UUID) -> set[str]:
    stmt = select(Unit.label).where(Unit.property_id == property_id)
    return {label.lower() for label in (await session.execute(stmt)).scalars().all()}


async def _commit_units(session: AsyncSession, property_id: uuid.UUID) -> None:
    try:
        await session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent insert of the same label
        await session.rollback()
        logger.warning("Duplicate unit label on property %s", property_id)
        raise ValidationError("A unit with this label already exists", field="label") from exc


async def create_unit(
    session: AsyncSession, landlord_id: uuid.UUID, property_id: uuid.UUID, label: str
) -> Unit:
    prop = await get_property(session, landlord_id, property_id)
    label = label.strip()
    if not label:
        raise ValidationError("Label is required", field="label")
    if label.lower() in await _existing_labels(session, prop.id):
        raise ValidationError("A unit with this label already exists", field="label")
    await enforce_quota(session, landlord_id, ResourceKind.UNITS)

    unit = Unit(property_id=prop.id, label=label)
    session.add(unit)
    await _commit_units(session, prop.id)
    await session.refresh(unit)
    return unit


def parse_labels(raw: str) -> list[str]:
    """One label per line; blanks dropped, repeats (case-insensitive) kept once."""
    seen: set[str] = set()
    labels = []
    for line in raw.splitlines():
        label = line.strip()
        if not label or label.lower() in seen:
            continue
        seen.add(label.lower())
        labels.append(label)
    return labels


async def bulk_create_units(
    session: AsyncSession, landlord_id: uuid.UUID, property_id: uuid.UUID, raw_labels: str
) -> tuple[list[Unit], list[str]]:
    """Create every label not already on the property; returns (created, skipped)."""
    prop = await get_property(session, landlord_id, property_id)
    labels = parse_labels(raw_labels)
    if not labels:
        raise ValidationError("Enter at least one label", field="labels")

    existing = await _existing_labels(session, prop.id)
    fresh = [label for label in labels if label.lower() not in existing]
    skipped = [label for label in labels if label.lower() in existing]
    if not fresh:
        return [], skipped

    # Only the labels actually inserted count against the plan
    await enforce_quota(session, landlord_id, ResourceKind.UNITS, adding=len(fresh))

    units = [Unit(property_id=prop.id, label=label) for label in fresh]
    session.add_all(units)
    await _commit_units(session, prop.id)
    for unit in units:
        await session.refresh(unit)
    logger.info("Bulk-created %d units on property %s (%d skipped)", len(units), prop.id, len(skipped))
    return units, skipped
