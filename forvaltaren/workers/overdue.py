"""Periodic job — flip unpaid invoices past their due date to OVERDUE."""

from __future__ import annotations

import logging

from forvaltaren.core.database import async_session_factory
from forvaltaren.services.invoicing import mark_overdue_invoices

logger = logging.getLogger(__name__)


async def sweep_overdue_invoices(ctx: dict) -> dict:
    """Run the overdue sweep across all landlords.

    Safe to re-run: invoices already OVERDUE or PAID are not touched.
    """
    async with async_session_factory() as session:
        updated = await mark_overdue_invoices(session)

    if updated:
        logger.info("Overdue sweep: %d invoices marked OVERDUE", updated)
    else:
        logger.info("Overdue sweep: nothing past due")
    return {"updated": updated}
