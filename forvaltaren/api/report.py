"""Anonymous report form behind a property's intake token.

No authentication: the token in the URL is the capability. Form posts
answer with 303 redirects so a browser never re-submits on refresh.
"""

import uuid
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Form
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from forvaltaren.api.deps import Session
from forvaltaren.core.errors import NotFound, ValidationError
from forvaltaren.models.property import UnitRead
from forvaltaren.services import tickets

router = APIRouter(prefix="/report", tags=["public"])


class ReportForm(BaseModel):
    property_name: str
    units: list[UnitRead]
    error: str | None = None


class ReportStatus(BaseModel):
    status: str
    message: str


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get("/sent", response_model=ReportStatus)
async def report_sent() -> ReportStatus:
    return ReportStatus(status="sent", message="Tack! Din felanmälan är mottagen.")


@router.get("/invalid", response_model=ReportStatus)
async def report_invalid() -> ReportStatus:
    return ReportStatus(status="invalid", message="Länken är ogiltig eller har upphört.")


@router.get("/{token}", response_model=ReportForm)
async def report_form(token: str, session: Session, err: str | None = None) -> ReportForm:
    prop = await tickets.get_property_by_token(session, token)
    units = await tickets.list_property_units(session, prop.id)
    return ReportForm(
        property_name=prop.name,
        units=[UnitRead.model_validate(u) for u in units],
        error=err,
    )


@router.post("/{token}")
async def submit_report(
    token: str,
    session: Session,
    title: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    unit_id: Annotated[str, Form()] = "",
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    phone: Annotated[str, Form()] = "",
) -> RedirectResponse:
    try:
        parsed_unit = uuid.UUID(unit_id) if unit_id.strip() else None
    except ValueError:
        return _see_other(f"/report/{token}?err=unit_id")

    try:
        await tickets.public_create_ticket(
            session,
            token,
            title=title,
            description=description,
            unit_id=parsed_unit,
            contact_name=name.strip() or None,
            contact_email=email.strip() or None,
            contact_phone=phone.strip() or None,
        )
    except NotFound:
        return _see_other("/report/invalid")
    except ValidationError as exc:
        return _see_other(f"/report/{token}?err={quote(exc.field or 'form')}")
    return _see_other("/report/sent")
