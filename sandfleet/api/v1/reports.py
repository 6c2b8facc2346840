# sandfleet/api/v1/reports.py
import re
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sandfleet.api.v1.analytics import attachment
from sandfleet.core.auth import get_current_user
from sandfleet.core.errors import NotFoundError, ValidationError
from sandfleet.crud.incident import all_incidents
from sandfleet.crud.vehicle import all_vehicles
from sandfleet.db.session import get_db
from sandfleet.models.user import User
from sandfleet.services.reports.text_report import (
    SECTIONS,
    TEMPLATES,
    render_custom_report,
    render_template,
    report_filename,
    template_catalog,
)

router = APIRouter(prefix="/reports", tags=["reports"])


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-") or "custom-report"


@router.get("")
def list_templates(current_user: User = Depends(get_current_user)):
    return {"templates": template_catalog(), "sections": list(SECTIONS)}


@router.get("/custom")
def custom_report(
    name: str = Query("custom-report"),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    sections: str = Query("vehicles,incidents", description="Comma separated: vehicles, incidents, compliance"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    wanted = [s.strip().lower() for s in sections.split(",") if s.strip()]
    bad = [s for s in wanted if s not in SECTIONS]
    if not wanted or bad:
        raise ValidationError(
            "Unknown or empty report sections.",
            details=[{"loc": ["query", "sections"], "msg": f"Allowed: {', '.join(SECTIONS)}", "type": "value_error"}],
        )
    if date_from and date_to and date_from > date_to:
        raise ValidationError(
            "From date must not be after to date.",
            details=[{"loc": ["query", "from"], "msg": "Must be on or before to", "type": "value_error"}],
        )

    content = render_custom_report(
        all_vehicles(db), all_incidents(db), start=date_from, end=date_to, sections=wanted
    )
    return attachment(content, report_filename(_slug(name), date.today()))


@router.get("/{template}")
def template_report(
    template: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if template not in TEMPLATES:
        raise NotFoundError(f"Unknown report template: {template}")
    filename, content = render_template(
        template, all_vehicles(db), all_incidents(db), today=date.today()
    )
    return attachment(content, filename)
