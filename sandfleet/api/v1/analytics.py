# sandfleet/api/v1/analytics.py
from datetime import date
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from sandfleet.core.auth import get_current_user
from sandfleet.core.errors import ValidationError
from sandfleet.crud.incident import all_incidents
from sandfleet.crud.vehicle import all_vehicles
from sandfleet.db.session import get_db
from sandfleet.models.user import User
from sandfleet.services.analytics import build_analytics
from sandfleet.services.reports.text_report import (
    months_ago,
    render_analytics_report,
    report_filename,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])

DEFAULT_MONTHS = 6


def resolve_range(start: Optional[date], end: Optional[date], *, today: date) -> Tuple[date, date]:
    end = end or today
    start = start or months_ago(end, DEFAULT_MONTHS)
    if start > end:
        raise ValidationError(
            "Start date must not be after end date.",
            details=[{"loc": ["query", "start"], "msg": "Must be on or before end", "type": "value_error"}],
        )
    return start, end


def attachment(content: str, filename: str) -> PlainTextResponse:
    return PlainTextResponse(
        content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
def analytics(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    start, end = resolve_range(start, end, today=date.today())
    return build_analytics(all_vehicles(db), all_incidents(db), start, end)


@router.get("/export")
def export_analytics(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    today = date.today()
    start, end = resolve_range(start, end, today=today)
    data = build_analytics(all_vehicles(db), all_incidents(db), start, end)
    return attachment(
        render_analytics_report(data) + "\n", report_filename("analytics-report", today)
    )
