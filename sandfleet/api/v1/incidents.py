# sandfleet/api/v1/incidents.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from sandfleet.core.auth import get_current_user
from sandfleet.core.rbac import require_writer
from sandfleet.crud import incident as crud
from sandfleet.crud.common import DEFAULT_LIMIT, DEFAULT_PAGE
from sandfleet.db.session import get_db
from sandfleet.models.user import User
from sandfleet.schemas.common import Pagination
from sandfleet.schemas.incident import (
    IncidentCreate,
    IncidentList,
    IncidentOut,
    IncidentStatus,
    IncidentType,
    IncidentUpdate,
    Severity,
)

router = APIRouter(prefix="/incidents", tags=["incidents"])

log = logging.getLogger("sandfleet.request")


@router.get("", response_model=IncidentList)
def list_incidents(
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_LIMIT),
    search: Optional[str] = Query(None, description="Plate, location or description"),
    status_f: Optional[IncidentStatus] = Query(None, alias="status"),
    severity: Optional[Severity] = Query(None),
    incident_type: Optional[IncidentType] = Query(None, alias="incidentType"),
    vehicle_id: Optional[int] = Query(None, alias="vehicleId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows, total = crud.list_incidents(
        db,
        page=page,
        limit=limit,
        search=search,
        status=status_f,
        severity=severity,
        incident_type=incident_type,
        vehicle_id=vehicle_id,
    )
    return IncidentList(
        incidents=[IncidentOut.model_validate(r) for r in rows],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("", response_model=IncidentOut, status_code=status.HTTP_201_CREATED)
def create_incident(
    payload: IncidentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    """
    Report a new incident. `vehicleId` is not checked against the fleet;
    reports about unregistered plates are accepted as-is.
    """
    obj = crud.create_incident(db, payload)
    log.info(
        "incident created id=%s type=%s severity=%s by=%s",
        obj.id,
        obj.incident_type,
        obj.severity,
        current_user.id,
    )
    return obj


@router.get("/{incident_id}", response_model=IncidentOut)
def get_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_incident_or_404(db, incident_id)


@router.put("/{incident_id}", response_model=IncidentOut)
def update_incident(
    incident_id: int,
    payload: IncidentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    obj = crud.get_incident_or_404(db, incident_id)
    before_status = obj.status
    obj = crud.update_incident(db, obj, payload)
    if before_status != obj.status:
        log.info("incident %s status %s -> %s", obj.id, before_status, obj.status)
    return obj


@router.delete("/{incident_id}")
def delete_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    obj = crud.get_incident_or_404(db, incident_id)
    crud.delete_incident(db, obj)
    log.info("incident deleted id=%s by=%s", incident_id, current_user.id)
    return {"ok": True, "message": "Incident deleted"}
