# sandfleet/api/v1/vehicles.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from sandfleet.core.auth import get_current_user
from sandfleet.core.rbac import require_writer
from sandfleet.crud import vehicle as crud
from sandfleet.crud.common import DEFAULT_LIMIT, DEFAULT_PAGE
from sandfleet.db.session import get_db
from sandfleet.models.user import User
from sandfleet.schemas.common import Pagination
from sandfleet.schemas.vehicle import (
    VehicleCreate,
    VehicleList,
    VehicleOut,
    VehicleStatus,
    VehicleStatusUpdate,
    VehicleType,
    VehicleUpdate,
)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])

log = logging.getLogger("sandfleet.request")


# ---------------------------
# LIST / FILTER
# ---------------------------
@router.get("", response_model=VehicleList)
def list_vehicles(
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_LIMIT),
    search: Optional[str] = Query(None, description="Plate, owner name or phone"),
    status_f: Optional[VehicleStatus] = Query(None, alias="status"),
    vehicle_type: Optional[VehicleType] = Query(None, alias="vehicleType"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows, total = crud.list_vehicles(
        db,
        page=page,
        limit=limit,
        search=search,
        status=status_f,
        vehicle_type=vehicle_type,
    )
    return VehicleList(
        vehicles=[VehicleOut.model_validate(r) for r in rows],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


# ---------------------------
# CREATE
# ---------------------------
@router.post("", response_model=VehicleOut, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    payload: VehicleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    obj = crud.create_vehicle(db, payload)
    log.info("vehicle created id=%s number=%s by=%s", obj.id, obj.vehicle_number, current_user.id)
    return obj


# ---------------------------
# READ (by id)
# ---------------------------
@router.get("/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_vehicle_or_404(db, vehicle_id)


# ---------------------------
# UPDATE
# ---------------------------
@router.put("/{vehicle_id}", response_model=VehicleOut)
def update_vehicle(
    vehicle_id: int,
    payload: VehicleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    obj = crud.get_vehicle_or_404(db, vehicle_id)
    return crud.update_vehicle(db, obj, payload)


@router.put("/{vehicle_id}/status", response_model=VehicleOut)
def update_vehicle_status(
    vehicle_id: int,
    payload: VehicleStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    obj = crud.get_vehicle_or_404(db, vehicle_id)
    before = obj.status
    obj = crud.set_vehicle_status(db, obj, payload.status)
    log.info("vehicle %s status %s -> %s by=%s", obj.id, before, obj.status, current_user.id)
    return obj


# ---------------------------
# DELETE
# ---------------------------
@router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_writer),
):
    obj = crud.get_vehicle_or_404(db, vehicle_id)
    crud.delete_vehicle(db, obj)
    log.info("vehicle deleted id=%s by=%s", vehicle_id, current_user.id)
    return {"ok": True, "message": "Vehicle deleted"}
