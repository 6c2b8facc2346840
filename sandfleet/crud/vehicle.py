# sandfleet/crud/vehicle.py
from typing import List, Optional, Tuple

from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sandfleet.core.errors import ConflictError, NotFoundError, ValidationError, field_error
from sandfleet.crud.common import DEFAULT_LIMIT, DEFAULT_PAGE, apply_search, check_pagination, paginate
from sandfleet.db.base import utcnow
from sandfleet.models.vehicle import VEHICLE_STATUSES, Vehicle
from sandfleet.schemas.vehicle import VehicleCreate, VehicleUpdate

MAX_LIMIT = 100

# Columns that may never be cleared by a partial update
_REQUIRED = {
    "vehicle_number",
    "vehicle_type",
    "owner_name",
    "owner_phone",
    "owner_address",
    "registration_date",
    "status",
}


# --- Read helpers -------------------------------------------------------------

def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
    return db.get(Vehicle, vehicle_id)


def get_vehicle_or_404(db: Session, vehicle_id: int) -> Vehicle:
    obj = get_vehicle(db, vehicle_id)
    if obj is None:
        raise NotFoundError("Vehicle not found")
    return obj


def get_vehicle_by_number(db: Session, vehicle_number: str) -> Optional[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.vehicle_number == vehicle_number).first()


def list_vehicles(
    db: Session,
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    search: Optional[str] = None,
    status: Optional[str] = None,
    vehicle_type: Optional[str] = None,
) -> Tuple[List[Vehicle], int]:
    check_pagination(page, limit, max_limit=MAX_LIMIT)

    q = db.query(Vehicle)
    if status:
        q = q.filter(Vehicle.status == status)
    if vehicle_type:
        q = q.filter(Vehicle.vehicle_type == vehicle_type)
    q = apply_search(q, search, (Vehicle.vehicle_number, Vehicle.owner_name, Vehicle.owner_phone))

    return paginate(
        q, page=page, limit=limit, order_by=(Vehicle.created_at.desc(), Vehicle.id.asc())
    )


def all_vehicles(db: Session) -> List[Vehicle]:
    """Whole fleet, newest first. Feeds analytics and exports."""
    return db.query(Vehicle).order_by(Vehicle.created_at.desc(), Vehicle.id.asc()).all()


# --- Create / Update / Delete ------------------------------------------------

def _ensure_number_free(db: Session, vehicle_number: str, *, exclude_id: Optional[int] = None) -> None:
    q = db.query(Vehicle.id).filter(Vehicle.vehicle_number == vehicle_number)
    if exclude_id is not None:
        q = q.filter(Vehicle.id != exclude_id)
    if q.first() is not None:
        raise ConflictError(f"Vehicle with number {vehicle_number} already exists")


def _commit(db: Session, obj: Vehicle) -> Vehicle:
    try:
        db.commit()
    except IntegrityError:
        # unique index caught a concurrent writer between lookup and commit
        db.rollback()
        raise ConflictError(f"Vehicle with number {obj.vehicle_number} already exists")
    db.refresh(obj)
    return obj


def create_vehicle(db: Session, payload: VehicleCreate) -> Vehicle:
    _ensure_number_free(db, payload.vehicle_number)

    now = utcnow()
    obj = Vehicle(**payload.model_dump(), created_at=now, updated_at=now)
    db.add(obj)
    return _commit(db, obj)


def update_vehicle(db: Session, obj: Vehicle, payload: VehicleUpdate) -> Vehicle:
    # only fields sent by the client
    data = payload.model_dump(exclude_unset=True)

    cleared = sorted(k for k, v in data.items() if v is None and k in _REQUIRED)
    if cleared:
        raise ValidationError(
            "Required fields cannot be null.",
            details=[field_error(to_camel(k), "Field is required") for k in cleared],
        )

    new_number = data.get("vehicle_number")
    if new_number and new_number != obj.vehicle_number:
        _ensure_number_free(db, new_number, exclude_id=obj.id)

    for k, v in data.items():
        setattr(obj, k, v)
    obj.updated_at = utcnow()

    db.add(obj)
    return _commit(db, obj)


def set_vehicle_status(db: Session, obj: Vehicle, status: str) -> Vehicle:
    if status not in VEHICLE_STATUSES:
        raise ValidationError(details=[field_error("status", "Invalid status")])
    obj.status = status
    obj.updated_at = utcnow()
    db.add(obj)
    return _commit(db, obj)


def delete_vehicle(db: Session, obj: Vehicle) -> None:
    # Incidents keep their vehicle_id; orphaned references are tolerated.
    db.delete(obj)
    db.commit()
