# sandfleet/crud/incident.py
from typing import List, Optional, Tuple

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from sandfleet.core.errors import NotFoundError, ValidationError, field_error
from sandfleet.crud.common import DEFAULT_LIMIT, DEFAULT_PAGE, apply_search, check_pagination, paginate
from sandfleet.db.base import utcnow
from sandfleet.models.incident import Incident
from sandfleet.schemas.incident import IncidentCreate, IncidentUpdate

MAX_LIMIT = 200

_REQUIRED = {
    "incident_type",
    "description",
    "location",
    "incident_date",
    "severity",
    "status",
    "reported_by",
}


def get_incident(db: Session, incident_id: int) -> Optional[Incident]:
    return db.get(Incident, incident_id)


def get_incident_or_404(db: Session, incident_id: int) -> Incident:
    obj = get_incident(db, incident_id)
    if obj is None:
        raise NotFoundError("Incident not found")
    return obj


def list_incidents(
    db: Session,
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    search: Optional[str] = None,
    status: Optional[str] = None,
    severity: Optional[str] = None,
    incident_type: Optional[str] = None,
    vehicle_id: Optional[int] = None,
) -> Tuple[List[Incident], int]:
    check_pagination(page, limit, max_limit=MAX_LIMIT)

    q = db.query(Incident)
    if status:
        q = q.filter(Incident.status == status)
    if severity:
        q = q.filter(Incident.severity == severity)
    if incident_type:
        q = q.filter(Incident.incident_type == incident_type)
    if vehicle_id is not None:
        q = q.filter(Incident.vehicle_id == vehicle_id)
    q = apply_search(q, search, (Incident.vehicle_number, Incident.location, Incident.description))

    return paginate(
        q, page=page, limit=limit, order_by=(Incident.created_at.desc(), Incident.id.asc())
    )


def all_incidents(db: Session) -> List[Incident]:
    return db.query(Incident).order_by(Incident.created_at.desc(), Incident.id.asc()).all()


def create_incident(db: Session, payload: IncidentCreate) -> Incident:
    data = payload.model_dump()
    now = utcnow()
    if data.get("incident_date") is None:
        data["incident_date"] = now
    obj = Incident(**data, created_at=now, updated_at=now)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_incident(db: Session, obj: Incident, payload: IncidentUpdate) -> Incident:
    data = payload.model_dump(exclude_unset=True)

    cleared = sorted(k for k, v in data.items() if v is None and k in _REQUIRED)
    if cleared:
        raise ValidationError(
            "Required fields cannot be null.",
            details=[field_error(to_camel(k), "Field is required") for k in cleared],
        )

    for k, v in data.items():
        setattr(obj, k, v)
    obj.updated_at = utcnow()

    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_incident(db: Session, obj: Incident) -> None:
    db.delete(obj)
    db.commit()
