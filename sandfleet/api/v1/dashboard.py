# sandfleet/api/v1/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sandfleet.core.auth import get_current_user
from sandfleet.crud.incident import list_incidents
from sandfleet.db.session import get_db
from sandfleet.models.incident import INCIDENT_STATUSES, OPEN_STATUSES, Incident
from sandfleet.models.user import User
from sandfleet.models.vehicle import VEHICLE_STATUSES, Vehicle
from sandfleet.schemas.incident import IncidentOut
from sandfleet.services.analytics import status_counts

router = APIRouter()

RECENT_INCIDENTS = 5


@router.get("/dashboard/summary")
def dashboard_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Stat cards for the landing page: vehicles per status, open incidents,
    incidents per status and the latest few reports.
    """
    vehicles = status_counts(db.query(Vehicle.status).all(), VEHICLE_STATUSES)
    incidents = status_counts(db.query(Incident.status).all(), INCIDENT_STATUSES)
    recent, _ = list_incidents(db, page=1, limit=RECENT_INCIDENTS)

    return {
        "totalVehicles": sum(vehicles.values()),
        "vehicles": vehicles,
        "activeIncidents": sum(incidents[s] for s in OPEN_STATUSES),
        "incidents": incidents,
        "recentIncidents": [
            IncidentOut.model_validate(r).model_dump(by_alias=True, mode="json") for r in recent
        ],
    }
