# sandfleet/api/v1/telemetry.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sandfleet.core.auth import get_current_user
from sandfleet.crud.telemetry import recent_samples
from sandfleet.db.session import get_db
from sandfleet.models.user import User
from sandfleet.schemas.telemetry import TelemetryAck, TelemetryIn, TelemetryOut
from sandfleet.services.broadcast import hub
from sandfleet.services.telemetry import ingest

router = APIRouter(prefix="/telemetry", tags=["telemetry"])


@router.post("", response_model=TelemetryAck)
def post_telemetry(report: TelemetryIn, db: Session = Depends(get_db)):
    # Trackers post without a session token
    ingest(db, report, hub)
    return TelemetryAck()


@router.get("", response_model=List[TelemetryOut])
def list_telemetry(
    vehicle_number: Optional[str] = Query(None, alias="vehicleNumber"),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Most recent samples, newest first. Used to seed the live map before the socket connects."""
    return recent_samples(db, vehicle_number=vehicle_number, limit=limit)
