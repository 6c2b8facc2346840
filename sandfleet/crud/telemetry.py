# sandfleet/crud/telemetry.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from sandfleet.models.telemetry import TelemetrySample


def add_sample(
    db: Session,
    *,
    vehicle_number: str,
    lat: float,
    lng: float,
    speed: Optional[float],
    ts: datetime,
) -> TelemetrySample:
    obj = TelemetrySample(vehicle_number=vehicle_number, lat=lat, lng=lng, speed=speed, ts=ts)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def recent_samples(
    db: Session, *, vehicle_number: Optional[str] = None, limit: int = 50
) -> List[TelemetrySample]:
    q = db.query(TelemetrySample)
    if vehicle_number:
        q = q.filter(TelemetrySample.vehicle_number == vehicle_number)
    return q.order_by(TelemetrySample.ts.desc(), TelemetrySample.id.desc()).limit(limit).all()


def latest_ts_by_vehicle(db: Session) -> List[tuple]:
    """[(vehicle_number, newest ts)] across all samples."""
    return (
        db.query(TelemetrySample.vehicle_number, func.max(TelemetrySample.ts))
        .group_by(TelemetrySample.vehicle_number)
        .all()
    )
