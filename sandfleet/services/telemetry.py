# sandfleet/services/telemetry.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sandfleet.core.errors import InternalError
from sandfleet.crud.telemetry import add_sample
from sandfleet.db.base import to_naive_utc
from sandfleet.schemas.telemetry import TelemetryIn
from sandfleet.services.broadcast import Broadcaster

log = logging.getLogger("sandfleet.telemetry")

TELEMETRY_TOPIC = "telemetry"


def ingest(
    db: Session,
    report: TelemetryIn,
    broadcaster: Broadcaster,
    *,
    received_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Persist one position report, then fan it out to live listeners.

    The stored sample uses the tracker's own `ts` when given, otherwise the receipt
    time. The broadcast always carries the server receipt time in epoch milliseconds.
    Nothing is published when the write fails.
    """
    received = received_at or datetime.now(timezone.utc)
    if received.tzinfo is None:
        received = received.replace(tzinfo=timezone.utc)

    sample_ts = report.ts or to_naive_utc(received)

    try:
        add_sample(
            db,
            vehicle_number=report.truck_number,
            lat=report.lat,
            lng=report.lng,
            speed=report.speed,
            ts=sample_ts,
        )
    except SQLAlchemyError:
        db.rollback()
        log.exception("telemetry write failed truck=%s", report.truck_number)
        raise InternalError("Failed to store telemetry")

    event = {
        "truckNumber": report.truck_number,
        "driverName": report.driver_name,
        "ownerNumber": report.owner_number,
        "lat": report.lat,
        "lng": report.lng,
        "speed": report.speed,
        "ts": int(received.timestamp() * 1000),
    }
    reached = broadcaster.publish(TELEMETRY_TOPIC, event)
    log.debug("telemetry truck=%s listeners=%s", report.truck_number, reached)
    return event
