# sandfleet/schemas/telemetry.py
from datetime import datetime
from typing import Optional

from pydantic import Field, constr

from sandfleet.schemas.common import CamelModel, UtcDateTime


class TelemetryIn(CamelModel):
    """Position report posted by a tracker (`truckNumber`, `lat`, `lng` required)."""

    truck_number: constr(strip_whitespace=True, min_length=1, max_length=50)
    driver_name: Optional[str] = None
    owner_number: Optional[str] = None
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    speed: Optional[float] = None
    # ISO-8601 or epoch seconds/milliseconds
    ts: Optional[UtcDateTime] = None


class TelemetryAck(CamelModel):
    status: str = "ok"


class TelemetryOut(CamelModel):
    id: int
    vehicle_number: str
    lat: float
    lng: float
    speed: Optional[float] = None
    ts: datetime
