# sandfleet/schemas/vehicle.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field, confloat, constr

from sandfleet.schemas.common import CamelModel, Pagination, UtcDateTime

VehicleType = Literal["truck", "dumper", "trailer", "tipper", "other"]
VehicleStatus = Literal["active", "suspended", "flagged", "inactive"]


class VehicleBase(CamelModel):
    """
    Fields shared by create and read models.
    """

    vehicle_number: constr(strip_whitespace=True, min_length=1, max_length=20) = Field(
        ..., description="Registration plate, unique across the fleet"
    )
    vehicle_type: VehicleType
    capacity_tons: Optional[confloat(ge=0)] = None
    gps_number: Optional[constr(strip_whitespace=True, max_length=50)] = None
    gps_id: Optional[constr(strip_whitespace=True, max_length=50)] = None

    owner_name: constr(strip_whitespace=True, min_length=1, max_length=255)
    owner_phone: constr(strip_whitespace=True, min_length=1, max_length=20)
    owner_address: constr(strip_whitespace=True, min_length=1)
    license_number: Optional[constr(strip_whitespace=True, max_length=50)] = None

    registration_date: date
    notes: Optional[str] = None


class VehicleCreate(VehicleBase):
    status: VehicleStatus = Field(default="active", description="Initial status")


class VehicleUpdate(CamelModel):
    """
    Partial update payload. Only fields present in the request are applied.
    """

    vehicle_number: Optional[constr(strip_whitespace=True, min_length=1, max_length=20)] = None
    vehicle_type: Optional[VehicleType] = None
    capacity_tons: Optional[confloat(ge=0)] = None
    gps_number: Optional[constr(strip_whitespace=True, max_length=50)] = None
    gps_id: Optional[constr(strip_whitespace=True, max_length=50)] = None
    owner_name: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    owner_phone: Optional[constr(strip_whitespace=True, min_length=1, max_length=20)] = None
    owner_address: Optional[constr(strip_whitespace=True, min_length=1)] = None
    license_number: Optional[constr(strip_whitespace=True, max_length=50)] = None
    registration_date: Optional[date] = None
    status: Optional[VehicleStatus] = None
    last_activity: Optional[UtcDateTime] = None
    notes: Optional[str] = None


class VehicleStatusUpdate(CamelModel):
    status: VehicleStatus


class VehicleOut(VehicleBase):
    id: int
    status: VehicleStatus
    last_activity: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class VehicleList(CamelModel):
    vehicles: List[VehicleOut]
    pagination: Pagination
