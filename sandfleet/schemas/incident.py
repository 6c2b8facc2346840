# sandfleet/schemas/incident.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, confloat, conint, constr

from sandfleet.schemas.common import CamelModel, Pagination, UtcDateTime

# Allowed enums
IncidentType = Literal["violation", "accident", "overloading", "illegal_mining", "other"]
IncidentStatus = Literal["reported", "investigating", "resolved", "closed"]
Severity = Literal["low", "medium", "high", "critical"]


class IncidentBase(CamelModel):
    """
    Base schema for incidents.
    """

    vehicle_id: Optional[conint(ge=1)] = Field(
        default=None, description="Vehicle record, if the plate is already registered"
    )
    vehicle_number: Optional[constr(strip_whitespace=True, max_length=20)] = Field(
        default=None, description="Plate as written in the report"
    )
    incident_type: IncidentType
    description: constr(strip_whitespace=True, min_length=1)
    location: constr(strip_whitespace=True, min_length=1, max_length=255)
    incident_date: Optional[UtcDateTime] = Field(
        default=None, description="When it happened; defaults to the time of reporting"
    )
    severity: Severity = "medium"
    status: IncidentStatus = "reported"
    reported_by: constr(strip_whitespace=True, min_length=1, max_length=255)
    assigned_to: Optional[constr(strip_whitespace=True, max_length=255)] = None
    resolution_notes: Optional[str] = None
    evidence_files: Optional[List[str]] = None
    estimated_damage: Optional[confloat(ge=0)] = None


class IncidentCreate(IncidentBase):
    pass


class IncidentUpdate(CamelModel):
    """
    Partial update payload. All fields optional; any status may follow any other.
    """

    vehicle_id: Optional[conint(ge=1)] = None
    vehicle_number: Optional[constr(strip_whitespace=True, max_length=20)] = None
    incident_type: Optional[IncidentType] = None
    description: Optional[constr(strip_whitespace=True, min_length=1)] = None
    location: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    incident_date: Optional[UtcDateTime] = None
    severity: Optional[Severity] = None
    status: Optional[IncidentStatus] = None
    reported_by: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    assigned_to: Optional[constr(strip_whitespace=True, max_length=255)] = None
    resolution_notes: Optional[str] = None
    evidence_files: Optional[List[str]] = None
    estimated_damage: Optional[confloat(ge=0)] = None


class IncidentOut(IncidentBase):
    """
    Read model returned by the API.
    """

    id: int
    incident_date: datetime
    created_at: datetime
    updated_at: datetime


class IncidentList(CamelModel):
    incidents: List[IncidentOut]
    pagination: Pagination
