# sandfleet/models/incident.py
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)

from sandfleet.db.base import Base, utcnow

INCIDENT_STATUSES = ("reported", "investigating", "resolved", "closed")

# Statuses that still need an officer's attention
OPEN_STATUSES = ("reported", "investigating")


class Incident(Base):
    """
    Field incident reported against a vehicle.

    NOTE:
    - vehicle_id is deliberately NOT a declared foreign key. An incident may cite a
      plate that has no record yet, and deleting a vehicle leaves its incidents in place.
    - Status transitions are free-form; any allowed value can be set at any time.
    """

    __tablename__ = "incidents"

    id = Column(Integer, primary_key=True, autoincrement=True)

    vehicle_id = Column(Integer, nullable=True, index=True)
    vehicle_number = Column(String(20), nullable=True, index=True)

    # Classification
    incident_type = Column(String(30), nullable=False, index=True)
    severity = Column(String(20), nullable=False, default="medium", index=True)

    # Content
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    incident_date = Column(DateTime, nullable=False, default=utcnow, index=True)

    # Workflow
    status = Column(String(20), nullable=False, default="reported", index=True)
    reported_by = Column(String(255), nullable=False, index=True)
    assigned_to = Column(String(255), nullable=True)
    resolution_notes = Column(Text, nullable=True)
    evidence_files = Column(JSON, nullable=True)
    estimated_damage = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Audit
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return (
            f"<Incident id={self.id} vehicle={self.vehicle_number!r} "
            f"type={self.incident_type!r} status={self.status!r}>"
        )


Index("ix_incidents_status_severity", Incident.status, Incident.severity)
