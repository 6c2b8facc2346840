# sandfleet/models/vehicle.py
from sqlalchemy import Column, Date, DateTime, Float, Index, Integer, String, Text

from sandfleet.db.base import Base, utcnow

# Allowed values (app-level validation; DB keeps plain strings)
VEHICLE_STATUSES = ("active", "suspended", "flagged", "inactive")


class Vehicle(Base):
    """
    Registered sand-transport vehicle.

    `vehicle_number` is the registration plate and is unique across the fleet.
    capacity / GPS columns come from the registration form and are optional.
    """

    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)

    vehicle_number = Column(String(20), nullable=False, unique=True)
    vehicle_type = Column(String(20), nullable=False, index=True)

    # Registration form extras
    capacity_tons = Column(Float, nullable=True)
    gps_number = Column(String(50), nullable=True)
    gps_id = Column(String(50), nullable=True)

    # Owner
    owner_name = Column(String(255), nullable=False, index=True)
    owner_phone = Column(String(20), nullable=False)
    owner_address = Column(Text, nullable=False)
    license_number = Column(String(50), nullable=True)

    registration_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="active", index=True)
    last_activity = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return (
            f"<Vehicle id={self.id} number={self.vehicle_number!r} "
            f"type={self.vehicle_type!r} status={self.status!r}>"
        )


Index("ix_vehicles_status_type", Vehicle.status, Vehicle.vehicle_type)
