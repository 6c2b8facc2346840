# sandfleet/models/telemetry.py
from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from sandfleet.db.base import Base, utcnow


class TelemetrySample(Base):
    """One GPS fix posted by a vehicle tracker. Append-only."""

    __tablename__ = "telemetry"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_number = Column(String(50), nullable=False, index=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    speed = Column(Float, nullable=True)
    ts = Column(DateTime, nullable=False, default=utcnow, index=True)


Index("ix_telemetry_vehicle_ts", TelemetrySample.vehicle_number, TelemetrySample.ts)
