# sandfleet/scripts/seed.py
"""
Development seed: department accounts plus a couple of sample vehicles and incidents.
Safe to run multiple times (idempotent on email / plate / description).

    python -m sandfleet.scripts.seed
"""
import logging
import os
from datetime import date, datetime

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

from sqlalchemy.orm import Session  # noqa: E402

from sandfleet.core.logging_config import configure_logging  # noqa: E402
from sandfleet.crud.user import create_user, get_user_by_email  # noqa: E402
from sandfleet.crud.vehicle import get_vehicle_by_number  # noqa: E402
from sandfleet.db.session import SessionLocal, engine  # noqa: E402
from sandfleet.models import Base  # noqa: E402
from sandfleet.models.incident import Incident  # noqa: E402
from sandfleet.models.user import User  # noqa: E402
from sandfleet.models.vehicle import Vehicle  # noqa: E402

log = logging.getLogger("sandfleet.seed")

VEHICLES = [
    {
        "vehicle_number": "KA01AB1234",
        "vehicle_type": "truck",
        "capacity_tons": 15,
        "gps_number": "GPS-0001",
        "gps_id": "A1B2C3",
        "owner_name": "Rajesh Kumar",
        "owner_phone": "+91 9876543210",
        "owner_address": "123 Main Street, Bangalore, Karnataka",
        "license_number": "DL123456789",
        "registration_date": date(2024, 1, 15),
        "status": "active",
        "created_at": datetime(2024, 1, 15, 8, 0),
    },
    {
        "vehicle_number": "MH02CD5678",
        "vehicle_type": "dumper",
        "capacity_tons": 20,
        "gps_number": "GPS-0002",
        "gps_id": "D4E5F6",
        "owner_name": "Priya Sharma",
        "owner_phone": "+91 9876543211",
        "owner_address": "456 Park Avenue, Mumbai, Maharashtra",
        "registration_date": date(2024, 1, 10),
        "status": "active",
        "created_at": datetime(2024, 1, 10, 9, 0),
    },
]

INCIDENTS = [
    {
        "plate": "KA01AB1234",
        "incident_type": "overloading",
        "description": "Vehicle found carrying 20 tons of sand, exceeding permitted limit",
        "location": "Highway NH-48, Checkpoint 3",
        "reported_by": "Officer Sharma",
        "severity": "high",
        "status": "investigating",
        "created_at": datetime(2024, 1, 15),
    },
    {
        "plate": "MH02CD5678",
        "incident_type": "violation",
        "description": "Vehicle detected on restricted mining route without proper authorization",
        "location": "Restricted Zone A, Sector 7",
        "reported_by": "Officer Patel",
        "severity": "critical",
        "status": "reported",
        "created_at": datetime(2024, 1, 14),
    },
    {
        "plate": "KA03EF9012",
        "incident_type": "violation",
        "description": "Expired mining permit found during routine inspection",
        "location": "Mining Site B, Gate 2",
        "reported_by": "Inspector Kumar",
        "severity": "medium",
        "status": "resolved",
        "created_at": datetime(2024, 1, 13),
    },
]


def ensure_user(db: Session, email: str, password: str, role: str, full_name: str) -> User:
    user = get_user_by_email(db, email)
    if user:
        return user
    log.info("creating %s account %s", role, email)
    return create_user(db, email=email, password=password, role=role, full_name=full_name)


def seed_vehicles(db: Session) -> dict:
    by_plate = {}
    for row in VEHICLES:
        v = get_vehicle_by_number(db, row["vehicle_number"])
        if v is None:
            v = Vehicle(**row, updated_at=row["created_at"])
            db.add(v)
            db.flush()
        by_plate[v.vehicle_number] = v
    db.commit()
    return by_plate


def seed_incidents(db: Session, by_plate: dict) -> int:
    created = 0
    for row in INCIDENTS:
        data = dict(row)
        plate = data.pop("plate")
        exists = db.query(Incident.id).filter(Incident.description == data["description"]).first()
        if exists:
            continue
        vehicle = by_plate.get(plate)
        db.add(
            Incident(
                **data,
                vehicle_id=vehicle.id if vehicle else None,
                vehicle_number=plate,
                incident_date=data["created_at"],
                updated_at=data["created_at"],
            )
        )
        created += 1
    db.commit()
    return created


def run() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_user(
            db,
            os.getenv("SEED_ADMIN_EMAIL", "sumanth@revenuedept.gov"),
            os.getenv("SEED_ADMIN_PASSWORD", "admin@123"),
            "admin",
            "Revenue Department Admin",
        )
        ensure_user(db, "operator@revenuedept.gov", "operator@123", "operator", "Field Operator")
        ensure_user(db, "viewer@revenuedept.gov", "viewer@123", "viewer", "Read-only Officer")

        by_plate = seed_vehicles(db)
        n = seed_incidents(db, by_plate)
        log.info("seed done vehicles=%s new_incidents=%s", len(by_plate), n)
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    run()
