import os

# Must be set before sandfleet.db.session creates the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_SCHEDULER"] = "0"
os.environ["ENABLE_CREATE_ALL"] = "1"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from sandfleet.core.security import create_access_token
from sandfleet.crud.user import create_user
from sandfleet.db.session import SessionLocal, engine
from sandfleet.main import app
from sandfleet.models import Base


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def _auth(db, email, role):
    user = create_user(db, email=email, password="secret123", role=role)
    token = create_access_token(user.email, extra={"role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(db):
    return _auth(db, "admin@revenuedept.gov", "admin")


@pytest.fixture
def operator_headers(db):
    return _auth(db, "operator@revenuedept.gov", "operator")


@pytest.fixture
def viewer_headers(db):
    return _auth(db, "viewer@revenuedept.gov", "viewer")


def vehicle_payload(**overrides):
    body = {
        "vehicleNumber": "KA01AB1234",
        "vehicleType": "truck",
        "capacityTons": 15,
        "gpsNumber": "GPS-0001",
        "gpsId": "A1B2C3",
        "ownerName": "Rajesh Kumar",
        "ownerPhone": "+91 9876543210",
        "ownerAddress": "123 Main Street, Bangalore, Karnataka",
        "licenseNumber": "DL123456789",
        "registrationDate": "2024-01-15",
    }
    body.update(overrides)
    return body


def incident_payload(**overrides):
    body = {
        "vehicleId": 1,
        "vehicleNumber": "KA01AB1234",
        "incidentType": "overloading",
        "description": "Vehicle found carrying 20 tons of sand, exceeding permitted limit",
        "location": "Highway NH-48, Checkpoint 3",
        "reportedBy": "Officer Sharma",
        "severity": "high",
    }
    body.update(overrides)
    return body
