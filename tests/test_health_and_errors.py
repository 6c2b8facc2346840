from sandfleet.db.base import utcnow
from sandfleet.models.telemetry import TelemetrySample
from sandfleet.models.vehicle import Vehicle
from sandfleet.worker.scheduler import sync_last_activity


def test_healthz(client):
    body = client.get("/api/healthz").json()
    assert body["ok"] is True
    assert body["service"] == "sandfleet"


def test_readyz_pings_db(client):
    resp = client.get("/api/readyz")
    assert resp.status_code == 200
    assert resp.json()["db"] == "up"


def test_error_envelope_carries_trace_id(client, viewer_headers):
    resp = client.get("/api/v1/vehicles/12345", headers={**viewer_headers, "X-Request-ID": "abc123"})
    assert resp.status_code == 404
    err = resp.json()
    assert err["ok"] is False
    assert err["error"] == {
        "type": "not_found",
        "message": "Vehicle not found",
        "status": 404,
        "trace_id": "abc123",
    }
    assert resp.headers["X-Request-ID"] == "abc123"


def test_success_responses_carry_request_id(client, viewer_headers):
    resp = client.get("/api/v1/vehicles", headers=viewer_headers)
    assert resp.headers.get("X-Request-ID")


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "not_found"


def test_login_and_me(client, db, operator_headers):
    resp = client.post(
        "/api/v1/login",
        data={"username": "operator@revenuedept.gov", "password": "secret123"},
    )
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == "operator@revenuedept.gov"
    assert me["role"] == "operator"

    bad = client.post("/api/v1/login", data={"username": "operator@revenuedept.gov", "password": "nope"})
    assert bad.status_code == 401


def test_sync_last_activity_moves_forward_only(db):
    now = utcnow()
    v = Vehicle(
        vehicle_number="KA01AB1234",
        vehicle_type="truck",
        owner_name="Rajesh Kumar",
        owner_phone="+91 9876543210",
        owner_address="Bangalore",
        registration_date=now.date(),
        created_at=now,
        updated_at=now,
    )
    db.add(v)
    db.add(TelemetrySample(vehicle_number="KA01AB1234", lat=1, lng=2, ts=now))
    db.add(TelemetrySample(vehicle_number="UNKNOWN01", lat=1, lng=2, ts=now))
    db.commit()

    assert sync_last_activity(db) == 1
    db.refresh(v)
    assert v.last_activity == now
    assert sync_last_activity(db) == 0
