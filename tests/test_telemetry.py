import pytest
from starlette.websockets import WebSocketDisconnect

from sandfleet.models.telemetry import TelemetrySample
from sandfleet.services.broadcast import hub
from sandfleet.services.telemetry import TELEMETRY_TOPIC


def _token(headers):
    return headers["Authorization"].split(" ", 1)[1]


def test_ingest_acknowledges_and_persists(client, db):
    resp = client.post("/api/v1/telemetry", json={"truckNumber": "KA01AB1234", "lat": 12.9, "lng": 77.6})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}

    rows = db.query(TelemetrySample).all()
    assert len(rows) == 1
    assert rows[0].vehicle_number == "KA01AB1234"
    assert rows[0].ts is not None


def test_duplicate_reports_create_duplicate_samples(client, db):
    body = {"truckNumber": "KA01AB1234", "lat": 12.9, "lng": 77.6, "speed": 42}
    client.post("/api/v1/telemetry", json=body)
    client.post("/api/v1/telemetry", json=body)
    assert db.query(TelemetrySample).count() == 2


def test_zero_coordinates_are_valid(client):
    resp = client.post("/api/v1/telemetry", json={"truckNumber": "KA01AB1234", "lat": 0, "lng": 0})
    assert resp.status_code == 200


@pytest.mark.parametrize("missing", ["truckNumber", "lat", "lng"])
def test_missing_required_field_is_rejected(client, db, missing):
    body = {"truckNumber": "KA01AB1234", "lat": 12.9, "lng": 77.6}
    del body[missing]
    resp = client.post("/api/v1/telemetry", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "validation_error"
    assert db.query(TelemetrySample).count() == 0


def test_out_of_range_latitude_is_rejected(client):
    resp = client.post("/api/v1/telemetry", json={"truckNumber": "KA01AB1234", "lat": 91, "lng": 0})
    assert resp.status_code == 400


def test_tracker_timestamp_is_stored(client, db):
    client.post(
        "/api/v1/telemetry",
        json={"truckNumber": "KA01AB1234", "lat": 1, "lng": 2, "ts": "2024-01-20T10:30:00Z"},
    )
    sample = db.query(TelemetrySample).one()
    assert sample.ts.isoformat() == "2024-01-20T10:30:00"


def test_subscribed_listener_receives_event(client, viewer_headers):
    url = f"/api/v1/ws/telemetry?token={_token(viewer_headers)}"
    with client.websocket_connect(url) as ws:
        resp = client.post(
            "/api/v1/telemetry",
            json={"truckNumber": "KA01AB1234", "driverName": "Ravi", "lat": 12.9, "lng": 77.6},
        )
        assert resp.json() == {"status": "ok"}

        msg = ws.receive_json()
        assert msg["event"] == "telemetry"
        data = msg["data"]
        assert data["truckNumber"] == "KA01AB1234"
        assert data["driverName"] == "Ravi"
        assert data["lat"] == 12.9
        assert data["lng"] == 77.6
        assert data["ownerNumber"] is None
        assert isinstance(data["ts"], int)


def test_socket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/api/v1/ws/telemetry?token=not-a-jwt") as ws:
            ws.receive_json()
    assert exc.value.code == 1008


def test_recent_samples_newest_first(client, viewer_headers):
    for ts in ("2024-01-20T10:00:00Z", "2024-01-20T11:00:00Z"):
        client.post("/api/v1/telemetry", json={"truckNumber": "KA01AB1234", "lat": 1, "lng": 2, "ts": ts})
    client.post("/api/v1/telemetry", json={"truckNumber": "MH02CD5678", "lat": 3, "lng": 4, "ts": "2024-01-20T09:00:00Z"})

    rows = client.get(
        "/api/v1/telemetry", params={"vehicleNumber": "KA01AB1234"}, headers=viewer_headers
    ).json()
    assert [r["ts"] for r in rows] == ["2024-01-20T11:00:00", "2024-01-20T10:00:00"]
    assert client.get("/api/v1/telemetry").status_code == 401


def test_offset_timestamp_is_stored_as_utc(client, db):
    client.post(
        "/api/v1/telemetry",
        json={"truckNumber": "KA01AB1234", "lat": 1, "lng": 2, "ts": "2024-01-20T10:30:00+05:30"},
    )
    sample = db.query(TelemetrySample).one()
    assert sample.ts.isoformat() == "2024-01-20T05:00:00"


def test_closed_socket_leaves_topic(client, viewer_headers):
    before = hub.subscriber_count(TELEMETRY_TOPIC)
    with client.websocket_connect(f"/api/v1/ws/telemetry?token={_token(viewer_headers)}"):
        assert hub.subscriber_count(TELEMETRY_TOPIC) == before + 1
    assert hub.subscriber_count(TELEMETRY_TOPIC) == before
