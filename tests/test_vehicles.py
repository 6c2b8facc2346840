from datetime import date, datetime

from conftest import vehicle_payload

from sandfleet.models.vehicle import Vehicle


def _create(client, headers, **overrides):
    resp = client.post("/api/v1/vehicles", json=vehicle_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_vehicle_returns_camel_case_record(client, operator_headers):
    body = _create(client, operator_headers)
    assert body["id"] >= 1
    assert body["vehicleNumber"] == "KA01AB1234"
    assert body["status"] == "active"
    assert body["capacityTons"] == 15
    assert body["gpsId"] == "A1B2C3"
    assert body["createdAt"] and body["updatedAt"]


def test_duplicate_vehicle_number_conflicts_and_leaves_store_unchanged(client, operator_headers):
    _create(client, operator_headers)
    resp = client.post(
        "/api/v1/vehicles",
        json=vehicle_payload(ownerName="Someone Else"),
        headers=operator_headers,
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["type"] == "conflict"

    listing = client.get("/api/v1/vehicles", headers=operator_headers).json()
    assert listing["pagination"]["total"] == 1
    assert listing["vehicles"][0]["ownerName"] == "Rajesh Kumar"


def test_search_by_plate_prefix_finds_exactly_one(client, operator_headers):
    _create(client, operator_headers)
    _create(client, operator_headers, vehicleNumber="MH02CD5678", vehicleType="dumper", ownerName="Priya Sharma")

    resp = client.get("/api/v1/vehicles", params={"search": "KA01"}, headers=operator_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["pagination"]["total"] == 1
    assert [v["vehicleNumber"] for v in data["vehicles"]] == ["KA01AB1234"]


def test_search_is_case_insensitive_and_covers_owner_fields(client, operator_headers):
    _create(client, operator_headers)
    for term in ("rajesh", "9876543210", "ka01ab"):
        data = client.get("/api/v1/vehicles", params={"search": term}, headers=operator_headers).json()
        assert data["pagination"]["total"] == 1, term


def test_search_treats_wildcards_literally(client, operator_headers):
    _create(client, operator_headers)
    data = client.get("/api/v1/vehicles", params={"search": "%"}, headers=operator_headers).json()
    assert data["pagination"]["total"] == 0


def test_filter_by_status_and_type(client, operator_headers):
    _create(client, operator_headers)
    _create(client, operator_headers, vehicleNumber="MH02CD5678", vehicleType="dumper", status="flagged")

    data = client.get("/api/v1/vehicles", params={"status": "flagged"}, headers=operator_headers).json()
    assert [v["vehicleNumber"] for v in data["vehicles"]] == ["MH02CD5678"]

    data = client.get("/api/v1/vehicles", params={"vehicleType": "truck"}, headers=operator_headers).json()
    assert [v["vehicleNumber"] for v in data["vehicles"]] == ["KA01AB1234"]


def test_pages_cover_full_result_exactly_once(client, operator_headers):
    plates = [f"KA01AB{n:04d}" for n in range(5)]
    for p in plates:
        _create(client, operator_headers, vehicleNumber=p)

    full = client.get("/api/v1/vehicles", params={"limit": 100}, headers=operator_headers).json()
    assert full["pagination"]["total"] == 5

    seen = []
    for page in (1, 2, 3):
        data = client.get(
            "/api/v1/vehicles", params={"page": page, "limit": 2}, headers=operator_headers
        ).json()
        assert data["pagination"]["pages"] == 3
        seen.extend(v["id"] for v in data["vehicles"])

    assert seen == [v["id"] for v in full["vehicles"]]
    # newest first
    assert [v["vehicleNumber"] for v in full["vehicles"]] == list(reversed(plates))


def test_listing_twice_is_identical(client, operator_headers):
    for n in range(3):
        _create(client, operator_headers, vehicleNumber=f"TN09ZZ{n:04d}")
    first = client.get("/api/v1/vehicles", headers=operator_headers).json()
    second = client.get("/api/v1/vehicles", headers=operator_headers).json()
    assert first == second


def test_invalid_pagination_is_rejected(client, viewer_headers):
    for params in ({"page": 0}, {"limit": 0}, {"limit": 101}, {"page": "x"}):
        resp = client.get("/api/v1/vehicles", params=params, headers=viewer_headers)
        assert resp.status_code == 400, params
        assert resp.json()["error"]["type"] == "validation_error"


def test_get_update_and_rename(client, operator_headers):
    created = _create(client, operator_headers)
    vid = created["id"]

    assert client.get(f"/api/v1/vehicles/{vid}", headers=operator_headers).json()["id"] == vid

    resp = client.put(
        f"/api/v1/vehicles/{vid}",
        json={"ownerPhone": "+91 9000000000", "vehicleNumber": "KA01AB9999"},
        headers=operator_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["ownerPhone"] == "+91 9000000000"
    assert body["vehicleNumber"] == "KA01AB9999"
    assert body["ownerName"] == "Rajesh Kumar"
    assert body["updatedAt"] >= created["updatedAt"]


def test_rename_onto_existing_plate_conflicts(client, operator_headers):
    _create(client, operator_headers)
    other = _create(client, operator_headers, vehicleNumber="MH02CD5678")
    resp = client.put(
        f"/api/v1/vehicles/{other['id']}",
        json={"vehicleNumber": "KA01AB1234"},
        headers=operator_headers,
    )
    assert resp.status_code == 409
    assert client.get(f"/api/v1/vehicles/{other['id']}", headers=operator_headers).json()["vehicleNumber"] == "MH02CD5678"


def test_update_cannot_clear_required_field(client, operator_headers):
    vid = _create(client, operator_headers)["id"]
    resp = client.put(f"/api/v1/vehicles/{vid}", json={"ownerName": None}, headers=operator_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["loc"] == ["body", "ownerName"]


def test_status_endpoint(client, operator_headers):
    vid = _create(client, operator_headers)["id"]
    resp = client.put(f"/api/v1/vehicles/{vid}/status", json={"status": "suspended"}, headers=operator_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "suspended"

    resp = client.put(f"/api/v1/vehicles/{vid}/status", json={"status": "scrapped"}, headers=operator_headers)
    assert resp.status_code == 400

    resp = client.put("/api/v1/vehicles/999/status", json={"status": "active"}, headers=operator_headers)
    assert resp.status_code == 404


def test_delete_vehicle(client, operator_headers):
    vid = _create(client, operator_headers)["id"]
    resp = client.delete(f"/api/v1/vehicles/{vid}", headers=operator_headers)
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
    assert client.get(f"/api/v1/vehicles/{vid}", headers=operator_headers).status_code == 404
    assert client.delete(f"/api/v1/vehicles/{vid}", headers=operator_headers).status_code == 404


def test_missing_required_fields_and_bad_enum(client, operator_headers):
    body = vehicle_payload()
    del body["ownerName"]
    resp = client.post("/api/v1/vehicles", json=body, headers=operator_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "validation_error"

    resp = client.post("/api/v1/vehicles", json=vehicle_payload(vehicleType="bicycle"), headers=operator_headers)
    assert resp.status_code == 400


def test_viewer_cannot_write(client, viewer_headers):
    resp = client.post("/api/v1/vehicles", json=vehicle_payload(), headers=viewer_headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["type"] == "forbidden"
    assert client.get("/api/v1/vehicles", headers=viewer_headers).json()["pagination"]["total"] == 0


def test_admin_can_write(client, admin_headers):
    _create(client, admin_headers)


def test_anonymous_is_unauthorized(client):
    resp = client.get("/api/v1/vehicles")
    assert resp.status_code == 401
    assert resp.json()["error"]["type"] == "unauthorized"
    assert client.post("/api/v1/vehicles", json=vehicle_payload()).status_code == 401


def test_update_missing_vehicle_is_404(client, operator_headers):
    resp = client.put("/api/v1/vehicles/999", json={"ownerName": "X"}, headers=operator_headers)
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "not_found"


def test_last_activity_offset_is_stored_as_utc(client, operator_headers):
    vid = _create(client, operator_headers)["id"]
    resp = client.put(
        f"/api/v1/vehicles/{vid}",
        json={"lastActivity": "2024-01-20T10:30:00+05:30"},
        headers=operator_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["lastActivity"] == "2024-01-20T05:00:00"
    again = client.get(f"/api/v1/vehicles/{vid}", headers=operator_headers).json()
    assert again["lastActivity"] == "2024-01-20T05:00:00"


def test_same_created_at_pages_in_id_order(client, db, viewer_headers):
    stamp = datetime(2024, 1, 1)
    for n in range(5):
        db.add(
            Vehicle(
                vehicle_number=f"AP05TT{n:04d}",
                vehicle_type="truck",
                owner_name="Suresh Reddy",
                owner_phone="+91 9000000001",
                owner_address="Vijayawada",
                registration_date=date(2024, 1, 1),
                created_at=stamp,
                updated_at=stamp,
            )
        )
    db.commit()
    ids = sorted(v.id for v in db.query(Vehicle).all())

    seen = []
    for page in (1, 2, 3):
        data = client.get(
            "/api/v1/vehicles", params={"page": page, "limit": 2}, headers=viewer_headers
        ).json()
        seen.extend(v["id"] for v in data["vehicles"])
    assert seen == ids
