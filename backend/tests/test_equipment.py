import pytest


def _payload(world, **overrides):
    body = {
        "name": "Press Line 2",
        "serialNumber": "PRS-002-2024",
        "categoryId": world.cnc,
        "departmentId": world.production,
        "maintenanceTeamId": world.mechanics,
        "location": "Shop Floor - Bay C",
        "purchaseDate": "2024-02-01",
    }
    body.update(overrides)
    return body


def test_create_equipment(client, world, as_manager):
    r = client.post("/api/equipment", json=_payload(world, notes="", warrantyExpiryDate=""), headers=as_manager)
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["status"] == "ACTIVE"
    assert data["purchaseDate"] == "2024-02-01"
    assert data["warrantyExpiryDate"] is None
    assert data["notes"] is None


@pytest.mark.parametrize("field, value", [
    ("name", "P"),
    ("serialNumber", "X"),
    ("location", ""),
    ("status", "BROKEN"),
    ("purchaseDate", "yesterday"),
])
def test_create_validation(client, world, as_manager, field, value):
    r = client.post("/api/equipment", json=_payload(world, **{field: value}), headers=as_manager)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_duplicate_serial_number(client, world, as_manager):
    r = client.post("/api/equipment", json=_payload(world, serialNumber="CNC-001-2023"), headers=as_manager)
    assert r.status_code == 400
    assert r.json()["error"] == "Serial number is already registered"


def test_unknown_reference(client, world, as_manager):
    r = client.post("/api/equipment", json=_payload(world, categoryId=999), headers=as_manager)
    assert r.status_code == 400


def test_list_filters(client, world, as_user):
    r = client.get("/api/equipment", headers=as_user)
    assert r.json()["meta"]["count"] == 2

    r = client.get("/api/equipment?q=cnc", headers=as_user)
    assert [e["id"] for e in r.json()["data"]] == [world.mill]

    r = client.get("/api/equipment?q=dell-lap", headers=as_user)
    assert [e["id"] for e in r.json()["data"]] == [world.laptop]

    r = client.get(f"/api/equipment?teamId={world.electrical}", headers=as_user)
    assert [e["id"] for e in r.json()["data"]] == [world.laptop]

    r = client.get("/api/equipment?status=RETIRED", headers=as_user)
    assert r.json()["data"] == []


def test_detail_includes_related_and_request_counts(client, world, as_user):
    for subject in ("one", "two"):
        client.post("/api/maintenance", json={"subject": subject, "equipmentId": world.mill}, headers=as_user)
    first = client.get("/api/maintenance", headers=as_user).json()["data"][-1]["id"]
    client.post(f"/api/maintenance/{first}/scrap", headers=as_user)

    r = client.get(f"/api/equipment/{world.mill}", headers=as_user)
    data = r.json()["data"]
    assert data["category"] == {"id": world.cnc, "name": "CNC Machines"}
    assert data["maintenanceTeam"]["name"] == "Mechanics"
    assert data["defaultTechnician"] == {"id": world.tech, "name": "Mike Technician", "email": "tech@gearguard.com"}
    assert data["assignedEmployee"] is None
    assert data["openRequestCount"] == 1
    assert data["closedRequestCount"] == 1


def test_get_bad_and_missing_ids(client, world, as_user):
    r = client.get("/api/equipment/x1", headers=as_user)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid equipment ID"
    assert client.get("/api/equipment/999", headers=as_user).status_code == 404


def test_update_requires_name_and_serial(client, world, as_manager):
    r = client.put(f"/api/equipment/{world.mill}", json={"name": "CNC Mill 001"}, headers=as_manager)
    assert r.status_code == 400
    assert r.json()["error"] == "Name and serial number are required"


def test_update_overwrites_fields(client, world, as_manager):
    r = client.put(f"/api/equipment/{world.mill}", json={
        "name": "CNC Mill 001 (rebuilt)",
        "serialNumber": "CNC-001-2023",
        "status": "MAINTENANCE",
        "location": "Shop Floor - Bay B",
        "purchaseDate": "2023-01-15",
    }, headers=as_manager)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "CNC Mill 001 (rebuilt)"
    assert data["status"] == "MAINTENANCE"
    assert data["location"] == "Shop Floor - Bay B"
    # dates not sent are cleared
    assert data["warrantyExpiryDate"] is None
    # references not sent stay
    assert data["categoryId"] == world.cnc
    assert data["defaultTechnicianId"] == world.tech


def test_update_missing_equipment(client, world, as_manager):
    r = client.put("/api/equipment/999", json={"name": "Ghost", "serialNumber": "GH-1"}, headers=as_manager)
    assert r.status_code == 404


def test_delete_equipment(client, world, as_manager):
    r = client.delete(f"/api/equipment/{world.laptop}", headers=as_manager)
    assert r.status_code == 200
    assert client.get(f"/api/equipment/{world.laptop}", headers=as_manager).status_code == 404
    assert client.delete(f"/api/equipment/{world.laptop}", headers=as_manager).status_code == 404


def test_delete_equipment_with_requests_is_refused(client, world, as_manager):
    client.post("/api/maintenance", json={"subject": "Noise", "equipmentId": world.mill}, headers=as_manager)
    r = client.delete(f"/api/equipment/{world.mill}", headers=as_manager)
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete equipment - it has maintenance requests"
    assert client.get(f"/api/equipment/{world.mill}", headers=as_manager).status_code == 200
