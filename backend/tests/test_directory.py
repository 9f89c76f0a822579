import pytest


@pytest.mark.parametrize("path", ["/api/departments", "/api/employees", "/api/teams"])
def test_directory_requires_session(client, world, path):
    r = client.get(path)
    assert r.status_code == 401


def test_departments(client, world, as_user):
    r = client.get("/api/departments", headers=as_user)
    assert [d["name"] for d in r.json()["data"]] == ["Maintenance", "Production"]

    r = client.get(f"/api/departments/{world.production}", headers=as_user)
    assert r.json()["data"]["name"] == "Production"
    assert client.get("/api/departments/404", headers=as_user).status_code == 404
    assert client.get("/api/departments/x", headers=as_user).status_code == 400


def test_teams_list_their_technicians(client, world, as_user):
    r = client.get(f"/api/teams/{world.mechanics}", headers=as_user)
    team = r.json()["data"]
    assert team["name"] == "Mechanics"
    assert team["technicians"] == [{
        "id": world.tech, "employeeId": world.tech_employee,
        "name": "Mike Technician", "email": "tech@gearguard.com",
    }]

    r = client.get("/api/teams", headers=as_user)
    teams = {t["name"]: t for t in r.json()["data"]}
    assert teams["Electrical Team"]["technicians"] == []


def test_employees_never_expose_password_hashes(client, world, as_user):
    r = client.get("/api/employees", headers=as_user)
    body = r.json()
    assert body["meta"]["count"] == 5
    for emp in body["data"]:
        assert not any("password" in key.lower() for key in emp)
        assert "$2b$" not in str(emp)


def test_employee_filters(client, world, as_user):
    r = client.get("/api/employees?role=TECHNICIAN", headers=as_user)
    techs = r.json()["data"]
    assert [e["email"] for e in techs] == ["tech@gearguard.com"]
    assert techs[0]["isTechnician"] is True
    assert techs[0]["maintenanceTeamId"] == world.mechanics

    r = client.get(f"/api/employees?departmentId={world.maintenance}", headers=as_user)
    assert {e["email"] for e in r.json()["data"]} == {"admin@gearguard.com", "tech@gearguard.com"}

    r = client.get("/api/employees?role=PENDING", headers=as_user)
    assert r.status_code == 400


def test_get_employee(client, world, as_user):
    r = client.get(f"/api/employees/{world.user}", headers=as_user)
    data = r.json()["data"]
    assert data["email"] == "user@gearguard.com"
    assert data["departmentName"] == "Production"
    assert data["isActive"] is True


def test_deactivate_is_admin_only(client, world, as_manager):
    r = client.post(f"/api/employees/{world.user}/deactivate", headers=as_manager)
    assert r.status_code == 403


def test_deactivated_employee_cannot_log_in(client, world, as_admin):
    r = client.post(f"/api/employees/{world.user}/deactivate", headers=as_admin)
    assert r.status_code == 200
    assert r.json()["data"]["isActive"] is False

    r = client.post("/api/auth/login", json={"email": "user@gearguard.com", "password": "user123"})
    assert r.status_code == 401

    r = client.post(f"/api/employees/{world.user}/activate", headers=as_admin)
    assert r.json()["data"]["isActive"] is True
    r = client.post("/api/auth/login", json={"email": "user@gearguard.com", "password": "user123"})
    assert r.status_code == 200


def test_activate_missing_employee(client, world, as_admin):
    assert client.post("/api/employees/999/activate", headers=as_admin).status_code == 404
