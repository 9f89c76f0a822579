# backend/tests/conftest.py
from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from gearguard.core.config import Settings
from gearguard.main import create_app
from gearguard.models import (
    Department,
    Employee,
    Equipment,
    EquipmentCategory,
    MaintenanceTeam,
    Technician,
)

PASSWORDS = {
    "admin@gearguard.com": "admin123",
    "manager@gearguard.com": "manager123",
    "user@gearguard.com": "user123",
    "tech@gearguard.com": "tech123",
    "gone@gearguard.com": "gone123",
}


@pytest.fixture()
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    # entering the context runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def world(client, app):
    """Reference data every API test works against; ids only, session already closed."""
    hasher = app.state.hasher
    session = app.state.db.session()
    try:
        production = Department(Name="Production")
        maintenance = Department(Name="Maintenance")
        mechanics = MaintenanceTeam(Name="Mechanics")
        electrical = MaintenanceTeam(Name="Electrical Team")
        cnc = EquipmentCategory(Name="CNC Machines")
        computers = EquipmentCategory(Name="Computers")
        session.add_all([production, maintenance, mechanics, electrical, cnc, computers])
        session.flush()

        def employee(name, email, role, dept, active=True):
            e = Employee(
                Name=name, Email=email, PasswordHash=hasher.hash(PASSWORDS[email]),
                Role=role, DepartmentID=dept.DepartmentID, IsActive=active,
            )
            session.add(e)
            return e

        admin = employee("Admin User", "admin@gearguard.com", "ADMIN", maintenance)
        manager = employee("John Manager", "manager@gearguard.com", "MANAGER", production)
        user = employee("Jane User", "user@gearguard.com", "USER", production)
        tech_emp = employee("Mike Technician", "tech@gearguard.com", "TECHNICIAN", maintenance)
        gone = employee("Former Staff", "gone@gearguard.com", "USER", production, active=False)
        session.flush()

        tech = Technician(EmployeeID=tech_emp.EmployeeID, TeamID=mechanics.TeamID)
        session.add(tech)
        session.flush()

        mill = Equipment(
            Name="CNC Mill 001", SerialNumber="CNC-001-2023", CategoryID=cnc.CategoryID,
            DepartmentID=production.DepartmentID, TeamID=mechanics.TeamID,
            DefaultTechnicianID=tech.TechnicianID, Location="Shop Floor - Bay A",
            PurchaseDate=date(2023, 1, 15), WarrantyExpiryDate=date(2026, 1, 15),
        )
        laptop = Equipment(
            Name="Laptop - Jane", SerialNumber="DELL-LAP-2024-001", CategoryID=computers.CategoryID,
            DepartmentID=production.DepartmentID, TeamID=electrical.TeamID,
            AssignedEmployeeID=user.EmployeeID, Location="Office Building - Floor 2",
            PurchaseDate=date(2024, 3, 10),
        )
        session.add_all([mill, laptop])
        session.commit()

        return SimpleNamespace(
            production=production.DepartmentID,
            maintenance=maintenance.DepartmentID,
            mechanics=mechanics.TeamID,
            electrical=electrical.TeamID,
            cnc=cnc.CategoryID,
            computers=computers.CategoryID,
            admin=admin.EmployeeID,
            manager=manager.EmployeeID,
            user=user.EmployeeID,
            tech_employee=tech_emp.EmployeeID,
            gone=gone.EmployeeID,
            tech=tech.TechnicianID,
            mill=mill.EquipmentID,
            laptop=laptop.EquipmentID,
        )
    finally:
        session.close()


def login(client, email, password=None):
    """Log in through the API and return bearer headers; the cookie jar is left empty."""
    r = client.post("/api/auth/login", json={"email": email, "password": password or PASSWORDS[email]})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {r.json()['data']['access_token']}"}


@pytest.fixture()
def as_admin(client, world):
    return login(client, "admin@gearguard.com")


@pytest.fixture()
def as_manager(client, world):
    return login(client, "manager@gearguard.com")


@pytest.fixture()
def as_user(client, world):
    return login(client, "user@gearguard.com")


@pytest.fixture()
def as_tech(client, world):
    return login(client, "tech@gearguard.com")
