# backend/gearguard/scripts/seed.py
"""
Demo data. Safe to run repeatedly: rows are looked up by their natural key
first and only created when missing.

    python -m gearguard.scripts.seed
"""
import logging
from contextlib import contextmanager
from datetime import date, timedelta

from sqlalchemy import select

from ..core.config import Settings, get_settings
from ..core.db import Database, utcnow
from ..core.security import PasswordHasher
from ..models import (
    Department,
    Employee,
    Equipment,
    EquipmentCategory,
    MaintenanceRequest,
    MaintenanceTeam,
    Technician,
)

logger = logging.getLogger("gearguard.seed")

# ---------- small helpers ----------

@contextmanager
def session_scope(database: Database):
    """One session for the whole run; rolled back on error."""
    db = database.session()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_one(db, model, **by):
    return db.execute(select(model).filter_by(**by)).scalars().first()

def get_or_create(db, model, unique_by: dict, defaults: dict | None = None):
    inst = get_one(db, model, **unique_by)
    if inst:
        return inst, False
    inst = model(**{**unique_by, **(defaults or {})})
    db.add(inst)
    # flush so the new id is usable by the next rows; the caller commits
    db.flush()
    return inst, True

# ---------- seed data ----------

DEPARTMENTS = ["Production", "IT", "Maintenance"]
TEAMS = ["Mechanics", "Electrical Team", "IT Support"]
CATEGORIES = ["CNC Machines", "Computers", "Vehicles"]

EMPLOYEES = [
    {"Name": "Admin User",   "Email": "admin@gearguard.com",   "password": "admin123",   "Role": "ADMIN",   "dept": "Maintenance"},
    {"Name": "John Manager", "Email": "manager@gearguard.com", "password": "manager123", "Role": "MANAGER", "dept": "Production"},
    {"Name": "Jane User",    "Email": "user@gearguard.com",    "password": "user123",    "Role": "USER",    "dept": "Production"},
]

TECHNICIANS = [
    {"Name": "Mike Technician",   "Email": "tech@gearguard.com",        "password": "tech123", "team": "Mechanics"},
    {"Name": "Sarah Electrician", "Email": "electrician@gearguard.com", "password": "tech123", "team": "Electrical Team"},
]

EQUIPMENT = [
    {"Name": "CNC Mill 001", "SerialNumber": "CNC-001-2023", "category": "CNC Machines", "team": "Mechanics",
     "tech": "tech@gearguard.com", "Location": "Shop Floor - Bay A",
     "PurchaseDate": date(2023, 1, 15), "WarrantyExpiryDate": date(2026, 1, 15)},
    {"Name": "Laptop - Jane", "SerialNumber": "DELL-LAP-2024-001", "category": "Computers", "team": "IT Support",
     "assignee": "user@gearguard.com", "Location": "Office Building - Floor 2",
     "PurchaseDate": date(2024, 3, 10), "WarrantyExpiryDate": date(2027, 3, 10)},
    {"Name": "Forklift 05", "SerialNumber": "FLT-005-2022", "category": "Vehicles", "team": "Mechanics",
     "tech": "tech@gearguard.com", "Location": "Warehouse - Loading Dock",
     "PurchaseDate": date(2022, 6, 20)},
]


def _requests(now):
    return [
        {"Subject": "CNC spindle vibration", "Description": "Excessive vibration during operation",
         "serial": "CNC-001-2023", "RequestType": "CORRECTIVE", "Stage": "IN_PROGRESS",
         "by": "manager@gearguard.com", "to": "tech@gearguard.com", "ScheduledDate": now},
        {"Subject": "Quarterly CNC maintenance", "Description": "Routine preventive maintenance",
         "serial": "CNC-001-2023", "RequestType": "PREVENTIVE", "Stage": "ASSIGNED",
         "by": "admin@gearguard.com", "to": "tech@gearguard.com", "ScheduledDate": now + timedelta(days=7)},
        {"Subject": "Laptop overheating", "Description": "Laptop shuts down randomly due to heat",
         "serial": "DELL-LAP-2024-001", "RequestType": "CORRECTIVE", "Stage": "NEW",
         "by": "user@gearguard.com"},
        {"Subject": "Forklift brake inspection", "Description": "Preventive brake inspection",
         "serial": "FLT-005-2022", "RequestType": "PREVENTIVE", "Stage": "REPAIRED",
         "by": "manager@gearguard.com", "to": "tech@gearguard.com",
         "ScheduledDate": now - timedelta(days=1), "CompletedDate": now, "DurationHours": 2.5},
    ]


def run(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    database = Database(settings.DATABASE_URL)
    database.create_all()
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    with session_scope(database) as db:
        logger.info("Seeding: Department / MaintenanceTeam / EquipmentCategory")
        depts = {n: get_or_create(db, Department, {"Name": n})[0] for n in DEPARTMENTS}
        teams = {n: get_or_create(db, MaintenanceTeam, {"Name": n})[0] for n in TEAMS}
        cats = {n: get_or_create(db, EquipmentCategory, {"Name": n})[0] for n in CATEGORIES}

        logger.info("Seeding: Employee / Technician")
        people = {}
        for e in EMPLOYEES:
            people[e["Email"]], _ = get_or_create(db, Employee, {"Email": e["Email"]}, defaults={
                "Name": e["Name"],
                "PasswordHash": hasher.hash(e["password"]),
                "Role": e["Role"],
                "DepartmentID": depts[e["dept"]].DepartmentID,
            })

        techs = {}
        for t in TECHNICIANS:
            emp, _ = get_or_create(db, Employee, {"Email": t["Email"]}, defaults={
                "Name": t["Name"],
                "PasswordHash": hasher.hash(t["password"]),
                "Role": "TECHNICIAN",
                "DepartmentID": depts["Maintenance"].DepartmentID,
            })
            people[t["Email"]] = emp
            techs[t["Email"]], _ = get_or_create(
                db, Technician, {"EmployeeID": emp.EmployeeID},
                defaults={"TeamID": teams[t["team"]].TeamID},
            )

        logger.info("Seeding: Equipment")
        equipment = {}
        for q in EQUIPMENT:
            tech = techs.get(q.get("tech"))
            assignee = people.get(q.get("assignee"))
            equipment[q["SerialNumber"]], _ = get_or_create(
                db, Equipment, {"SerialNumber": q["SerialNumber"]}, defaults={
                    "Name": q["Name"],
                    "CategoryID": cats[q["category"]].CategoryID,
                    "DepartmentID": depts["Production"].DepartmentID,
                    "TeamID": teams[q["team"]].TeamID,
                    "DefaultTechnicianID": tech.TechnicianID if tech else None,
                    "AssignedEmployeeID": assignee.EmployeeID if assignee else None,
                    "Location": q["Location"],
                    "PurchaseDate": q["PurchaseDate"],
                    "WarrantyExpiryDate": q.get("WarrantyExpiryDate"),
                },
            )

        logger.info("Seeding: MaintenanceRequest")
        for r in _requests(utcnow()):
            eq = equipment[r["serial"]]
            tech = techs.get(r.get("to"))
            get_or_create(db, MaintenanceRequest, {"Subject": r["Subject"], "EquipmentID": eq.EquipmentID}, defaults={
                "Description": r["Description"],
                "CategoryID": eq.CategoryID,
                "TeamID": eq.TeamID,
                "RequestType": r["RequestType"],
                "Stage": r["Stage"],
                "RequestedByID": people[r["by"]].EmployeeID,
                "AssignedToID": tech.TechnicianID if tech else None,
                "ScheduledDate": r.get("ScheduledDate"),
                "CompletedDate": r.get("CompletedDate"),
                "DurationHours": r.get("DurationHours"),
            })

    database.dispose()
    logger.info("Seed complete. Accounts: admin@gearguard.com/admin123, manager@gearguard.com/manager123, "
                "user@gearguard.com/user123, tech@gearguard.com/tech123")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    run()
