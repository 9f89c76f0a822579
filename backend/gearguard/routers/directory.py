from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.api import iso, list_meta, ok, parse_id
from ..core.db import get_db
from ..core.security import require_roles, require_session
from ..domain.constants import Role
from ..models import Department, Employee, MaintenanceTeam
from ..services import directory_service

router = APIRouter(prefix="/api", tags=["directory"], dependencies=[Depends(require_session)])


def _serialize_department(d: Department) -> dict:
    return {"id": d.DepartmentID, "name": d.Name, "createdAt": iso(d.CreatedAt), "updatedAt": iso(d.UpdatedAt)}


def _serialize_team(t: MaintenanceTeam) -> dict:
    return {
        "id": t.TeamID,
        "name": t.Name,
        "technicians": [
            {"id": tech.TechnicianID, "employeeId": tech.EmployeeID,
             "name": tech.employee.Name, "email": tech.employee.Email}
            for tech in t.technicians
        ],
        "createdAt": iso(t.CreatedAt),
        "updatedAt": iso(t.UpdatedAt),
    }


# PasswordHash never leaves the server
def _serialize_employee(e: Employee) -> dict:
    tech = e.technician
    return {
        "id": e.EmployeeID,
        "name": e.Name,
        "email": e.Email,
        "role": e.Role,
        "departmentId": e.DepartmentID,
        "departmentName": e.department.Name if e.department else None,
        "isActive": e.IsActive,
        "isTechnician": tech is not None,
        "technicianId": tech.TechnicianID if tech else None,
        "maintenanceTeamId": tech.TeamID if tech else None,
        "createdAt": iso(e.CreatedAt),
    }


# ---- Departments ----
@router.get("/departments")
def list_departments(db: Session = Depends(get_db)):
    items = [_serialize_department(d) for d in directory_service.list_departments(db)]
    return ok(items, meta=list_meta(items))


@router.get("/departments/{department_id}")
def get_department(department_id: str, db: Session = Depends(get_db)):
    dep = directory_service.get_department(db, parse_id(department_id, "department"))
    return ok(_serialize_department(dep))


# ---- Teams ----
@router.get("/teams")
def list_teams(db: Session = Depends(get_db)):
    items = [_serialize_team(t) for t in directory_service.list_teams(db)]
    return ok(items, meta=list_meta(items))


@router.get("/teams/{team_id}")
def get_team(team_id: str, db: Session = Depends(get_db)):
    team = directory_service.get_team(db, parse_id(team_id, "team"))
    return ok(_serialize_team(team))


# ---- Employees ----
@router.get("/employees")
def list_employees(
    role: Optional[Role] = Query(None),
    departmentId: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    rows = directory_service.list_employees(
        db, role=role.value if role else None, department_id=departmentId
    )
    items = [_serialize_employee(e) for e in rows]
    return ok(items, meta=list_meta(items))


@router.get("/employees/{employee_id}")
def get_employee(employee_id: str, db: Session = Depends(get_db)):
    emp = directory_service.get_employee(db, parse_id(employee_id, "employee"))
    return ok(_serialize_employee(emp))


@router.post("/employees/{employee_id}/deactivate", dependencies=[Depends(require_roles(Role.ADMIN))])
def deactivate_employee(employee_id: str, db: Session = Depends(get_db)):
    emp = directory_service.set_active(db, parse_id(employee_id, "employee"), False)
    return ok(_serialize_employee(emp))


@router.post("/employees/{employee_id}/activate", dependencies=[Depends(require_roles(Role.ADMIN))])
def activate_employee(employee_id: str, db: Session = Depends(get_db)):
    emp = directory_service.set_active(db, parse_id(employee_id, "employee"), True)
    return ok(_serialize_employee(emp))
