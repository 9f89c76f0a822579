# backend/gearguard/services/directory_service.py
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from ..models import Department, Employee, MaintenanceTeam, Technician

logger = logging.getLogger(__name__)


# -------- Departments --------
def list_departments(db: Session) -> List[Department]:
    return db.query(Department).order_by(Department.Name.asc()).all()


def get_department(db: Session, department_id: int) -> Department:
    dep = db.get(Department, department_id)
    if not dep:
        raise HTTPException(status_code=404, detail="Department not found")
    return dep


# -------- Teams --------
def list_teams(db: Session) -> List[MaintenanceTeam]:
    return (
        db.query(MaintenanceTeam)
          .options(joinedload(MaintenanceTeam.technicians).joinedload(Technician.employee))
          .order_by(MaintenanceTeam.Name.asc())
          .all()
    )


def get_team(db: Session, team_id: int) -> MaintenanceTeam:
    team = (
        db.query(MaintenanceTeam)
          .options(joinedload(MaintenanceTeam.technicians).joinedload(Technician.employee))
          .filter(MaintenanceTeam.TeamID == team_id)
          .first()
    )
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


# -------- Employees --------
def list_employees(db: Session, *, role: Optional[str] = None,
                   department_id: Optional[int] = None) -> List[Employee]:
    q = db.query(Employee).options(joinedload(Employee.department), joinedload(Employee.technician))
    if role:
        q = q.filter(Employee.Role == role)
    if department_id is not None:
        q = q.filter(Employee.DepartmentID == department_id)
    return q.order_by(Employee.Name.asc()).all()


def get_employee(db: Session, employee_id: int) -> Employee:
    emp = (
        db.query(Employee)
          .options(joinedload(Employee.department), joinedload(Employee.technician))
          .filter(Employee.EmployeeID == employee_id)
          .first()
    )
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def set_active(db: Session, employee_id: int, active: bool) -> Employee:
    """Employees are never deleted; an ADMIN switches them off and on."""
    emp = get_employee(db, employee_id)
    if emp.IsActive != active:
        emp.IsActive = active
        db.commit()
        logger.info("Employee %s %s", employee_id, "activated" if active else "deactivated")
    return emp
