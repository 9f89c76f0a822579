# backend/gearguard/services/auth_service.py
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..core.security import PasswordHasher
from ..domain.constants import DEFAULT_SIGNUP_ROLE
from ..domain.errors import AccountDeactivated, InvalidCredentials
from ..models import Department, Employee, Technician
from ..schemas.user import SessionUser

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def session_user_for(employee: Employee) -> SessionUser:
    tech: Optional[Technician] = employee.technician
    return SessionUser(
        id=employee.EmployeeID,
        name=employee.Name,
        email=employee.Email,
        role=employee.Role,
        departmentId=employee.DepartmentID,
        departmentName=employee.department.Name if employee.department else None,
        isTechnician=tech is not None,
        technicianId=tech.TechnicianID if tech else None,
        maintenanceTeamId=tech.TeamID if tech else None,
    )


def authenticate(db: Session, hasher: PasswordHasher, *, email: str, password: str) -> SessionUser:
    """
    Check an email/password pair against the stored employees.

    Raises ``InvalidCredentials`` for an unknown email or a wrong password
    (same exception, same message) and ``AccountDeactivated`` for an
    inactive account whatever the password. One read, no writes.
    """
    employee = (
        db.query(Employee)
          .options(joinedload(Employee.department), joinedload(Employee.technician))
          .filter(Employee.Email == normalize_email(email))
          .first()
    )
    if employee is None:
        hasher.dummy_verify()
        raise InvalidCredentials()

    # exactly one bcrypt check on every path, deactivated accounts included
    password_ok = hasher.verify(password or "", employee.PasswordHash)
    if not employee.IsActive:
        raise AccountDeactivated()
    if not password_ok:
        raise InvalidCredentials()

    return session_user_for(employee)


def signup(db: Session, hasher: PasswordHasher, *, name: str, email: str, password: str,
           department_id: Optional[int] = None) -> Employee:
    email = normalize_email(email)

    if db.query(Employee).filter(Employee.Email == email).first():
        raise HTTPException(status_code=400, detail="User with this email already exists")
    if department_id is not None and db.get(Department, department_id) is None:
        raise HTTPException(status_code=400, detail="Department not found")

    employee = Employee(
        Name=name,
        Email=email,
        PasswordHash=hasher.hash(password),
        Role=DEFAULT_SIGNUP_ROLE.value,
        DepartmentID=department_id,
        IsActive=True,
    )
    try:
        db.add(employee)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # lost a race with a concurrent signup for the same email
        logger.warning("Signup rejected by the database: %s", getattr(e, "orig", e))
        raise HTTPException(status_code=400, detail="User with this email already exists")
    db.refresh(employee)
    logger.info("Employee %s signed up", employee.EmployeeID)
    return employee
