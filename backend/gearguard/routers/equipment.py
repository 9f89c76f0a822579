from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.api import iso, list_meta, ok, parse_id
from ..core.db import get_db
from ..core.security import require_session
from ..domain.constants import TERMINAL_STAGES, EquipmentStatus
from ..models import Equipment
from ..schemas.equipment import EquipmentCreate, EquipmentUpdate
from ..services import equipment_service

router = APIRouter(prefix="/api/equipment", tags=["equipment"], dependencies=[Depends(require_session)])


def _serialize(e: Equipment) -> dict:
    return {
        "id": e.EquipmentID,
        "name": e.Name,
        "serialNumber": e.SerialNumber,
        "categoryId": e.CategoryID,
        "departmentId": e.DepartmentID,
        "maintenanceTeamId": e.TeamID,
        "defaultTechnicianId": e.DefaultTechnicianID,
        "assignedEmployeeId": e.AssignedEmployeeID,
        "location": e.Location,
        "purchaseDate": iso(e.PurchaseDate),
        "warrantyExpiryDate": iso(e.WarrantyExpiryDate),
        "status": e.Status,
        "notes": e.Notes,
        "createdAt": iso(e.CreatedAt),
        "updatedAt": iso(e.UpdatedAt),
    }


def _named(obj, id_attr: str) -> Optional[dict]:
    if obj is None:
        return None
    return {"id": getattr(obj, id_attr), "name": obj.Name}


def _serialize_detail(e: Equipment) -> dict:
    data = _serialize(e)
    tech = e.default_technician
    closed = sum(1 for r in e.requests if r.Stage in TERMINAL_STAGES)
    data.update(
        category=_named(e.category, "CategoryID"),
        department=_named(e.department, "DepartmentID"),
        maintenanceTeam=_named(e.team, "TeamID"),
        assignedEmployee=_named(e.assigned_employee, "EmployeeID"),
        defaultTechnician=(
            {"id": tech.TechnicianID, "name": tech.employee.Name, "email": tech.employee.Email}
            if tech else None
        ),
        openRequestCount=len(e.requests) - closed,
        closedRequestCount=closed,
    )
    return data


@router.get("")
def list_equipment(
    q: Optional[str] = Query(None, description="name or serial number contains"),
    status: Optional[EquipmentStatus] = Query(None),
    categoryId: Optional[int] = Query(None, ge=1),
    departmentId: Optional[int] = Query(None, ge=1),
    teamId: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    rows = equipment_service.list_equipment(
        db,
        q=q,
        status=status.value if status else None,
        category_id=categoryId,
        department_id=departmentId,
        team_id=teamId,
    )
    items = [_serialize(e) for e in rows]
    return ok(items, meta=list_meta(items))


@router.post("", status_code=201)
def create_equipment(body: EquipmentCreate, db: Session = Depends(get_db)):
    eq = equipment_service.create_equipment(db, body)
    return ok(_serialize(eq), status_code=201)


@router.get("/{equipment_id}")
def get_equipment(equipment_id: str, db: Session = Depends(get_db)):
    eq = equipment_service.get_equipment(db, parse_id(equipment_id, "equipment"), with_related=True)
    return ok(_serialize_detail(eq))


@router.put("/{equipment_id}")
def update_equipment(equipment_id: str, body: EquipmentUpdate, db: Session = Depends(get_db)):
    eq = equipment_service.update_equipment(db, parse_id(equipment_id, "equipment"), body)
    return ok(_serialize(eq))


@router.delete("/{equipment_id}")
def delete_equipment(equipment_id: str, db: Session = Depends(get_db)):
    equipment_service.delete_equipment(db, parse_id(equipment_id, "equipment"))
    return ok({"message": "Equipment deleted successfully"})
