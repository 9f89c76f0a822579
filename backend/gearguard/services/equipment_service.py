# backend/gearguard/services/equipment_service.py
from __future__ import annotations
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..models import Equipment
from ..schemas.equipment import EquipmentCreate, EquipmentUpdate

logger = logging.getLogger(__name__)

# body field -> column, for the references a PUT may move
_REFERENCE_FIELDS = {
    "categoryId": "CategoryID",
    "departmentId": "DepartmentID",
    "maintenanceTeamId": "TeamID",
    "defaultTechnicianId": "DefaultTechnicianID",
    "assignedEmployeeId": "AssignedEmployeeID",
}


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        msg = str(getattr(e, "orig", e))
        logger.info("%s rejected by the database: %s", what, msg)
        if "UNIQUE" in msg.upper() or "DUPLICATE" in msg.upper():
            raise HTTPException(status_code=400, detail="Serial number is already registered")
        raise HTTPException(status_code=400, detail="Referenced category, department, team, technician or employee does not exist")


def list_equipment(
    db: Session, *,
    q: Optional[str] = None,
    status: Optional[str] = None,
    category_id: Optional[int] = None,
    department_id: Optional[int] = None,
    team_id: Optional[int] = None,
) -> List[Equipment]:
    query = db.query(Equipment)
    if q:
        like = f"%{q.strip().lower()}%"
        query = query.filter(or_(Equipment.Name.ilike(like), Equipment.SerialNumber.ilike(like)))
    if status:
        query = query.filter(Equipment.Status == status)
    if category_id is not None:
        query = query.filter(Equipment.CategoryID == category_id)
    if department_id is not None:
        query = query.filter(Equipment.DepartmentID == department_id)
    if team_id is not None:
        query = query.filter(Equipment.TeamID == team_id)
    return query.order_by(Equipment.EquipmentID.desc()).all()


def get_equipment(db: Session, equipment_id: int, *, with_related: bool = False) -> Equipment:
    query = db.query(Equipment)
    if with_related:
        query = query.options(
            joinedload(Equipment.category),
            joinedload(Equipment.department),
            joinedload(Equipment.team),
            joinedload(Equipment.default_technician),
            joinedload(Equipment.assigned_employee),
        )
    eq = query.filter(Equipment.EquipmentID == equipment_id).first()
    if not eq:
        raise HTTPException(status_code=404, detail="Equipment not found")
    return eq


def create_equipment(db: Session, data: EquipmentCreate) -> Equipment:
    eq = Equipment(
        Name=data.name.strip(),
        SerialNumber=data.serialNumber.strip(),
        CategoryID=data.categoryId,
        DepartmentID=data.departmentId,
        TeamID=data.maintenanceTeamId,
        DefaultTechnicianID=data.defaultTechnicianId,
        AssignedEmployeeID=data.assignedEmployeeId,
        Location=data.location.strip(),
        PurchaseDate=data.purchaseDate,
        WarrantyExpiryDate=data.warrantyExpiryDate,
        Status=data.status.value,
        Notes=data.notes,
    )
    db.add(eq)
    _commit(db, "Equipment create")
    db.refresh(eq)
    return eq


def update_equipment(db: Session, equipment_id: int, data: EquipmentUpdate) -> Equipment:
    """
    Field-by-field overwrite. Dates not sent are cleared; location, status,
    notes and references are only touched when the body carries them.
    """
    if not (data.name or "").strip() or not (data.serialNumber or "").strip():
        raise HTTPException(status_code=400, detail="Name and serial number are required")

    eq = get_equipment(db, equipment_id)
    sent = data.model_fields_set

    eq.Name = data.name.strip()
    eq.SerialNumber = data.serialNumber.strip()
    eq.PurchaseDate = data.purchaseDate
    eq.WarrantyExpiryDate = data.warrantyExpiryDate
    if "location" in sent:
        eq.Location = data.location
    if "status" in sent and data.status is not None:
        eq.Status = data.status.value
    if "notes" in sent:
        eq.Notes = data.notes
    for field, column in _REFERENCE_FIELDS.items():
        if field in sent:
            value = getattr(data, field)
            if column == "CategoryID" and value is None:
                raise HTTPException(status_code=400, detail="Category is required")
            setattr(eq, column, value)

    _commit(db, "Equipment update")
    db.refresh(eq)
    return eq


def delete_equipment(db: Session, equipment_id: int) -> None:
    eq = get_equipment(db, equipment_id)
    try:
        db.delete(eq)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Equipment %s still referenced: %s", equipment_id, getattr(e, "orig", e))
        raise HTTPException(status_code=400, detail="Cannot delete equipment - it has maintenance requests")
