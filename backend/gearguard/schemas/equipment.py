from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..domain.constants import EquipmentStatus

def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v

class EquipmentCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    serialNumber: str = Field(min_length=2, max_length=100)
    categoryId: int
    departmentId: int
    maintenanceTeamId: int
    defaultTechnicianId: Optional[int] = None
    assignedEmployeeId: Optional[int] = None
    location: str = Field(min_length=2, max_length=200)
    purchaseDate: date
    warrantyExpiryDate: Optional[date] = None
    status: EquipmentStatus = EquipmentStatus.ACTIVE
    notes: Optional[str] = None

    @field_validator(
        "defaultTechnicianId", "assignedEmployeeId", "warrantyExpiryDate", "notes", mode="before"
    )
    @classmethod
    def _blanks(cls, v):
        return _blank_to_none(v)

class EquipmentUpdate(BaseModel):
    """PUT body; name and serial number presence is enforced by the service."""
    name: Optional[str] = None
    serialNumber: Optional[str] = None
    location: Optional[str] = None
    purchaseDate: Optional[date] = None
    warrantyExpiryDate: Optional[date] = None
    status: Optional[EquipmentStatus] = None
    notes: Optional[str] = None
    categoryId: Optional[int] = None
    departmentId: Optional[int] = None
    maintenanceTeamId: Optional[int] = None
    defaultTechnicianId: Optional[int] = None
    assignedEmployeeId: Optional[int] = None

    @field_validator(
        "purchaseDate", "warrantyExpiryDate", "status", "categoryId", "departmentId",
        "maintenanceTeamId", "defaultTechnicianId", "assignedEmployeeId", mode="before"
    )
    @classmethod
    def _blanks(cls, v):
        return _blank_to_none(v)
