# backend/gearguard/schemas/maintenance.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..domain.constants import RequestType, Stage

# HTML forms post "" for untouched inputs
def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v

# ---- Requests ----
class RequestCreate(BaseModel):
    subject: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    equipmentId: int = Field(..., ge=1)
    requestType: RequestType = RequestType.CORRECTIVE
    scheduledDate: Optional[datetime] = None
    requestedById: Optional[int] = Field(default=None, ge=1)
    assignedToId: Optional[int] = Field(default=None, ge=1)
    # explicit overrides of the snapshot taken from the equipment
    equipmentCategoryId: Optional[int] = Field(default=None, ge=1)
    maintenanceTeamId: Optional[int] = Field(default=None, ge=1)

    @field_validator(
        "description", "scheduledDate", "requestedById", "assignedToId",
        "equipmentCategoryId", "maintenanceTeamId", mode="before"
    )
    @classmethod
    def _blanks(cls, v):
        return _blank_to_none(v)

class RequestUpdate(BaseModel):
    """Full overwrite of the editable fields; assignedToId only when sent."""
    subject: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    requestType: RequestType
    stage: Stage
    scheduledDate: Optional[datetime] = None
    completedDate: Optional[datetime] = None
    durationHours: Optional[float] = Field(default=None, ge=0)
    assignedToId: Optional[int] = Field(default=None, ge=1)

    @field_validator(
        "description", "scheduledDate", "completedDate", "durationHours", "assignedToId", mode="before"
    )
    @classmethod
    def _blanks(cls, v):
        return _blank_to_none(v)
