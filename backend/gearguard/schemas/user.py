from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

from ..domain.constants import Role

class SignupIn(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    departmentId: Optional[int] = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

class LoginIn(BaseModel):
    # no format checks: a malformed login fails like any other
    email: str
    password: str

class SessionUser(BaseModel):
    """Identity and authorization claims carried in the session token."""
    model_config = ConfigDict(use_enum_values=True)

    id: int
    name: str
    email: str
    role: Role
    departmentId: Optional[int] = None
    departmentName: Optional[str] = None
    isTechnician: bool = False
    technicianId: Optional[int] = None
    maintenanceTeamId: Optional[int] = None
