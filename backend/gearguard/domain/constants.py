# backend/gearguard/domain/constants.py

"""
Single source for the enumerated values used across the application.

Every enumerated column (roles, stages, request types, equipment status)
is stored as a plain string guarded by a CHECK constraint built from these
tuples, so the database and the API agree on one spelling.
"""

from enum import Enum
from typing import Final, Tuple


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"
    TECHNICIAN = "TECHNICIAN"


class Stage(str, Enum):
    NEW = "NEW"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    REPAIRED = "REPAIRED"
    SCRAPPED = "SCRAPPED"


class RequestType(str, Enum):
    CORRECTIVE = "CORRECTIVE"
    PREVENTIVE = "PREVENTIVE"
    PREDICTIVE = "PREDICTIVE"


class EquipmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"


ROLES: Final[Tuple[str, ...]] = tuple(r.value for r in Role)
STAGES: Final[Tuple[str, ...]] = tuple(s.value for s in Stage)
REQUEST_TYPES: Final[Tuple[str, ...]] = tuple(t.value for t in RequestType)
EQUIPMENT_STATUSES: Final[Tuple[str, ...]] = tuple(s.value for s in EquipmentStatus)

TERMINAL_STAGES: Final[Tuple[Stage, ...]] = (Stage.REPAIRED, Stage.SCRAPPED)

# role given to self-registered employees
DEFAULT_SIGNUP_ROLE: Final[Role] = Role.USER


def sql_in(values: Tuple[str, ...]) -> str:
    """Render a tuple as the body of a SQL ``IN (...)`` list for CHECK constraints."""
    return ",".join(f"'{v}'" for v in values)
