from .department import Department
from .team import MaintenanceTeam
from .employee import Employee
from .technician import Technician
from .category import EquipmentCategory
from .equipment import Equipment
from .maintenance_request import MaintenanceRequest
__all__ = ["Department","MaintenanceTeam","Employee","Technician","EquipmentCategory","Equipment","MaintenanceRequest"]
