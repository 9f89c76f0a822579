from sqlalchemy import (
    Column, Integer, String, Date, Text, ForeignKey, CheckConstraint, text
)
from sqlalchemy.orm import relationship
from ..core.db import Base, TimestampMixin
from ..domain.constants import EQUIPMENT_STATUSES, sql_in

class Equipment(TimestampMixin, Base):
    __tablename__ = "Equipment"

    EquipmentID         = Column(Integer, primary_key=True, autoincrement=True)
    Name                = Column(String(200), nullable=False)
    SerialNumber        = Column(String(100), nullable=False, unique=True)
    CategoryID          = Column(Integer, ForeignKey("EquipmentCategory.CategoryID"), nullable=False, index=True)
    DepartmentID        = Column(Integer, ForeignKey("Department.DepartmentID", ondelete="SET NULL"))
    TeamID              = Column(Integer, ForeignKey("MaintenanceTeam.TeamID", ondelete="SET NULL"))
    DefaultTechnicianID = Column(Integer, ForeignKey("Technician.TechnicianID", ondelete="SET NULL"))
    AssignedEmployeeID  = Column(Integer, ForeignKey("Employee.EmployeeID", ondelete="SET NULL"))
    Location            = Column(String(200))
    PurchaseDate        = Column(Date)
    WarrantyExpiryDate  = Column(Date)
    Status              = Column(String(20), nullable=False, default="ACTIVE", server_default=text("'ACTIVE'"))
    Notes               = Column(Text)

    __table_args__ = (
        CheckConstraint(f"Status in ({sql_in(EQUIPMENT_STATUSES)})", name="CK_Equipment_Status"),
    )

    category           = relationship("EquipmentCategory")
    department         = relationship("Department")
    team               = relationship("MaintenanceTeam")
    default_technician = relationship("Technician")
    assigned_employee  = relationship("Employee")

    # the DB refuses to drop equipment that still has requests
    requests = relationship("MaintenanceRequest", back_populates="equipment", passive_deletes="all")
