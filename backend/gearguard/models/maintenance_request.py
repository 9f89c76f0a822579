from sqlalchemy import (
    Column, Integer, String, Text, Float, DateTime, ForeignKey, CheckConstraint, text
)
from sqlalchemy.orm import relationship
from ..core.db import Base, TimestampMixin
from ..domain.constants import REQUEST_TYPES, STAGES, sql_in

class MaintenanceRequest(TimestampMixin, Base):
    __tablename__ = "MaintenanceRequest"

    RequestID     = Column(Integer, primary_key=True, autoincrement=True)
    Subject       = Column(String(200), nullable=False)
    Description   = Column(Text)
    EquipmentID   = Column(Integer, ForeignKey("Equipment.EquipmentID"), nullable=False, index=True)
    # snapshot of the equipment's category/team when the request was opened
    CategoryID    = Column(Integer, ForeignKey("EquipmentCategory.CategoryID", ondelete="SET NULL"))
    TeamID        = Column(Integer, ForeignKey("MaintenanceTeam.TeamID", ondelete="SET NULL"))
    RequestType   = Column(String(20), nullable=False, server_default=text("'CORRECTIVE'"))
    Stage         = Column(String(20), nullable=False, default="NEW", server_default=text("'NEW'"), index=True)
    RequestedByID = Column(Integer, ForeignKey("Employee.EmployeeID", ondelete="SET NULL"))
    AssignedToID  = Column(Integer, ForeignKey("Technician.TechnicianID", ondelete="SET NULL"))
    ScheduledDate = Column(DateTime(timezone=True))
    CompletedDate = Column(DateTime(timezone=True))
    DurationHours = Column(Float)

    __table_args__ = (
        CheckConstraint(f"Stage in ({sql_in(STAGES)})", name="CK_Request_Stage"),
        CheckConstraint(f"RequestType in ({sql_in(REQUEST_TYPES)})", name="CK_Request_Type"),
    )

    equipment    = relationship("Equipment", back_populates="requests")
    category     = relationship("EquipmentCategory")
    team         = relationship("MaintenanceTeam")
    requested_by = relationship("Employee")
    assigned_to  = relationship("Technician")
