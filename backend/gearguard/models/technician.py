from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from ..core.db import Base, TimestampMixin

class Technician(TimestampMixin, Base):
    __tablename__ = "Technician"

    TechnicianID = Column(Integer, primary_key=True, autoincrement=True)
    EmployeeID   = Column(Integer, ForeignKey("Employee.EmployeeID", ondelete="CASCADE"), nullable=False, unique=True)
    TeamID       = Column(Integer, ForeignKey("MaintenanceTeam.TeamID", ondelete="CASCADE"), nullable=False)

    employee = relationship("Employee", back_populates="technician")
    team     = relationship("MaintenanceTeam", back_populates="technicians")
