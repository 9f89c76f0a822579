from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..core.db import Base, TimestampMixin

class MaintenanceTeam(TimestampMixin, Base):
    __tablename__ = "MaintenanceTeam"

    TeamID = Column(Integer, primary_key=True, autoincrement=True)
    Name   = Column(String(100), nullable=False, unique=True)

    # technician rows go with the team (ON DELETE CASCADE in the DB)
    technicians = relationship("Technician", back_populates="team", passive_deletes=True)
