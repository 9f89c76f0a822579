from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..core.db import Base, TimestampMixin

class Department(TimestampMixin, Base):
    __tablename__ = "Department"

    DepartmentID = Column(Integer, primary_key=True, autoincrement=True)
    Name         = Column(String(100), nullable=False, unique=True)

    employees = relationship("Employee", back_populates="department")
