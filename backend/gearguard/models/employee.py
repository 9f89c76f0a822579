from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, CheckConstraint, text
)
from sqlalchemy.orm import relationship
from ..core.db import Base, TimestampMixin
from ..domain.constants import ROLES, sql_in

class Employee(TimestampMixin, Base):
    __tablename__ = "Employee"

    EmployeeID   = Column(Integer, primary_key=True, autoincrement=True)
    Name         = Column(String(100), nullable=False)
    Email        = Column(String(200), nullable=False, unique=True, index=True)
    PasswordHash = Column(String(255), nullable=False)
    Role         = Column(String(20),  nullable=False, server_default=text("'USER'"))
    DepartmentID = Column(Integer, ForeignKey("Department.DepartmentID", ondelete="SET NULL"))
    IsActive     = Column(Boolean,     nullable=False, default=True, server_default=text("1"))

    __table_args__ = (
        CheckConstraint(f"Role in ({sql_in(ROLES)})", name="CK_Employee_Role"),
    )

    department = relationship("Department", back_populates="employees")
    # 1-1: set only when the employee is designated a technician
    technician = relationship("Technician", back_populates="employee", uselist=False, passive_deletes=True)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Employee {self.Email} ({self.Role})>"
