"""initial gearguard schema

Revision ID: 5c1e0a7d2b91
Revises:
Create Date: 2026-10-19 10:12:41.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1e0a7d2b91"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("CreatedAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("UpdatedAt", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        "Department",
        sa.Column("DepartmentID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(100), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "MaintenanceTeam",
        sa.Column("TeamID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(100), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "EquipmentCategory",
        sa.Column("CategoryID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(100), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "Employee",
        sa.Column("EmployeeID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(100), nullable=False),
        sa.Column("Email", sa.String(200), nullable=False, unique=True),
        sa.Column("PasswordHash", sa.String(255), nullable=False),
        sa.Column("Role", sa.String(20), nullable=False, server_default=sa.text("'USER'")),
        sa.Column("DepartmentID", sa.Integer(),
                  sa.ForeignKey("Department.DepartmentID", ondelete="SET NULL")),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("Role in ('ADMIN','MANAGER','USER','TECHNICIAN')", name="CK_Employee_Role"),
    )
    op.create_index("ix_Employee_Email", "Employee", ["Email"], unique=False)

    op.create_table(
        "Technician",
        sa.Column("TechnicianID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("EmployeeID", sa.Integer(),
                  sa.ForeignKey("Employee.EmployeeID", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("TeamID", sa.Integer(),
                  sa.ForeignKey("MaintenanceTeam.TeamID", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "Equipment",
        sa.Column("EquipmentID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(200), nullable=False),
        sa.Column("SerialNumber", sa.String(100), nullable=False, unique=True),
        sa.Column("CategoryID", sa.Integer(),
                  sa.ForeignKey("EquipmentCategory.CategoryID"), nullable=False),
        sa.Column("DepartmentID", sa.Integer(),
                  sa.ForeignKey("Department.DepartmentID", ondelete="SET NULL")),
        sa.Column("TeamID", sa.Integer(),
                  sa.ForeignKey("MaintenanceTeam.TeamID", ondelete="SET NULL")),
        sa.Column("DefaultTechnicianID", sa.Integer(),
                  sa.ForeignKey("Technician.TechnicianID", ondelete="SET NULL")),
        sa.Column("AssignedEmployeeID", sa.Integer(),
                  sa.ForeignKey("Employee.EmployeeID", ondelete="SET NULL")),
        sa.Column("Location", sa.String(200)),
        sa.Column("PurchaseDate", sa.Date()),
        sa.Column("WarrantyExpiryDate", sa.Date()),
        sa.Column("Status", sa.String(20), nullable=False, server_default=sa.text("'ACTIVE'")),
        sa.Column("Notes", sa.Text()),
        *_timestamps(),
        sa.CheckConstraint("Status in ('ACTIVE','INACTIVE','MAINTENANCE','RETIRED')", name="CK_Equipment_Status"),
    )
    op.create_index("ix_Equipment_CategoryID", "Equipment", ["CategoryID"], unique=False)

    op.create_table(
        "MaintenanceRequest",
        sa.Column("RequestID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Subject", sa.String(200), nullable=False),
        sa.Column("Description", sa.Text()),
        sa.Column("EquipmentID", sa.Integer(),
                  sa.ForeignKey("Equipment.EquipmentID"), nullable=False),
        sa.Column("CategoryID", sa.Integer(),
                  sa.ForeignKey("EquipmentCategory.CategoryID", ondelete="SET NULL")),
        sa.Column("TeamID", sa.Integer(),
                  sa.ForeignKey("MaintenanceTeam.TeamID", ondelete="SET NULL")),
        sa.Column("RequestType", sa.String(20), nullable=False, server_default=sa.text("'CORRECTIVE'")),
        sa.Column("Stage", sa.String(20), nullable=False, server_default=sa.text("'NEW'")),
        sa.Column("RequestedByID", sa.Integer(),
                  sa.ForeignKey("Employee.EmployeeID", ondelete="SET NULL")),
        sa.Column("AssignedToID", sa.Integer(),
                  sa.ForeignKey("Technician.TechnicianID", ondelete="SET NULL")),
        sa.Column("ScheduledDate", sa.DateTime(timezone=True)),
        sa.Column("CompletedDate", sa.DateTime(timezone=True)),
        sa.Column("DurationHours", sa.Float()),
        *_timestamps(),
        sa.CheckConstraint("Stage in ('NEW','ASSIGNED','IN_PROGRESS','REPAIRED','SCRAPPED')", name="CK_Request_Stage"),
        sa.CheckConstraint("RequestType in ('CORRECTIVE','PREVENTIVE','PREDICTIVE')", name="CK_Request_Type"),
    )
    op.create_index("ix_MaintenanceRequest_EquipmentID", "MaintenanceRequest", ["EquipmentID"], unique=False)
    op.create_index("ix_MaintenanceRequest_Stage", "MaintenanceRequest", ["Stage"], unique=False)


def downgrade():
    op.drop_index("ix_MaintenanceRequest_Stage", table_name="MaintenanceRequest")
    op.drop_index("ix_MaintenanceRequest_EquipmentID", table_name="MaintenanceRequest")
    op.drop_table("MaintenanceRequest")
    op.drop_index("ix_Equipment_CategoryID", table_name="Equipment")
    op.drop_table("Equipment")
    op.drop_table("Technician")
    op.drop_index("ix_Employee_Email", table_name="Employee")
    op.drop_table("Employee")
    op.drop_table("EquipmentCategory")
    op.drop_table("MaintenanceTeam")
    op.drop_table("Department")
