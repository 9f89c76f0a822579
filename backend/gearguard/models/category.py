from sqlalchemy import Column, Integer, String
from ..core.db import Base, TimestampMixin

class EquipmentCategory(TimestampMixin, Base):
    __tablename__ = "EquipmentCategory"

    CategoryID = Column(Integer, primary_key=True, autoincrement=True)
    Name       = Column(String(100), nullable=False)

    # no relationship to Equipment: deleting a referenced category must fail in the DB
