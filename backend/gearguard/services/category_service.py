# backend/gearguard/services/category_service.py
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import EquipmentCategory

logger = logging.getLogger(__name__)

CATEGORY_IN_USE = "Cannot delete category - it is being used by equipment"


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    return name


def list_categories(db: Session) -> List[EquipmentCategory]:
    return (
        db.query(EquipmentCategory)
          .order_by(EquipmentCategory.CreatedAt.desc(), EquipmentCategory.CategoryID.desc())
          .all()
    )


def get_category(db: Session, category_id: int) -> EquipmentCategory:
    cat = db.get(EquipmentCategory, category_id)
    if not cat:
        raise HTTPException(status_code=404, detail="Category not found")
    return cat


def create_category(db: Session, *, name: Optional[str]) -> EquipmentCategory:
    cat = EquipmentCategory(Name=_clean_name(name))
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


def rename_category(db: Session, category_id: int, *, name: Optional[str]) -> EquipmentCategory:
    clean = _clean_name(name)
    cat = get_category(db, category_id)
    cat.Name = clean
    db.commit()
    db.refresh(cat)
    return cat


def delete_category(db: Session, category_id: int) -> None:
    """
    Single DELETE statement; equipment still pointing at the category makes
    the database refuse it, which surfaces as a 400.
    """
    try:
        result = db.execute(
            delete(EquipmentCategory).where(EquipmentCategory.CategoryID == category_id)
        )
        if result.rowcount == 0:
            db.rollback()
            raise HTTPException(status_code=404, detail="Category not found")
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Category %s still referenced: %s", category_id, getattr(e, "orig", e))
        raise HTTPException(status_code=400, detail=CATEGORY_IN_USE)
