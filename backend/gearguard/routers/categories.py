from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.api import iso, list_meta, ok, parse_id
from ..core.db import get_db
from ..core.security import require_session
from ..models import EquipmentCategory
from ..schemas.category import CategoryIn
from ..services import category_service

router = APIRouter(prefix="/api/categories", tags=["categories"], dependencies=[Depends(require_session)])


def _serialize(c: EquipmentCategory) -> dict:
    return {
        "id": c.CategoryID,
        "name": c.Name,
        "createdAt": iso(c.CreatedAt),
        "updatedAt": iso(c.UpdatedAt),
    }


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    items = [_serialize(c) for c in category_service.list_categories(db)]
    return ok(items, meta=list_meta(items))


@router.post("", status_code=201)
def create_category(body: CategoryIn, db: Session = Depends(get_db)):
    cat = category_service.create_category(db, name=body.name)
    return ok(_serialize(cat), status_code=201)


@router.get("/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_db)):
    cat = category_service.get_category(db, parse_id(category_id, "category"))
    return ok(_serialize(cat))


@router.put("/{category_id}")
def update_category(category_id: str, body: CategoryIn, db: Session = Depends(get_db)):
    cat = category_service.rename_category(db, parse_id(category_id, "category"), name=body.name)
    return ok(_serialize(cat))


@router.delete("/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    category_service.delete_category(db, parse_id(category_id, "category"))
    return ok({"message": "Category deleted successfully"})
