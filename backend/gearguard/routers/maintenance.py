from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.api import iso, list_meta, ok, parse_id
from ..core.db import get_db, utcnow
from ..core.security import require_roles, require_session
from ..domain.constants import RequestType, Role, Stage
from ..models import MaintenanceRequest
from ..schemas.maintenance import RequestCreate, RequestUpdate
from ..schemas.user import SessionUser
from ..services import maintenance_service

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"], dependencies=[Depends(require_session)])


def _serialize(r: MaintenanceRequest) -> dict:
    return {
        "id": r.RequestID,
        "subject": r.Subject,
        "description": r.Description,
        "equipmentId": r.EquipmentID,
        "equipmentCategoryId": r.CategoryID,
        "maintenanceTeamId": r.TeamID,
        "requestType": r.RequestType,
        "stage": r.Stage,
        "requestedById": r.RequestedByID,
        "assignedToId": r.AssignedToID,
        "scheduledDate": iso(r.ScheduledDate),
        "completedDate": iso(r.CompletedDate),
        "durationHours": r.DurationHours,
        "createdAt": iso(r.CreatedAt),
        "updatedAt": iso(r.UpdatedAt),
    }


def _serialize_detail(r: MaintenanceRequest) -> dict:
    data = _serialize(r)
    eq = r.equipment
    tech = r.assigned_to
    data.update(
        equipment={"id": eq.EquipmentID, "name": eq.Name, "serialNumber": eq.SerialNumber} if eq else None,
        category={"id": r.category.CategoryID, "name": r.category.Name} if r.category else None,
        maintenanceTeam={"id": r.team.TeamID, "name": r.team.Name} if r.team else None,
        requestedBy=(
            {"id": r.requested_by.EmployeeID, "name": r.requested_by.Name, "email": r.requested_by.Email}
            if r.requested_by else None
        ),
        assignedTo=(
            {"id": tech.TechnicianID, "name": tech.employee.Name, "email": tech.employee.Email}
            if tech else None
        ),
    )
    return data


@router.get("")
def list_requests(
    stage: Optional[Stage] = Query(None),
    requestType: Optional[RequestType] = Query(None),
    equipmentId: Optional[int] = Query(None, ge=1),
    teamId: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    rows = maintenance_service.list_requests(
        db,
        stage=stage.value if stage else None,
        request_type=requestType.value if requestType else None,
        equipment_id=equipmentId,
        team_id=teamId,
    )
    items = [_serialize(r) for r in rows]
    return ok(items, meta=list_meta(items))


@router.post("", status_code=201)
def create_request(
    body: RequestCreate,
    current: SessionUser = Depends(require_session),
    db: Session = Depends(get_db),
):
    req = maintenance_service.create_request(db, body, requested_by=current.id)
    return ok(_serialize_detail(req), status_code=201)


# declared before /{request_id} so "calendar" is not taken for an id
@router.get("/calendar")
def calendar_month(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    requestType: Optional[RequestType] = Query(None),
    db: Session = Depends(get_db),
):
    today = utcnow()
    year = year or today.year
    month = month or today.month
    days = maintenance_service.scheduled_in_month(
        db, year=year, month=month, request_type=requestType.value if requestType else None
    )
    data = {day: [_serialize(r) for r in rows] for day, rows in days.items()}
    meta = {"year": year, "month": month, "count": sum(len(v) for v in days.values())}
    return ok(data, meta=meta)


@router.get("/{request_id}")
def get_request(request_id: str, db: Session = Depends(get_db)):
    req = maintenance_service.get_request(db, parse_id(request_id, "request"))
    return ok(_serialize_detail(req))


@router.put("/{request_id}")
def update_request(request_id: str, body: RequestUpdate, db: Session = Depends(get_db)):
    req = maintenance_service.update_request(db, parse_id(request_id, "request"), body)
    return ok(_serialize_detail(req))


@router.post("/{request_id}/scrap")
def scrap_request(request_id: str, db: Session = Depends(get_db)):
    req = maintenance_service.scrap_request(db, parse_id(request_id, "request"))
    return ok(_serialize_detail(req))


@router.delete("/{request_id}", dependencies=[Depends(require_roles(Role.ADMIN))])
def delete_request(request_id: str, db: Session = Depends(get_db)):
    maintenance_service.delete_request(db, parse_id(request_id, "request"))
    return ok({"message": "Request deleted successfully"})
