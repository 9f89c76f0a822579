# backend/gearguard/services/maintenance_service.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..core.db import as_utc, utcnow
from ..domain.constants import RequestType, Stage
from ..domain.lifecycle import Accepted, check_requirements, transition
from ..models import Employee, Equipment, EquipmentCategory, MaintenanceRequest, MaintenanceTeam, Technician
from ..schemas.maintenance import RequestCreate, RequestUpdate

logger = logging.getLogger(__name__)

_DETAIL_OPTIONS = (
    joinedload(MaintenanceRequest.equipment),
    joinedload(MaintenanceRequest.category),
    joinedload(MaintenanceRequest.team),
    joinedload(MaintenanceRequest.requested_by),
    joinedload(MaintenanceRequest.assigned_to).joinedload(Technician.employee),
)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Maintenance request write rejected: %s", getattr(e, "orig", e))
        raise HTTPException(status_code=400, detail="Referenced record does not exist")


def _check_technician(db: Session, technician_id: Optional[int]) -> None:
    if technician_id is not None and db.get(Technician, technician_id) is None:
        raise HTTPException(status_code=404, detail="Technician not found")


def _check_reference(db: Session, model, ident: Optional[int], label: str) -> None:
    if ident is not None and db.get(model, ident) is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")


# -------- Requests --------
def list_requests(
    db: Session, *,
    stage: Optional[str] = None,
    request_type: Optional[str] = None,
    equipment_id: Optional[int] = None,
    team_id: Optional[int] = None,
) -> List[MaintenanceRequest]:
    q = db.query(MaintenanceRequest)
    if stage:
        q = q.filter(MaintenanceRequest.Stage == stage)
    if request_type:
        q = q.filter(MaintenanceRequest.RequestType == request_type)
    if equipment_id is not None:
        q = q.filter(MaintenanceRequest.EquipmentID == equipment_id)
    if team_id is not None:
        q = q.filter(MaintenanceRequest.TeamID == team_id)
    return q.order_by(MaintenanceRequest.RequestID.desc()).all()


def get_request(db: Session, request_id: int) -> MaintenanceRequest:
    req = (
        db.query(MaintenanceRequest)
          .options(*_DETAIL_OPTIONS)
          .filter(MaintenanceRequest.RequestID == request_id)
          .first()
    )
    if not req:
        raise HTTPException(status_code=404, detail="Request not found")
    return req


def create_request(db: Session, data: RequestCreate, *, requested_by: int) -> MaintenanceRequest:
    equipment = db.get(Equipment, data.equipmentId)
    if not equipment:
        raise HTTPException(status_code=404, detail="Equipment not found")

    scheduled = as_utc(data.scheduledDate)
    rejected = check_requirements(Stage.NEW, data.requestType, scheduled, None)
    if rejected is not None:
        raise HTTPException(status_code=400, detail=rejected.reason)

    requester = data.requestedById or requested_by
    if db.get(Employee, requester) is None:
        raise HTTPException(status_code=404, detail="Requesting employee not found")
    _check_technician(db, data.assignedToId)
    _check_reference(db, EquipmentCategory, data.equipmentCategoryId, "Category")
    _check_reference(db, MaintenanceTeam, data.maintenanceTeamId, "Team")

    req = MaintenanceRequest(
        Subject=data.subject.strip(),
        Description=data.description,
        EquipmentID=equipment.EquipmentID,
        CategoryID=data.equipmentCategoryId or equipment.CategoryID,
        TeamID=data.maintenanceTeamId or equipment.TeamID,
        RequestType=data.requestType.value,
        Stage=Stage.NEW.value,
        RequestedByID=requester,
        AssignedToID=data.assignedToId,
        ScheduledDate=scheduled,
    )
    db.add(req)
    _commit(db)
    logger.info("Maintenance request %s opened on equipment %s", req.RequestID, req.EquipmentID)
    return get_request(db, req.RequestID)


def update_request(db: Session, request_id: int, data: RequestUpdate, now: Optional[datetime] = None) -> MaintenanceRequest:
    req = get_request(db, request_id)
    scheduled = as_utc(data.scheduledDate)

    outcome = transition(
        Stage(req.Stage),
        stage=data.stage,
        request_type=data.requestType,
        scheduled_date=scheduled,
        duration_hours=data.durationHours,
        completed_date=as_utc(data.completedDate),
        now=now or utcnow(),
    )
    if not isinstance(outcome, Accepted):
        raise HTTPException(status_code=400, detail=outcome.reason)

    if "assignedToId" in data.model_fields_set:
        _check_technician(db, data.assignedToId)
        req.AssignedToID = data.assignedToId

    previous = req.Stage
    req.Subject = data.subject.strip()
    req.Description = data.description
    req.RequestType = data.requestType.value
    req.Stage = outcome.stage.value
    req.ScheduledDate = scheduled
    req.CompletedDate = outcome.completed_date
    req.DurationHours = data.durationHours
    # stage and completion date go out in the same UPDATE
    _commit(db)

    if previous != req.Stage:
        logger.info("Maintenance request %s: %s -> %s", request_id, previous, req.Stage)
    db.expire(req)
    return get_request(db, request_id)


def scrap_request(db: Session, request_id: int, now: Optional[datetime] = None) -> MaintenanceRequest:
    req = get_request(db, request_id)
    outcome = transition(
        Stage(req.Stage),
        stage=Stage.SCRAPPED,
        request_type=RequestType(req.RequestType),
        scheduled_date=as_utc(req.ScheduledDate),
        duration_hours=req.DurationHours,
        completed_date=as_utc(req.CompletedDate),
        now=now or utcnow(),
    )
    if not isinstance(outcome, Accepted):
        raise HTTPException(status_code=400, detail=outcome.reason)

    req.Stage = outcome.stage.value
    _commit(db)
    logger.info("Maintenance request %s scrapped", request_id)
    db.expire(req)
    return get_request(db, request_id)


def delete_request(db: Session, request_id: int) -> None:
    req = db.get(MaintenanceRequest, request_id)
    if not req:
        raise HTTPException(status_code=404, detail="Request not found")
    db.delete(req)
    _commit(db)
    logger.info("Maintenance request %s deleted", request_id)


# -------- Calendar --------
def month_bounds(year: int, month: int) -> tuple:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def scheduled_in_month(db: Session, *, year: int, month: int,
                       request_type: Optional[str] = None) -> Dict[str, List[MaintenanceRequest]]:
    """Requests whose scheduled date falls in the month, keyed by ISO day."""
    start, end = month_bounds(year, month)
    q = (
        db.query(MaintenanceRequest)
          .filter(MaintenanceRequest.ScheduledDate.isnot(None))
          .filter(MaintenanceRequest.ScheduledDate >= start)
          .filter(MaintenanceRequest.ScheduledDate < end)
    )
    if request_type:
        q = q.filter(MaintenanceRequest.RequestType == request_type)

    days: Dict[str, List[MaintenanceRequest]] = {}
    for r in q.order_by(MaintenanceRequest.ScheduledDate.asc()).all():
        key = as_utc(r.ScheduledDate).date().isoformat()
        days.setdefault(key, []).append(r)
    return days
