# backend/gearguard/services/report_service.py
"""
Maintenance report aggregation.

Requests are fetched once and counted in memory. Every group row carries
``total`` plus one counter per stage and per request type, so the group
totals always add up to the number of requests fetched.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy.orm import Session, joinedload

from ..core.db import as_utc, utcnow
from ..domain.constants import TERMINAL_STAGES, RequestType, Stage
from ..models import MaintenanceRequest

VIEWS = ("team", "category")

# camelCase counter name per stage / type
STAGE_KEYS = {
    Stage.NEW.value: "new",
    Stage.ASSIGNED.value: "assigned",
    Stage.IN_PROGRESS.value: "inProgress",
    Stage.REPAIRED.value: "repaired",
    Stage.SCRAPPED.value: "scrapped",
}
TYPE_KEYS = {
    RequestType.CORRECTIVE.value: "corrective",
    RequestType.PREVENTIVE.value: "preventive",
    RequestType.PREDICTIVE.value: "predictive",
}

CSV_COLUMNS = {
    "name": "Name",
    "total": "Total",
    "new": "New",
    "assigned": "Assigned",
    "inProgress": "In Progress",
    "repaired": "Repaired",
    "scrapped": "Scrapped",
    "corrective": "Corrective",
    "preventive": "Preventive",
    "predictive": "Predictive",
}

_CLOSED = {s.value for s in TERMINAL_STAGES}


def fetch_requests(db: Session) -> List[MaintenanceRequest]:
    return (
        db.query(MaintenanceRequest)
          .options(joinedload(MaintenanceRequest.team), joinedload(MaintenanceRequest.category))
          .all()
    )


def _empty_group(group_id: Optional[int], name: str) -> Dict[str, Any]:
    row: Dict[str, Any] = {"id": group_id, "name": name, "total": 0}
    row.update({k: 0 for k in STAGE_KEYS.values()})
    row.update({k: 0 for k in TYPE_KEYS.values()})
    return row


def group_requests(requests: List[MaintenanceRequest], view: str) -> List[Dict[str, Any]]:
    if view not in VIEWS:
        raise ValueError(f"unknown report view: {view}")

    groups: Dict[Optional[int], Dict[str, Any]] = {}
    for r in requests:
        if view == "team":
            key, owner, fallback = r.TeamID, r.team, "Unassigned team"
        else:
            key, owner, fallback = r.CategoryID, r.category, "Uncategorized"
        row = groups.get(key)
        if row is None:
            row = groups[key] = _empty_group(key, owner.Name if owner is not None else fallback)
        row["total"] += 1
        if r.Stage in STAGE_KEYS:
            row[STAGE_KEYS[r.Stage]] += 1
        if r.RequestType in TYPE_KEYS:
            row[TYPE_KEYS[r.RequestType]] += 1

    return sorted(groups.values(), key=lambda g: (-g["total"], g["name"]))


def stage_distribution(requests: List[MaintenanceRequest]) -> Dict[str, int]:
    dist = {s.value: 0 for s in Stage}
    for r in requests:
        if r.Stage in dist:
            dist[r.Stage] += 1
    return dist


def type_distribution(requests: List[MaintenanceRequest]) -> Dict[str, int]:
    dist = {t.value: 0 for t in RequestType}
    for r in requests:
        if r.RequestType in dist:
            dist[r.RequestType] += 1
    return dist


def totals(requests: List[MaintenanceRequest], now: Optional[datetime] = None) -> Dict[str, int]:
    now = now or utcnow()
    open_ = [r for r in requests if r.Stage not in _CLOSED]
    return {
        "total": len(requests),
        "active": len(open_),
        "assigned": sum(1 for r in open_ if r.AssignedToID is not None),
        "overdue": sum(1 for r in open_ if r.ScheduledDate is not None and as_utc(r.ScheduledDate) < now),
        # reported but not yet picked up
        "critical": sum(
            1 for r in requests
            if r.Stage == Stage.NEW.value and r.RequestType == RequestType.CORRECTIVE.value
        ),
        "repaired": sum(1 for r in requests if r.Stage == Stage.REPAIRED.value),
        "scrapped": sum(1 for r in requests if r.Stage == Stage.SCRAPPED.value),
    }


def summary(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    requests = fetch_requests(db)
    return {
        "byTeam": group_requests(requests, "team"),
        "byCategory": group_requests(requests, "category"),
        "stageDistribution": stage_distribution(requests),
        "typeDistribution": type_distribution(requests),
        "totals": totals(requests, now),
    }


def export_csv(db: Session, view: str) -> str:
    rows = group_requests(fetch_requests(db), view)
    df = pd.DataFrame(rows, columns=list(CSV_COLUMNS))
    return df.rename(columns=CSV_COLUMNS).to_csv(index=False)
