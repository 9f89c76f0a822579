# backend/gearguard/routers/reports.py
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..core.api import ok
from ..core.db import get_db, utcnow
from ..core.security import require_session
from ..services import report_service

router = APIRouter(prefix="/api/reports", tags=["reports"], dependencies=[Depends(require_session)])


# =========================
# SUMMARY
# =========================
@router.get("/summary")
def report_summary(db: Session = Depends(get_db)):
    now = utcnow()
    data = report_service.summary(db, now=now)
    meta = {"asOf": now.isoformat(), "tz": "UTC"}
    return ok(data, meta=meta)


# =========================
# CSV EXPORT
# =========================
@router.get("/export")
def report_export(
    view: str = Query("team", pattern="^(team|category)$", description="team | category"),
    db: Session = Depends(get_db),
):
    body = report_service.export_csv(db, view)
    filename = f"maintenance-report-{view}-{utcnow().date().isoformat()}.csv"
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
