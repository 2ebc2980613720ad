from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from ..auth import get_profile
from ..config import Settings, get_settings
from ..db import get_db
from ..services import reports
from ..utils import ensure_not_none
from .. import schemas


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_profile)])


def _check_range(start: datetime, end: datetime):
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")


@router.get("/best-profession", response_model=schemas.BestProfession)
def best_profession(start: datetime, end: datetime, db: Session = Depends(get_db)):
    _check_range(start, end)
    return ensure_not_none(reports.best_profession(db, start, end), "no paid jobs in range")


@router.get("/best-clients", response_model=list[schemas.BestClient])
def best_clients(
    start: datetime,
    end: datetime,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    _check_range(start, end)
    rows = reports.best_clients(db, start, end, limit or settings.best_clients_default_limit)
    if not rows:
        raise HTTPException(status_code=404, detail="no paid jobs in range")
    return rows
