"""
reports.py
-- Admin aggregates over paid jobs in a payment date range
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from .. import models


def _paid_between(start: datetime, end: datetime):
    return (
        models.Job.paid.is_(True),
        models.Job.payment_date >= start,
        models.Job.payment_date <= end,
    )


def best_profession(db: Session, start: datetime, end: datetime) -> Optional[Dict[str, Any]]:
    """Profession whose contractors earned the most in [start, end]."""
    earned = func.sum(models.Job.price).label("earned")
    stmt = (
        select(models.Profile.profession, earned)
        .select_from(models.Job)
        .join(models.Contract, models.Job.contract_id == models.Contract.id)
        .join(models.Profile, models.Contract.contractor_id == models.Profile.id)
        .where(*_paid_between(start, end))
        .group_by(models.Profile.profession)
        .order_by(earned.desc(), models.Profile.profession)
        .limit(1)
    )
    row = db.execute(stmt).first()
    if row is None:
        return None
    return {"profession": row.profession, "earned": row.earned}


def best_clients(db: Session, start: datetime, end: datetime, limit: int = 2) -> List[Dict[str, Any]]:
    paid = func.sum(models.Job.price).label("paid")
    stmt = (
        select(models.Profile, paid)
        .select_from(models.Job)
        .join(models.Contract, models.Job.contract_id == models.Contract.id)
        .join(models.Profile, models.Contract.client_id == models.Profile.id)
        .where(*_paid_between(start, end))
        .group_by(models.Profile.id)
        .order_by(paid.desc(), models.Profile.id)
        .limit(limit)
    )
    return [
        {"client_id": r.Profile.id, "fullname": r.Profile.full_name, "paid": r.paid}
        for r in db.execute(stmt).all()
    ]
