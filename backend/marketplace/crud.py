from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import and_, func, or_, select
from . import models


def get_profile(db: Session, profile_id: int) -> models.Profile | None:
    return db.get(models.Profile, profile_id)


def get_contract(db: Session, contract_id: int) -> models.Contract | None:
    return db.get(models.Contract, contract_id)


def list_active_contracts(db: Session, profile_id: int) -> list[models.Contract]:
    stmt = (
        select(models.Contract)
        .where(
            or_(models.Contract.client_id == profile_id, models.Contract.contractor_id == profile_id),
            models.Contract.status != models.TERMINATED,
        )
        .order_by(models.Contract.id)
    )
    return list(db.scalars(stmt).all())


def _party_filter(profile_id: int, include_contractor: bool = True):
    if include_contractor:
        return or_(models.Contract.client_id == profile_id, models.Contract.contractor_id == profile_id)
    return models.Contract.client_id == profile_id


def list_unpaid_jobs(db: Session, profile_id: int) -> list[models.Job]:
    stmt = (
        select(models.Job)
        .join(models.Contract)
        .where(models.Job.paid.is_(False), _party_filter(profile_id))
        .order_by(models.Job.id)
    )
    return list(db.scalars(stmt).all())


def unpaid_jobs_total(db: Session, profile_id: int, include_contractor: bool = True) -> Decimal:
    stmt = (
        select(func.coalesce(func.sum(models.Job.price), 0))
        .join(models.Contract)
        .where(models.Job.paid.is_(False), _party_filter(profile_id, include_contractor))
    )
    return Decimal(str(db.scalar(stmt)))


def get_payable_job(db: Session, job_id: int, client_id: int) -> models.Job | None:
    """Unpaid job whose contract has ``client_id`` as client, row-locked where supported."""
    stmt = (
        select(models.Job)
        .join(models.Contract)
        .where(and_(models.Job.id == job_id, models.Job.paid.is_(False), models.Contract.client_id == client_id))
        .with_for_update(of=models.Job)
    )
    return db.scalar(stmt)
