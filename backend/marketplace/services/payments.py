"""
payments.py
-- Pay for a job: debit the client, credit the contractor and mark the job
   paid as one all-or-nothing unit.
"""
from datetime import datetime
from decimal import Decimal
import logging
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from .. import crud, models
from ..errors import InsufficientFunds, JobNotFound, TransferFailed
from . import ledger

logger = logging.getLogger("payments")


def _mark_paid(db: Session, job_id: int, paid_at: datetime) -> bool:
    # Conditional on paid = false: the loser of a concurrent payment updates nothing
    stmt = (
        update(models.Job)
        .where(models.Job.id == job_id, models.Job.paid.is_(False))
        .values(paid=True, payment_date=paid_at)
    )
    return db.execute(stmt).rowcount == 1


def pay_job(db: Session, job_id: int, paying_profile_id: int) -> models.Job:
    """Pay ``job_id`` on behalf of ``paying_profile_id``.

    Only the client of the job's contract may pay, and only while the job is
    unpaid; anything else is reported as JobNotFound. Raises InsufficientFunds
    when the price exceeds the client's balance and TransferFailed when the
    database refuses the transaction. On any error nothing is persisted.
    """
    try:
        job = crud.get_payable_job(db, job_id, paying_profile_id)
        if job is None:
            db.rollback()
            raise JobNotFound(job_id)

        client_id = job.contract.client_id
        contractor_id = job.contract.contractor_id
        price = Decimal(job.price)
        if price <= 0:
            # Nothing to transfer; such a job is not payable
            db.rollback()
            raise JobNotFound(job_id)
        client = crud.get_profile(db, client_id)
        balance = Decimal(client.balance)
        if price > balance:
            db.rollback()
            raise InsufficientFunds(job_id, price, balance)

        try:
            ledger.transfer(db, client_id, contractor_id, price)
        except ledger.InsufficientBalance:
            db.rollback()
            raise InsufficientFunds(job_id, price, balance)
        if not _mark_paid(db, job_id, datetime.utcnow()):
            db.rollback()
            raise JobNotFound(job_id)
        db.commit()
    except (SQLAlchemyError, LookupError) as e:
        db.rollback()
        logger.error("Payment of job %s by profile %s rolled back: %s", job_id, paying_profile_id, e)
        raise TransferFailed(f"could not pay job id {job_id}") from e

    db.refresh(job)
    logger.info("Job %s paid: %s moved from profile %s to profile %s", job_id, price, client_id, contractor_id)
    return job
