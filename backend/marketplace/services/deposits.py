"""
deposits.py
-- Deposit into a profile balance, capped by the profile's unpaid job exposure.
"""
from decimal import Decimal
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from .. import crud, models
from ..errors import DepositCapExceeded, ProfileNotFound, TransferFailed
from . import ledger

logger = logging.getLogger("deposits")

DEFAULT_CAP_RATIO = 1.25


def check_deposit(outstanding: Decimal, balance: Decimal, amount: Decimal, cap_ratio: float = DEFAULT_CAP_RATIO) -> Decimal:
    """Return the projected balance, or raise DepositCapExceeded.

    A deposit is accepted while the unpaid job total still covers the
    projected balance times ``cap_ratio``.
    """
    projected = Decimal(amount) + Decimal(balance)
    if Decimal(outstanding) < projected * Decimal(str(cap_ratio)):
        raise DepositCapExceeded(Decimal(outstanding), projected, cap_ratio)
    return projected


def deposit(
    db: Session,
    target_profile_id: int,
    amount: Decimal,
    cap_ratio: float = DEFAULT_CAP_RATIO,
    include_contractor_jobs: bool = True,
) -> models.Profile:
    profile = crud.get_profile(db, target_profile_id)
    if profile is None:
        raise ProfileNotFound(target_profile_id)

    # Best-effort read: not locked against concurrent payments
    outstanding = crud.unpaid_jobs_total(db, target_profile_id, include_contractor=include_contractor_jobs)
    try:
        projected = check_deposit(outstanding, Decimal(profile.balance), Decimal(amount), cap_ratio)
    except DepositCapExceeded as e:
        db.rollback()
        logger.info("Deposit of %s to profile %s rejected: %s", amount, target_profile_id, e)
        raise

    try:
        ledger.credit(db, target_profile_id, Decimal(amount))
        db.commit()
    except (SQLAlchemyError, LookupError) as e:
        db.rollback()
        logger.error("Deposit of %s to profile %s rolled back: %s", amount, target_profile_id, e)
        raise TransferFailed(f"could not deposit into profile id {target_profile_id}") from e

    db.refresh(profile)
    logger.info("Deposited %s to profile %s, projected balance %s", amount, target_profile_id, projected)
    return profile
