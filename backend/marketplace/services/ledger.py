"""
ledger.py
-- Balance mutations as SQL numeric deltas. Callers own the transaction.
"""
from decimal import Decimal
import logging
from sqlalchemy import update
from sqlalchemy.orm import Session
from .. import models

logger = logging.getLogger("ledger")


class InsufficientBalance(Exception):
    """Guarded debit matched no row: the payer's balance is below the amount."""


def _apply_delta(db: Session, profile_id: int, delta: Decimal, floor: Decimal | None = None) -> int:
    stmt = (
        update(models.Profile)
        .where(models.Profile.id == profile_id)
        .values(balance=models.Profile.balance + delta)
    )
    if floor is not None:
        stmt = stmt.where(models.Profile.balance >= floor)
    return db.execute(stmt).rowcount


def transfer(db: Session, payer_id: int, payee_id: int, amount: Decimal) -> None:
    """Move ``amount`` from payer to payee inside the caller's transaction.

    The debit only applies while the payer still holds ``amount``, so a
    concurrent spend cannot push the balance below zero.
    """
    if amount <= 0:
        raise ValueError("transfer amount must be positive")
    if _apply_delta(db, payer_id, -amount, floor=amount) != 1:
        raise InsufficientBalance(payer_id)
    if _apply_delta(db, payee_id, amount) != 1:
        raise LookupError(f"payee profile {payee_id} not found")
    logger.debug("Transferred %s from profile %s to profile %s", amount, payer_id, payee_id)


def credit(db: Session, profile_id: int, amount: Decimal) -> None:
    if amount <= 0:
        raise ValueError("credit amount must be positive")
    if _apply_delta(db, profile_id, amount) != 1:
        raise LookupError(f"profile {profile_id} not found")
    logger.debug("Credited %s to profile %s", amount, profile_id)
