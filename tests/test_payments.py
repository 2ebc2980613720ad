from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker

from conftest import balance_of
from marketplace import models
from marketplace.db import Base
from marketplace.errors import InsufficientFunds, JobNotFound, TransferFailed
from marketplace.services import payments
from marketplace.services.payments import pay_job


def _job(db, job_id):
    db.expire_all()
    return db.get(models.Job, job_id)


def test_pay_job_moves_price_from_client_to_contractor(db):
    job = pay_job(db, 1, 1)

    assert job.paid is True
    assert job.payment_date is not None
    assert balance_of(db, 1) == Decimal("50")
    assert balance_of(db, 3) == Decimal("110")


def test_pay_job_conserves_money(db):
    before = balance_of(db, 1) + balance_of(db, 3)
    pay_job(db, 1, 1)
    after = balance_of(db, 1) + balance_of(db, 3)
    assert before == after


def test_paid_job_cannot_be_paid_again(db):
    pay_job(db, 1, 1)
    with pytest.raises(JobNotFound):
        pay_job(db, 1, 1)
    assert balance_of(db, 1) == Decimal("50")
    assert balance_of(db, 3) == Decimal("110")


def test_already_paid_job_is_not_found(db):
    with pytest.raises(JobNotFound) as exc:
        pay_job(db, 6, 1)
    assert exc.value.status_code == 404


def test_price_above_balance_is_rejected_without_mutation(db):
    with pytest.raises(InsufficientFunds) as exc:
        pay_job(db, 2, 1)

    assert exc.value.price == Decimal("200")
    assert exc.value.balance == Decimal("150")
    assert "200" in exc.value.message and "150" in exc.value.message
    assert balance_of(db, 1) == Decimal("150")
    assert balance_of(db, 3) == Decimal("10")
    assert _job(db, 2).paid is False


def test_price_equal_to_balance_empties_the_account(db):
    pay_job(db, 1, 1)
    db.get(models.Job, 2).price = Decimal("50")
    db.commit()

    pay_job(db, 2, 1)
    assert balance_of(db, 1) == Decimal("0")


@pytest.mark.parametrize("caller", [3, 5])
def test_only_the_contract_client_may_pay(db, caller):
    # 3 is the contract's contractor, 5 has nothing to do with it
    with pytest.raises(JobNotFound):
        pay_job(db, 1, caller)
    assert _job(db, 1).paid is False


def test_unknown_job_is_not_found(db):
    with pytest.raises(JobNotFound):
        pay_job(db, 999, 1)


def test_failed_commit_leaves_no_trace(db, monkeypatch):
    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(TransferFailed):
        pay_job(db, 1, 1)
    monkeypatch.undo()

    assert balance_of(db, 1) == Decimal("150")
    assert balance_of(db, 3) == Decimal("10")
    assert _job(db, 1).paid is False
    assert _job(db, 1).payment_date is None


def test_failure_after_debit_and_credit_rolls_both_back(db, monkeypatch):
    def failing_mark_paid(*args, **kwargs):
        raise OperationalError("UPDATE jobs", {}, Exception("database is locked"))

    monkeypatch.setattr(payments, "_mark_paid", failing_mark_paid)
    with pytest.raises(TransferFailed):
        pay_job(db, 1, 1)

    assert balance_of(db, 1) == Decimal("150")
    assert balance_of(db, 3) == Decimal("10")
    assert _job(db, 1).paid is False


@pytest.fixture
def file_engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'market.sqlite3'}")
    Base.metadata.create_all(bind=eng)
    with sessionmaker(bind=eng)() as s:
        s.add_all([
            models.Profile(id=1, first_name="Alice", last_name="Adams", profession="Founder",
                           balance=Decimal("500"), type="client"),
            models.Profile(id=2, first_name="Carol", last_name="Clark", profession="Programmer",
                           balance=Decimal("0"), type="contractor"),
        ])
        s.flush()
        s.add(models.Contract(id=1, terms="website", status="in_progress", client_id=1, contractor_id=2))
        s.flush()
        s.add(models.Job(id=1, description="landing page", price=Decimal("100"), contract_id=1))
        s.commit()
    yield eng
    eng.dispose()


def test_concurrent_payment_of_same_job_pays_once(file_engine, monkeypatch):
    Session = sessionmaker(bind=file_engine)
    real_lookup = payments.crud.get_payable_job
    raced = []

    def lookup_then_get_overtaken(db, job_id, client_id):
        job = real_lookup(db, job_id, client_id)
        if not raced:
            # A second request pays and commits after this one saw the job unpaid
            raced.append(True)
            with Session() as other:
                pay_job(other, job_id, client_id)
        return job

    monkeypatch.setattr(payments.crud, "get_payable_job", lookup_then_get_overtaken)
    with Session() as first:
        with pytest.raises(JobNotFound):
            pay_job(first, 1, 1)

    with Session() as check:
        assert check.get(models.Profile, 1).balance == Decimal("400")
        assert check.get(models.Profile, 2).balance == Decimal("100")
        assert check.get(models.Job, 1).paid is True


def test_zero_priced_job_is_not_payable(db, monkeypatch):
    real_lookup = payments.crud.get_payable_job

    def free_job(*args, **kwargs):
        job = real_lookup(*args, **kwargs)
        job.price = Decimal("0")
        return job

    monkeypatch.setattr(payments.crud, "get_payable_job", free_job)
    with pytest.raises(JobNotFound):
        pay_job(db, 1, 1)

    assert balance_of(db, 1) == Decimal("150")
    assert _job(db, 1).paid is False


@pytest.mark.parametrize("price", [Decimal("0"), Decimal("-10")])
def test_store_rejects_non_positive_prices(db, price):
    db.add(models.Job(id=50, description="free", price=price, contract_id=1))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_store_rejects_negative_balances(db):
    db.get(models.Profile, 2).balance = Decimal("-1")
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_payer_and_payee_roles_in_separate_payments(db):
    # Carol gets paid by Alice, then Dan gets paid by Eve; both deltas stick
    pay_job(db, 1, 1)
    db.add(models.Job(id=7, description="extra", price=Decimal("25"), contract_id=4))
    db.commit()
    pay_job(db, 7, 5)

    assert balance_of(db, 3) == Decimal("110")
    assert balance_of(db, 4) == Decimal("25")
    assert balance_of(db, 5) == Decimal("975")
