"""Pytest fixtures: in-memory SQLite database seeded with a small marketplace."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace import models
from marketplace.db import Base, get_db
from marketplace.main import create_app


PROFILES = [
    dict(id=1, first_name="Alice", last_name="Adams", profession="Founder", balance=Decimal("150"), type="client"),
    dict(id=2, first_name="Bob", last_name="Brown", profession="Manager", balance=Decimal("0"), type="client"),
    dict(id=3, first_name="Carol", last_name="Clark", profession="Programmer", balance=Decimal("10"), type="contractor"),
    dict(id=4, first_name="Dan", last_name="Davis", profession="Musician", balance=Decimal("0"), type="contractor"),
    dict(id=5, first_name="Eve", last_name="Evans", profession="Investor", balance=Decimal("1000"), type="client"),
]

CONTRACTS = [
    dict(id=1, terms="website", status="in_progress", client_id=1, contractor_id=3),
    dict(id=2, terms="jingle", status="terminated", client_id=1, contractor_id=4),
    dict(id=3, terms="backend", status="new", client_id=2, contractor_id=3),
    dict(id=4, terms="album", status="in_progress", client_id=5, contractor_id=4),
]

JOBS = [
    dict(id=1, description="landing page", price=Decimal("100"), contract_id=1),
    dict(id=2, description="checkout", price=Decimal("200"), contract_id=1),
    dict(id=3, description="intro", price=Decimal("50"), contract_id=2, paid=True, payment_date=datetime(2020, 8, 10, 12)),
    dict(id=4, description="api", price=Decimal("100"), contract_id=3),
    dict(id=5, description="tracks", price=Decimal("300"), contract_id=4, paid=True, payment_date=datetime(2020, 8, 15, 12)),
    dict(id=6, description="design", price=Decimal("80"), contract_id=1, paid=True, payment_date=datetime(2020, 8, 20, 12)),
]


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def empty_db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def db(session_factory):
    """Session over the seeded marketplace."""
    s = session_factory()
    s.add_all(models.Profile(**p) for p in PROFILES)
    s.flush()
    s.add_all(models.Contract(**c) for c in CONTRACTS)
    s.flush()
    s.add_all(models.Job(**j) for j in JOBS)
    s.commit()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def app(session_factory, db):
    app = create_app()

    def override_get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def as_profile(profile_id):
    return {"profile_id": str(profile_id)}


def balance_of(db, profile_id):
    db.expire_all()
    return db.get(models.Profile, profile_id).balance
