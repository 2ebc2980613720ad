"""
seed.py
-- Load profiles, contracts and jobs from CSV files into the database (idempotent)

Usage:
    python -m marketplace.services.seed [--data-dir DIR] [--reset]
"""
import argparse
import logging
from decimal import Decimal
from pathlib import Path
import pandas as pd
from sqlalchemy.orm import Session
from .. import models
from ..db import Base, SessionLocal, engine

logger = logging.getLogger("seed")

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "seed_data"

PROFILE_COLUMNS = ["id", "first_name", "last_name", "profession", "balance", "type"]
CONTRACT_COLUMNS = ["id", "terms", "status", "client_id", "contractor_id"]
JOB_COLUMNS = ["id", "description", "price", "paid", "payment_date", "contract_id"]


def _read(path: Path, columns: list[str], **kwargs) -> pd.DataFrame:
    df = pd.read_csv(path, **kwargs)
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing columns: {', '.join(missing)}")
    return df[columns].copy()


def _money(v) -> Decimal:
    return Decimal(str(v)).quantize(Decimal("0.01"))


def _insert_rows(db: Session, model, rows) -> int:
    inserted = 0
    for row in rows:
        if db.get(model, row["id"]) is not None:
            continue
        db.add(model(**row))
        inserted += 1
    return inserted


def load_profiles(db: Session, path: Path) -> int:
    df = _read(path, PROFILE_COLUMNS)
    rows = (
        {
            "id": int(r.id),
            "first_name": str(r.first_name),
            "last_name": str(r.last_name),
            "profession": str(r.profession),
            "balance": _money(r.balance),
            "type": str(r.type),
        }
        for r in df.itertuples(index=False)
    )
    return _insert_rows(db, models.Profile, rows)


def load_contracts(db: Session, path: Path) -> int:
    df = _read(path, CONTRACT_COLUMNS)
    rows = (
        {
            "id": int(r.id),
            "terms": str(r.terms),
            "status": str(r.status),
            "client_id": int(r.client_id),
            "contractor_id": int(r.contractor_id),
        }
        for r in df.itertuples(index=False)
    )
    return _insert_rows(db, models.Contract, rows)


def load_jobs(db: Session, path: Path) -> int:
    df = _read(
        path,
        JOB_COLUMNS,
        parse_dates=["payment_date"],
        true_values=["true", "True", "1"],
        false_values=["false", "False", "0"],
    )
    df["paid"] = df["paid"].fillna(False).astype(bool)
    rows = (
        {
            "id": int(r.id),
            "description": str(r.description),
            "price": _money(r.price),
            "paid": bool(r.paid),
            "payment_date": None if pd.isna(r.payment_date) else pd.Timestamp(r.payment_date).to_pydatetime(),
            "contract_id": int(r.contract_id),
        }
        for r in df.itertuples(index=False)
    )
    return _insert_rows(db, models.Job, rows)


def seed_database(db: Session, data_dir: Path = DEFAULT_DATA_DIR) -> dict:
    """Insert every row whose id is not already present; returns counts per table."""
    data_dir = Path(data_dir)
    counts = {"profiles": load_profiles(db, data_dir / "profiles.csv")}
    db.flush()
    counts["contracts"] = load_contracts(db, data_dir / "contracts.csv")
    db.flush()
    counts["jobs"] = load_jobs(db, data_dir / "jobs.csv")
    db.commit()
    logger.info("Seeded %d profiles, %d contracts, %d jobs from %s",
                counts["profiles"], counts["contracts"], counts["jobs"], data_dir)
    return counts


def run(data_dir: Path = DEFAULT_DATA_DIR, reset: bool = False) -> dict:
    if reset:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        return seed_database(db, data_dir)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    ap = argparse.ArgumentParser()
    ap.add_argument("-d", "--data-dir", default=str(DEFAULT_DATA_DIR), help="Directory holding profiles.csv, contracts.csv, jobs.csv")
    ap.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = ap.parse_args()
    run(Path(args.data_dir), reset=args.reset)
