from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from .db import get_db
from . import crud, models


def get_profile(
    profile_id: str | None = Header(default=None, alias="profile_id", convert_underscores=False),
    db: Session = Depends(get_db),
) -> models.Profile:
    """Resolve the calling profile from the ``profile_id`` header."""
    try:
        pid = int(profile_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="missing or invalid profile_id header")
    profile = crud.get_profile(db, pid)
    if profile is None:
        raise HTTPException(status_code=401, detail=f"unknown profile id {pid}")
    return profile
