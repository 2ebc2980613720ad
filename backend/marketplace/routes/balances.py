from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from ..auth import get_profile
from ..config import Settings, get_settings
from ..db import get_db
from ..errors import MarketplaceError
from ..services.deposits import deposit
from ..utils import to_http
from .. import models, schemas


router = APIRouter(prefix="/balances", tags=["balances"])


@router.post("/deposit/{user_id}", status_code=200, response_class=Response)
def deposit_to_profile(
    user_id: int,
    body: schemas.DepositRequest,
    profile: models.Profile = Depends(get_profile),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    # user_id may differ from the caller unless the operator turns that off
    if user_id != profile.id and not settings.allow_deposit_to_other_profiles:
        raise HTTPException(status_code=401, detail=f"profile id {profile.id} may not deposit into profile id {user_id}")
    try:
        deposit(
            db,
            user_id,
            body.deposit_amount,
            cap_ratio=settings.deposit_cap_ratio,
            include_contractor_jobs=settings.deposit_outstanding_scope == "client_or_contractor",
        )
    except MarketplaceError as e:
        raise to_http(e) from e
    return Response(status_code=200)
