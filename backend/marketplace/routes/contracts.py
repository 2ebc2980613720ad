from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..auth import get_profile
from ..db import get_db
from ..utils import ensure_not_none
from .. import crud, models, schemas


router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("/", response_model=list[schemas.Contract])
def list_contracts(profile: models.Profile = Depends(get_profile), db: Session = Depends(get_db)):
    return crud.list_active_contracts(db, profile.id)


# Non-trailing-slash to avoid 307
@router.get("", response_model=list[schemas.Contract], include_in_schema=False)
def list_contracts_noslash(profile: models.Profile = Depends(get_profile), db: Session = Depends(get_db)):
    return list_contracts(profile, db)


@router.get("/{contract_id}", response_model=schemas.Contract)
def get_contract(contract_id: int, profile: models.Profile = Depends(get_profile), db: Session = Depends(get_db)):
    contract = ensure_not_none(crud.get_contract(db, contract_id), f"contract id {contract_id} not found")
    if profile.id not in (contract.client_id, contract.contractor_id):
        raise HTTPException(
            status_code=401,
            detail=f"contract id {contract_id} does not belong to profile id {profile.id}",
        )
    return contract
