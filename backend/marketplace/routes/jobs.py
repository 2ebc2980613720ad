from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from ..auth import get_profile
from ..db import get_db
from ..errors import MarketplaceError
from ..services.payments import pay_job
from ..utils import to_http
from .. import crud, models, schemas


router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/unpaid", response_model=list[schemas.Job])
def list_unpaid_jobs(profile: models.Profile = Depends(get_profile), db: Session = Depends(get_db)):
    return crud.list_unpaid_jobs(db, profile.id)


@router.post("/{job_id}/pay", status_code=200, response_class=Response)
def pay(job_id: int, profile: models.Profile = Depends(get_profile), db: Session = Depends(get_db)):
    try:
        pay_job(db, job_id, profile.id)
    except MarketplaceError as e:
        raise to_http(e) from e
    return Response(status_code=200)
