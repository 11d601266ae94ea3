from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import UserToken

from ...schemas.production.warranties_schemas import WarrantyListResponse, WarrantyRequest
from ...crud.production import warranties_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/warranties",
                   tags=["warranties"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=WarrantyListResponse)
def get_warranties(
    params: WarrantyRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_warranties(db, current_user.org_id, params)
