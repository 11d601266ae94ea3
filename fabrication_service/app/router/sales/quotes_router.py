from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import UserToken

from ...schemas.sales.quotes_schemas import (
    QuoteConversionResponse,
    QuoteCreate,
    QuoteListResponse,
    QuoteOut,
    QuoteRequest,
)
from ...crud.sales import quotes_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/quotes",
                   tags=["quotes"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=QuoteListResponse)
def get_quotes(
    params: QuoteRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_quotes(db, current_user.org_id, params)


@router.get("/{quote_id}", response_model=QuoteOut)
def get_quote(
    quote_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_quote = crud.get_quote_by_id(db, quote_id, current_user.org_id)
    if not db_quote:
        raise HTTPException(status_code=404, detail="Quote not found")
    return db_quote


@router.post("/", response_model=QuoteOut)
def create_quote(
    quote: QuoteCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_quote(db, quote, current_user)


@router.post("/{quote_id}/convert", response_model=QuoteConversionResponse)
def convert_quote(
    quote_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.convert_quote_to_order(db, quote_id, current_user)
