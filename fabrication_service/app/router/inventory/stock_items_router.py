from typing import Dict, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import Lookup, UserToken

from ...schemas.inventory.stock_items_schemas import (
    PurchaseSuggestionOut,
    StockItemCreate,
    StockItemListResponse,
    StockItemOut,
    StockItemRequest,
    StockItemUpdate,
    StockMovementCreate,
    StockMovementOut,
)
from ...crud.inventory import stock_items_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/stock-items",
                   tags=["stock items"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=StockItemListResponse)
def get_stock_items(
    params: StockItemRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_items(db, current_user.org_id, params)


@router.get("/purchase-suggestions", response_model=List[PurchaseSuggestionOut])
def get_purchase_suggestions(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_purchase_suggestions(db, current_user.org_id)


@router.get("/health-lookup", response_model=List[Lookup])
def stock_health_lookup():
    return crud.stock_health_lookup()


@router.get("/category-lookup", response_model=List[Lookup])
def stock_category_lookup():
    return crud.stock_category_lookup()


@router.get("/{item_id}", response_model=StockItemOut)
def get_stock_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_item = crud.get_stock_item_or_404(db, item_id, current_user.org_id)
    return crud.to_stock_item_out(db_item)


@router.post("/", response_model=StockItemOut)
def create_stock_item(
    item: StockItemCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_stock_item(db, item, current_user)


@router.put("/", response_model=StockItemOut)
def update_stock_item(
    item: StockItemUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_item = crud.update_stock_item(db, item, current_user.org_id)
    if not db_item:
        raise HTTPException(status_code=404, detail="Stock item not found")
    return db_item


@router.delete("/{item_id}", response_model=Dict[str, str])
def delete_stock_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    if not crud.delete_stock_item_soft(db, item_id, current_user.org_id):
        raise HTTPException(status_code=404, detail="Stock item not found")
    return {"message": "Stock item deleted successfully"}


# ----------------- Movements -----------------
@router.get("/{item_id}/movements", response_model=List[StockMovementOut])
def get_stock_movements(
    item_id: UUID,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_movements(db, item_id, current_user.org_id, skip, limit)


@router.post("/{item_id}/movements", response_model=StockMovementOut)
def create_stock_movement(
    item_id: UUID,
    movement: StockMovementCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_stock_movement(db, item_id, movement, current_user)
