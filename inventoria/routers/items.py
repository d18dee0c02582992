from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from inventoria.core.errors import NotFoundError
from inventoria.core.stock_rules import classify_item
from inventoria.dependencies import get_expires_threshold, get_ledger, get_views
from inventoria.schemas.common import parse_payload
from inventoria.schemas.item import Item, ItemWithCategory, StockMovement, StockStatus

router = APIRouter(prefix="/api/items", tags=["Items"])


def _actor(payload):
    user_id = payload.get("userId", payload.get("user_id"))
    return user_id if isinstance(user_id, int) and not isinstance(user_id, bool) else None


@router.get("", response_model=List[ItemWithCategory])
def list_items(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    views=Depends(get_views),
):
    return views.list_items(search=search, category=category)


@router.get("/low-stock", response_model=List[ItemWithCategory])
def list_low_stock(views=Depends(get_views)):
    return views.low_stock_items()


@router.get("/expires-soon", response_model=List[ItemWithCategory])
def list_expiring_soon(
    days: Optional[int] = Query(None, ge=1, le=365),
    views=Depends(get_views),
    threshold: int = Depends(get_expires_threshold),
):
    return views.expiring_soon_items(threshold_days=days or threshold)


@router.get("/{item_id}", response_model=Item)
def get_item(item_id: int, ledger=Depends(get_ledger)):
    return ledger.get_item(item_id)


@router.get("/{item_id}/status", response_model=StockStatus)
def get_item_status(item_id: int, ledger=Depends(get_ledger)):
    return StockStatus(**classify_item(ledger.get_item(item_id)))


@router.post("", response_model=Item, status_code=status.HTTP_201_CREATED)
def create_item(payload: dict = Body(...), ledger=Depends(get_ledger)):
    return ledger.create_item(payload, user_id=_actor(payload))


@router.put("/{item_id}", response_model=Item)
def update_item(item_id: int, payload: dict = Body(...), ledger=Depends(get_ledger)):
    return ledger.update_item(item_id, payload, user_id=_actor(payload))


@router.delete("/{item_id}")
def delete_item(item_id: int, ledger=Depends(get_ledger)):
    if not ledger.delete_item(item_id):
        raise NotFoundError("Item", item_id)
    return {"success": True}


@router.post("/{item_id}/rent", response_model=Item)
def rent_item(item_id: int, payload: dict = Body(...), ledger=Depends(get_ledger)):
    movement = parse_payload(StockMovement, payload, "Valid quantity required")
    return ledger.rent_item(item_id, movement.quantity, user_id=movement.user_id)


@router.post("/{item_id}/return", response_model=Item)
def return_item(item_id: int, payload: dict = Body(...), ledger=Depends(get_ledger)):
    movement = parse_payload(StockMovement, payload, "Valid quantity required")
    return ledger.return_item(item_id, movement.quantity, user_id=movement.user_id)


__all__ = ["router"]
