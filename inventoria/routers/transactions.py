from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from inventoria.dependencies import get_views
from inventoria.schemas.transaction import TransactionWithDetails

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.get("", response_model=List[TransactionWithDetails])
def list_transactions(
    limit: Optional[int] = Query(None, ge=1),
    views=Depends(get_views),
):
    return views.transactions_with_details(limit=limit)


__all__ = ["router"]
