from typing import List

from fastapi import APIRouter, Body, Depends, status

from inventoria.core.errors import NotFoundError
from inventoria.dependencies import get_catalog, get_ledger
from inventoria.schemas.category import Category

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=List[Category])
def list_categories(catalog=Depends(get_catalog)):
    return catalog.list_categories()


@router.get("/{category_id}", response_model=Category)
def get_category(category_id: int, catalog=Depends(get_catalog)):
    return catalog.get_category(category_id)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(payload: dict = Body(...), catalog=Depends(get_catalog)):
    return catalog.create_category(payload)


@router.put("/{category_id}", response_model=Category)
def update_category(category_id: int, payload: dict = Body(...), catalog=Depends(get_catalog)):
    return catalog.update_category(category_id, payload)


@router.delete("/{category_id}")
def delete_category(category_id: int, ledger=Depends(get_ledger)):
    if not ledger.delete_category(category_id):
        raise NotFoundError("Category", category_id)
    return {"success": True, "message": "Category deleted successfully"}


__all__ = ["router"]
