from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from inventoria.core.errors import NotFoundError
from inventoria.dependencies import get_catalog
from inventoria.schemas.user import User

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[User])
def list_users(catalog=Depends(get_catalog)):
    return catalog.list_users()


@router.get("/{user_id}", response_model=User)
def get_user(user_id: int, catalog=Depends(get_catalog)):
    return catalog.get_user(user_id)


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: dict = Body(...),
    actor_id: Optional[int] = Query(None, alias="actorId"),
    catalog=Depends(get_catalog),
):
    return catalog.create_user(payload, actor_id=actor_id)


@router.put("/{user_id}", response_model=User)
def update_user(user_id: int, payload: dict = Body(...), catalog=Depends(get_catalog)):
    return catalog.update_user(user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    actor_id: Optional[int] = Query(None, alias="actorId"),
    catalog=Depends(get_catalog),
):
    if not catalog.delete_user(user_id, actor_id=actor_id):
        raise NotFoundError("User", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
