from fastapi import APIRouter, Body, Depends, Request

from inventoria.dependencies import get_expires_threshold
from inventoria.schemas.common import parse_payload
from inventoria.schemas.settings import ExpiresThreshold

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("/expires-threshold", response_model=ExpiresThreshold)
def read_expires_threshold(threshold: int = Depends(get_expires_threshold)):
    return ExpiresThreshold(expires_soon_threshold=threshold)


@router.put("/expires-threshold", response_model=ExpiresThreshold)
def update_expires_threshold(request: Request, payload: dict = Body(...)):
    setting = parse_payload(
        ExpiresThreshold,
        payload,
        "Threshold must be a number between 1 and 365 days",
    )
    request.app.state.expires_soon_threshold = setting.expires_soon_threshold
    return setting


__all__ = ["router"]
