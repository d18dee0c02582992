from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from inventoria.config import get_settings
from inventoria.dependencies import get_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(store=Depends(get_store)):
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "storage": store.backend,
        "time": datetime.now(timezone.utc).isoformat(),
    }


__all__ = ["router"]
