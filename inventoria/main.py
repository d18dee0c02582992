import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from inventoria.config import Settings, get_settings
from inventoria.core.errors import (
    CategoryInUseError,
    DuplicateError,
    ImportFailedError,
    InsufficientStockError,
    InventoryError,
    NotFoundError,
    OverReturnError,
    ProtectedUserError,
    ValidationError,
)
from inventoria.core.logging import setup_logging
from inventoria.dependencies import get_store
from inventoria.routers import (
    categories_router,
    dashboard_router,
    database_router,
    health_router,
    items_router,
    settings_router,
    transactions_router,
    users_router,
)
from inventoria.services import BackupCoordinator

logger = logging.getLogger(__name__)

setup_logging()
settings: Settings = get_settings()

# Checked in order; the first matching class wins.
ERROR_STATUS = (
    (ValidationError, 400),
    (ProtectedUserError, 400),
    (NotFoundError, 404),
    (InsufficientStockError, 409),
    (OverReturnError, 409),
    (CategoryInUseError, 409),
    (DuplicateError, 409),
    (ImportFailedError, 500),
)


def status_for(exc):
    for error_cls, status_code in ERROR_STATUS:
        if isinstance(exc, error_cls):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = app.dependency_overrides.get(get_store, get_store)()
    store.create_schema()
    if settings.SEED_DEFAULT_DATA:
        BackupCoordinator(store).seed_defaults()
    logger.info("%s started with %s storage", settings.APP_NAME, store.backend)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.state.expires_soon_threshold = settings.EXPIRES_SOON_DAYS


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    error = ValidationError("Invalid request", details=details)
    return JSONResponse(status_code=400, content=error.to_dict())


app.include_router(health_router)
app.include_router(categories_router)
app.include_router(items_router)
app.include_router(transactions_router)
app.include_router(users_router)
app.include_router(dashboard_router)
app.include_router(database_router)
app.include_router(settings_router)


__all__ = ["app", "status_for"]
