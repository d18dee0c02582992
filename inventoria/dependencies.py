from functools import lru_cache

from fastapi import Depends, Request

from inventoria.config import get_settings
from inventoria.services import (
    BackupCoordinator,
    CatalogService,
    InventoryViews,
    StockLedger,
    TransactionLogger,
)
from inventoria.store import RecordStore, build_store


@lru_cache
def get_store() -> RecordStore:
    """One store per process, built from settings on first use."""
    return build_store(get_settings())


def get_audit(store: RecordStore = Depends(get_store)):
    return TransactionLogger(store)


def get_ledger(store: RecordStore = Depends(get_store), audit=Depends(get_audit)):
    return StockLedger(store, audit=audit)


def get_catalog(store: RecordStore = Depends(get_store), audit=Depends(get_audit)):
    return CatalogService(store, audit=audit)


def get_views(store: RecordStore = Depends(get_store)):
    return InventoryViews(store)


def get_backup(
    store: RecordStore = Depends(get_store),
    ledger=Depends(get_ledger),
    catalog=Depends(get_catalog),
    audit=Depends(get_audit),
):
    return BackupCoordinator(store, ledger=ledger, catalog=catalog, audit=audit)


def get_expires_threshold(request: Request) -> int:
    return request.app.state.expires_soon_threshold


__all__ = [
    "get_audit",
    "get_backup",
    "get_catalog",
    "get_expires_threshold",
    "get_ledger",
    "get_store",
    "get_views",
]
