from inventoria.database import SessionLocal, engine
from inventoria.store.base import (
    CATEGORIES,
    Collection,
    ITEMS,
    RECORD_KINDS,
    RecordStore,
    TRANSACTIONS,
    USERS,
)
from inventoria.store.memory import MemoryRecordStore
from inventoria.store.sql import SqlRecordStore


def build_store(settings):
    backend = settings.STORAGE_BACKEND.strip().lower()
    if backend == "memory":
        return MemoryRecordStore()
    if backend == "sql":
        return SqlRecordStore(SessionLocal, bind=engine)
    raise ValueError("Unknown STORAGE_BACKEND: {}".format(settings.STORAGE_BACKEND))


__all__ = [
    "CATEGORIES",
    "Collection",
    "ITEMS",
    "MemoryRecordStore",
    "RECORD_KINDS",
    "RecordStore",
    "SqlRecordStore",
    "TRANSACTIONS",
    "USERS",
    "build_store",
]
