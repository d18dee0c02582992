"""Record store contract shared by the memory and SQL backends.

A store holds four independent collections (users, categories, items,
transactions). Each collection hands out immutable pydantic records and
offers one atomic read-modify-write primitive, ``modify``, which the stock
engine relies on so that availability checks always see the value that is
about to be overwritten.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from inventoria.core.errors import (
    DuplicateCategoryError,
    DuplicateSkuError,
    DuplicateUsernameError,
)
from inventoria.schemas.category import Category
from inventoria.schemas.item import Item
from inventoria.schemas.transaction import Transaction
from inventoria.schemas.user import User

USERS = "users"
CATEGORIES = "categories"
ITEMS = "items"
TRANSACTIONS = "transactions"

# Deletion order that never leaves a dangling foreign key behind.
RECORD_KINDS = (TRANSACTIONS, ITEMS, CATEGORIES, USERS)

RECORD_MODELS = {
    USERS: User,
    CATEGORIES: Category,
    ITEMS: Item,
    TRANSACTIONS: Transaction,
}

UNIQUE_FIELDS = {
    USERS: {"username": DuplicateUsernameError},
    CATEGORIES: {"name": DuplicateCategoryError},
    ITEMS: {"sku": DuplicateSkuError},
    TRANSACTIONS: {},
}


def utcnow():
    return datetime.now(timezone.utc)


class Collection(ABC):
    def __init__(self, kind):
        self.kind = kind
        self.model = RECORD_MODELS[kind]
        self.unique_fields = UNIQUE_FIELDS[kind]

    @property
    def has_updated_at(self):
        return "updated_at" in self.model.model_fields

    @abstractmethod
    def get(self, record_id):
        """Return the record or ``None``."""

    @abstractmethod
    def get_all(self):
        """Return every record, ordered by ascending id."""

    @abstractmethod
    def insert(self, fields):
        """Persist a new record and return it with its id and timestamps."""

    @abstractmethod
    def update(self, record_id, fields):
        """Merge ``fields`` into the record; ``None`` if it does not exist."""

    @abstractmethod
    def delete(self, record_id):
        """Remove the record; ``True`` if something was deleted."""

    @abstractmethod
    def modify(self, record_id, mutator):
        """Atomically apply ``mutator(current) -> changes`` to one record.

        ``mutator`` receives the record as it is immediately before the write.
        It returns a dict of field changes (empty for no write) or raises to
        abort without writing anything. Returns the resulting record, or
        ``None`` if the record does not exist.
        """

    @abstractmethod
    def count(self):
        """Number of stored records."""

    @abstractmethod
    def clear(self):
        """Remove every record of this kind. Ids are not reused afterwards."""

    def find_where(self, predicate):
        return [record for record in self.get_all() if predicate(record)]

    def first_where(self, predicate):
        for record in self.get_all():
            if predicate(record):
                return record
        return None

    def delete_where(self, predicate):
        deleted = 0
        for record in self.find_where(predicate):
            if self.delete(record.id):
                deleted += 1
        return deleted

    def update_where(self, predicate, fields):
        return [self.update(record.id, fields) for record in self.find_where(predicate)]


class RecordStore(ABC):
    backend = "abstract"

    def __init__(self):
        # Serialises mutations across the engine, catalog and backup import.
        self.write_lock = threading.RLock()

    @property
    @abstractmethod
    def users(self) -> Collection: ...

    @property
    @abstractmethod
    def categories(self) -> Collection: ...

    @property
    @abstractmethod
    def items(self) -> Collection: ...

    @property
    @abstractmethod
    def transactions(self) -> Collection: ...

    def create_schema(self):
        """Prepare backing storage; nothing to do for in-process stores."""

    def collection(self, kind):
        return getattr(self, kind)

    def clear_all(self):
        with self.write_lock:
            for kind in RECORD_KINDS:
                self.collection(kind).clear()

    def is_empty(self):
        return all(self.collection(kind).count() == 0 for kind in RECORD_KINDS)


__all__ = [
    "CATEGORIES",
    "Collection",
    "ITEMS",
    "RECORD_KINDS",
    "RecordStore",
    "TRANSACTIONS",
    "USERS",
    "utcnow",
]
