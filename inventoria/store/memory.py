import itertools
import threading

from inventoria.store.base import (
    CATEGORIES,
    Collection,
    ITEMS,
    RecordStore,
    TRANSACTIONS,
    USERS,
    utcnow,
)


class MemoryCollection(Collection):
    def __init__(self, kind):
        super().__init__(kind)
        self._records = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def get(self, record_id):
        with self._lock:
            return self._records.get(record_id)

    def get_all(self):
        with self._lock:
            return [self._records[key] for key in sorted(self._records)]

    def count(self):
        with self._lock:
            return len(self._records)

    def _check_unique(self, fields, exclude_id=None):
        for field_name, error_cls in self.unique_fields.items():
            value = fields.get(field_name)
            if value is None:
                continue
            for record_id, record in self._records.items():
                if record_id != exclude_id and getattr(record, field_name) == value:
                    raise error_cls(value)

    def insert(self, fields):
        with self._lock:
            self._check_unique(fields)
            now = utcnow()
            payload = dict(fields)
            payload["id"] = next(self._ids)
            payload["created_at"] = now
            if self.has_updated_at:
                payload["updated_at"] = now
            record = self.model.model_validate(payload)
            self._records[record.id] = record
            return record

    def _merge(self, current, fields):
        self._check_unique(fields, exclude_id=current.id)
        payload = current.model_dump()
        payload.update(fields)
        payload["id"] = current.id
        payload["created_at"] = current.created_at
        if self.has_updated_at:
            payload["updated_at"] = utcnow()
        record = self.model.model_validate(payload)
        self._records[record.id] = record
        return record

    def update(self, record_id, fields):
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            return self._merge(current, fields)

    def modify(self, record_id, mutator):
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            changes = mutator(current)
            if not changes:
                return current
            return self._merge(current, changes)

    def delete(self, record_id):
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def clear(self):
        with self._lock:
            self._records.clear()


class MemoryRecordStore(RecordStore):
    backend = "memory"

    def __init__(self):
        super().__init__()
        self._collections = {
            kind: MemoryCollection(kind) for kind in (USERS, CATEGORIES, ITEMS, TRANSACTIONS)
        }

    @property
    def users(self):
        return self._collections[USERS]

    @property
    def categories(self):
        return self._collections[CATEGORIES]

    @property
    def items(self):
        return self._collections[ITEMS]

    @property
    def transactions(self):
        return self._collections[TRANSACTIONS]


__all__ = ["MemoryCollection", "MemoryRecordStore"]
