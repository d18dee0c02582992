import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from inventoria.core.errors import ValidationError
from inventoria.database.base import Base
from inventoria.database.engine import ensure_sqlite_schema
from inventoria.models.category import CategoryRow
from inventoria.models.item import ItemRow
from inventoria.models.transaction import TransactionRow
from inventoria.models.user import UserRow
from inventoria.store.base import (
    CATEGORIES,
    Collection,
    ITEMS,
    RecordStore,
    TRANSACTIONS,
    USERS,
    utcnow,
)

logger = logging.getLogger(__name__)

_ROW_CLASSES = {
    USERS: UserRow,
    CATEGORIES: CategoryRow,
    ITEMS: ItemRow,
    TRANSACTIONS: TransactionRow,
}


class SqlCollection(Collection):
    def __init__(self, kind, session_factory):
        super().__init__(kind)
        self.row_cls = _ROW_CLASSES[kind]
        self._session_factory = session_factory

    def _to_record(self, row):
        return self.model.model_validate(row)

    def _check_unique(self, db, fields, exclude_id=None):
        for field_name, error_cls in self.unique_fields.items():
            value = fields.get(field_name)
            if value is None:
                continue
            column = getattr(self.row_cls, field_name)
            stmt = select(self.row_cls.id).where(column == value)
            if exclude_id is not None:
                stmt = stmt.where(self.row_cls.id != exclude_id)
            if db.execute(stmt.limit(1)).first() is not None:
                raise error_cls(value)

    def _apply(self, row, fields):
        for key, value in fields.items():
            if key in ("id", "created_at"):
                continue
            setattr(row, key, value)
        if self.has_updated_at:
            row.updated_at = utcnow()

    def get(self, record_id):
        with self._session_factory() as db:
            row = db.get(self.row_cls, record_id)
            return self._to_record(row) if row is not None else None

    def get_all(self):
        with self._session_factory() as db:
            rows = db.execute(select(self.row_cls).order_by(self.row_cls.id)).scalars().all()
            return [self._to_record(row) for row in rows]

    def count(self):
        with self._session_factory() as db:
            return db.execute(select(func.count()).select_from(self.row_cls)).scalar_one()

    def insert(self, fields):
        with self._session_factory() as db:
            self._check_unique(db, fields)
            row = self.row_cls(**{k: v for k, v in fields.items() if k not in ("id", "created_at")})
            db.add(row)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ValidationError("Integrity violation on {}".format(self.kind)) from exc
            db.refresh(row)
            return self._to_record(row)

    def update(self, record_id, fields):
        with self._session_factory() as db:
            row = db.get(self.row_cls, record_id)
            if row is None:
                return None
            self._check_unique(db, fields, exclude_id=record_id)
            self._apply(row, fields)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ValidationError("Integrity violation on {}".format(self.kind)) from exc
            db.refresh(row)
            return self._to_record(row)

    def modify(self, record_id, mutator):
        with self._session_factory() as db:
            # FOR UPDATE is a no-op on SQLite; the store write lock covers that case.
            row = db.execute(
                select(self.row_cls).where(self.row_cls.id == record_id).with_for_update()
            ).scalar_one_or_none()
            if row is None:
                db.rollback()
                return None
            current = self._to_record(row)
            try:
                changes = mutator(current)
                if not changes:
                    db.rollback()
                    return current
                self._check_unique(db, changes, exclude_id=record_id)
                self._apply(row, changes)
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ValidationError("Integrity violation on {}".format(self.kind)) from exc
            except Exception:
                db.rollback()
                raise
            db.refresh(row)
            return self._to_record(row)

    def delete(self, record_id):
        with self._session_factory() as db:
            row = db.get(self.row_cls, record_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def delete_where(self, predicate):
        ids = [record.id for record in self.find_where(predicate)]
        if not ids:
            return 0
        with self._session_factory() as db:
            db.execute(delete(self.row_cls).where(self.row_cls.id.in_(ids)))
            db.commit()
        return len(ids)

    def clear(self):
        with self._session_factory() as db:
            db.execute(delete(self.row_cls))
            db.commit()


class SqlRecordStore(RecordStore):
    backend = "sql"

    def __init__(self, session_factory, bind=None):
        super().__init__()
        self.session_factory = session_factory
        self.bind = bind
        self._collections = {
            kind: SqlCollection(kind, session_factory)
            for kind in (USERS, CATEGORIES, ITEMS, TRANSACTIONS)
        }

    def create_schema(self):
        if self.bind is None:
            raise RuntimeError("SqlRecordStore needs a bind to create its schema")
        Base.metadata.create_all(bind=self.bind)
        ensure_sqlite_schema(self.bind)
        logger.info("Database schema ready (%s)", self.bind.url.render_as_string(hide_password=True))

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


__all__ = ["SqlCollection", "SqlRecordStore"]
