"""Snapshot export/import and default data seeding.

Import is a full replace: the snapshot is validated up front (shape, record
fields, uniqueness and category references), then the store
is cleared and repopulated through the catalog and stock-ledger create paths
so the audit log is regenerated exactly as if the records were entered by
hand. The whole import runs under the store's write lock.
"""

import logging
from datetime import date, timedelta

from inventoria.core.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_ITEMS,
    DEFAULT_USERS,
    PRIMARY_ADMIN_USERNAME,
    USER_ROLES,
)
from inventoria.core.errors import ImportFailedError, SnapshotRejectedError, ValidationError
from inventoria.schemas.category import CategoryCreate
from inventoria.schemas.common import parse_payload
from inventoria.schemas.item import ItemCreate
from inventoria.schemas.user import UserCreate
from inventoria.services.audit_service import TransactionLogger
from inventoria.services.catalog_service import CatalogService
from inventoria.services.stock_service import StockLedger
from inventoria.store.base import utcnow

logger = logging.getLogger(__name__)

SNAPSHOT_SECTIONS = ("categories", "users", "items")


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _section(payload, name):
    if name in payload:
        return payload[name]
    nested = payload.get("data")
    if isinstance(nested, dict) and name in nested:
        return nested[name]
    return []


def _dump(records):
    return [record.model_dump(mode="json", by_alias=True) for record in records]


def _duplicates(values):
    seen = set()
    repeated = []
    for value in values:
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def _require_types(records, kind, expected):
    for record in records:
        for field, types in expected.items():
            value = record.get(field)
            if isinstance(value, bool) or not isinstance(value, types):
                raise SnapshotRejectedError(
                    "Invalid {} {} in backup: {!r}".format(kind, field, value)
                )


def _category_fields(category):
    return {"name": category["name"], "description": category.get("description") or None}


def _user_fields(user):
    return {
        "username": user["username"],
        "full_name": user["fullName"],
        "role": user["role"],
        "is_active": user.get("isActive") if user.get("isActive") is not None else True,
    }


def _item_fields(item, category_ids=None):
    fields = {
        key: value
        for key, value in item.items()
        if key not in ("id", "createdAt", "updatedAt", "categoryName")
    }
    if category_ids is not None:
        category_id = item.get("categoryId")
        fields["categoryId"] = category_ids.get(category_id, category_id)
    if not fields.get("minStockLevel"):
        fields.pop("minStockLevel", None)
    return fields


def _check_record(schema, fields, label):
    try:
        parse_payload(schema, fields, "Invalid {} in backup".format(label))
    except ValidationError as exc:
        raise SnapshotRejectedError(exc.message, details=exc.details) from exc


def validate_snapshot(payload):
    """Return ``(categories, users, items)`` or raise SnapshotRejectedError."""
    if not isinstance(payload, dict):
        raise SnapshotRejectedError("Invalid backup data format - expected a JSON object")

    categories, users, items = (_section(payload, name) for name in SNAPSHOT_SECTIONS)
    if not all(isinstance(section, list) for section in (categories, users, items)):
        raise SnapshotRejectedError(
            "Invalid backup data format - expected arrays for items, categories, and users"
        )
    if not all(
        isinstance(record, dict) for section in (categories, users, items) for record in section
    ):
        raise SnapshotRejectedError("Invalid backup data format - every record must be an object")
    if not categories and items:
        raise SnapshotRejectedError("Cannot import items without categories")
    if not users:
        raise SnapshotRejectedError("Backup must contain at least one user")

    for category in categories:
        if _blank(category.get("name")):
            raise SnapshotRejectedError("All categories must have a name")
    for user in users:
        if any(_blank(user.get(field)) for field in ("username", "fullName", "role")):
            raise SnapshotRejectedError("All users must have username, fullName, and role")
        if user["role"] not in USER_ROLES:
            raise SnapshotRejectedError(
                "Invalid role for user {}: {}".format(user["username"], user["role"])
            )
    for item in items:
        if any(_blank(item.get(field)) for field in ("name", "sku", "unitPrice")):
            raise SnapshotRejectedError("All items must have name, sku, and unitPrice")

    _require_types(categories, "category", {"name": (str,), "id": (int, type(None))})
    _require_types(users, "user", {"username": (str,), "id": (int, type(None))})
    _require_types(
        items,
        "item",
        {"name": (str,), "sku": (str,), "id": (int, type(None)), "categoryId": (int, type(None))},
    )

    for category in categories:
        _check_record(CategoryCreate, _category_fields(category), "category {}".format(category["name"]))
    for user in users:
        _check_record(UserCreate, _user_fields(user), "user {}".format(user["username"]))
    for item in items:
        _check_record(ItemCreate, _item_fields(item), "item {}".format(item["sku"]))

    checks = (
        ("category name", [category["name"] for category in categories]),
        ("username", [user["username"] for user in users]),
        ("sku", [item["sku"] for item in items]),
    )
    for label, values in checks:
        repeated = _duplicates(values)
        if repeated:
            raise SnapshotRejectedError(
                "Duplicate {} in backup: {}".format(label, ", ".join(str(value) for value in repeated))
            )

    known_categories = {category.get("id") for category in categories if category.get("id") is not None}
    for item in items:
        category_id = item.get("categoryId")
        if category_id is not None and category_id not in known_categories:
            raise SnapshotRejectedError(
                "Item {} refers to unknown category {}".format(item["sku"], category_id)
            )
    return categories, users, items


class BackupCoordinator:
    def __init__(self, store, ledger=None, catalog=None, audit=None):
        self.store = store
        self.audit = audit if audit is not None else TransactionLogger(store)
        self.ledger = ledger if ledger is not None else StockLedger(store, audit=self.audit)
        self.catalog = catalog if catalog is not None else CatalogService(store, audit=self.audit)

    def export_snapshot(self):
        with self.store.write_lock:
            snapshot = {
                "users": _dump(self.store.users.get_all()),
                "categories": _dump(self.store.categories.get_all()),
                "items": _dump(self.store.items.get_all()),
                "transactions": _dump(self.store.transactions.get_all()),
            }
        snapshot["exportDate"] = utcnow().isoformat()
        logger.info(
            "Exported snapshot: %s users, %s categories, %s items, %s transactions",
            len(snapshot["users"]),
            len(snapshot["categories"]),
            len(snapshot["items"]),
            len(snapshot["transactions"]),
        )
        return snapshot

    def import_snapshot(self, payload):
        categories, users, items = validate_snapshot(payload)
        logger.info(
            "Starting backup import: %s categories, %s users, %s items",
            len(categories),
            len(users),
            len(items),
        )

        with self.store.write_lock:
            self.store.clear_all()
            try:
                category_ids = self._restore_categories(categories)
                user_ids = self._restore_users(users)
                self._restore_items(items, category_ids)
                self.seed_defaults()
            except Exception as exc:
                logger.exception("Backup import failed, restoring default data")
                self.store.clear_all()
                self.seed_defaults()
                raise ImportFailedError(str(exc)) from exc

        logger.info("Backup import completed successfully")
        return {
            "imported": {
                "categories": len(categories),
                "users": len(users),
                "items": len(items),
            },
            "remapped": {
                "categories": category_ids,
                "users": user_ids,
            },
        }

    def _restore_categories(self, categories):
        mapping = {}
        for category in categories:
            created = self.catalog.create_category(_category_fields(category))
            if category.get("id") is not None:
                mapping[category["id"]] = created.id
        return mapping

    def _restore_users(self, users):
        mapping = {}
        for user in users:
            created = self.catalog.create_user(_user_fields(user))
            if user.get("id") is not None:
                mapping[user["id"]] = created.id
        return mapping

    def _restore_items(self, items, category_ids):
        for item in items:
            self.ledger.create_item(_item_fields(item, category_ids))

    def seed_defaults(self, today=None):
        """Create the default users, categories and items when no admin exists.

        Categories and items are only added to an empty catalogue. Returns the
        number of records created per kind.
        """
        created = {"users": 0, "categories": 0, "items": 0}
        with self.store.write_lock:
            if self.store.users.first_where(lambda user: user.username == PRIMARY_ADMIN_USERNAME):
                return created

            existing = {user.username for user in self.store.users.get_all()}
            for user in DEFAULT_USERS:
                if user["username"] in existing:
                    continue
                self.catalog.create_user(dict(user))
                created["users"] += 1

            if self.store.categories.count() == 0:
                for category in DEFAULT_CATEGORIES:
                    self.catalog.create_category(dict(category))
                    created["categories"] += 1

            if self.store.items.count() == 0:
                if today is None:
                    today = date.today()
                category_ids = {category.name: category.id for category in self.store.categories.get_all()}
                for item in DEFAULT_ITEMS:
                    fields = dict(item)
                    fields["category_id"] = category_ids.get(fields.pop("category"))
                    expires_in_days = fields.pop("expires_in_days", None)
                    if expires_in_days is not None:
                        fields["expiration_date"] = today + timedelta(days=expires_in_days)
                    self.ledger.create_item(fields)
                    created["items"] += 1

        logger.info(
            "Seeded default data: %s users, %s categories, %s items",
            created["users"],
            created["categories"],
            created["items"],
        )
        return created


__all__ = ["BackupCoordinator", "validate_snapshot"]
