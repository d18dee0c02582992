"""Stock mutations for items.

Every public operation runs under the store's write lock and changes one item
record through ``Collection.modify``, so availability checks are evaluated
against the value that is about to be overwritten. Each successful stock
movement is paired with one audit entry; audit failures never undo the
mutation.
"""

import logging

from inventoria.core.errors import (
    CategoryInUseError,
    InsufficientStockError,
    NotFoundError,
    OverReturnError,
    ValidationError,
)
from inventoria.schemas.common import parse_payload
from inventoria.schemas.item import ItemCreate, ItemUpdate
from inventoria.services.audit_service import TransactionLogger

logger = logging.getLogger(__name__)


def require_positive_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Valid quantity required: must be a positive integer")
    if quantity <= 0:
        raise ValidationError("Valid quantity required: must be a positive integer")
    return quantity


class StockLedger:
    def __init__(self, store, audit=None):
        self.store = store
        self.audit = audit if audit is not None else TransactionLogger(store)

    def _require_category(self, category_id):
        if category_id is None:
            return
        if self.store.categories.get(category_id) is None:
            raise ValidationError(
                "Invalid item data",
                details=[{"field": "categoryId", "message": "Unknown category {}".format(category_id)}],
            )

    def _log(self, item, movement, quantity, notes, user_id=None):
        return self.audit.append(
            {
                "item_id": item.id,
                "user_id": user_id,
                "type": movement,
                "quantity": quantity,
                "unit_price": item.unit_price,
                "notes": notes,
            }
        )

    def get_item(self, item_id):
        item = self.store.items.get(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    def create_item(self, fields, user_id=None):
        data = parse_payload(ItemCreate, fields, "Invalid item data")
        with self.store.write_lock:
            self._require_category(data.category_id)
            item = self.store.items.insert(data.model_dump())
            logger.info("Created item %s (%s)", item.id, item.sku, extra={"item_id": item.id})
            self._log(item, "in", item.quantity, "Item created: {}".format(item.name), user_id)
        return item

    def update_item(self, item_id, fields, user_id=None):
        data = parse_payload(ItemUpdate, fields, "Invalid item data")
        changes = data.model_dump(exclude_unset=True)
        previous = {}

        def apply_changes(current):
            previous["item"] = current
            return changes

        with self.store.write_lock:
            if "category_id" in changes:
                self._require_category(changes["category_id"])
            item = self.store.items.modify(item_id, apply_changes)
            if item is None:
                raise NotFoundError("Item", item_id)
            before = previous["item"]

            quantity_delta = item.quantity - before.quantity
            if quantity_delta > 0:
                self._log(item, "in", quantity_delta, "Quantity increased by {}".format(quantity_delta), user_id)
            elif quantity_delta < 0:
                self._log(item, "out", -quantity_delta, "Quantity decreased by {}".format(-quantity_delta), user_id)

            broken_delta = item.broken_count - before.broken_count
            if broken_delta > 0:
                self._log(item, "adjustment", broken_delta, "Broken count increased by {}".format(broken_delta), user_id)
        return item

    def delete_item(self, item_id):
        with self.store.write_lock:
            if self.store.items.get(item_id) is None:
                return False
            removed = self.store.transactions.delete_where(lambda entry: entry.item_id == item_id)
            deleted = self.store.items.delete(item_id)
        if deleted:
            logger.info(
                "Deleted item %s with %s transaction(s)",
                item_id,
                removed,
                extra={"item_id": item_id},
            )
        return deleted

    def rent_item(self, item_id, quantity, user_id=None):
        quantity = require_positive_quantity(quantity)

        def take_units(current):
            if quantity > current.quantity:
                raise InsufficientStockError(item_id, quantity, current.quantity)
            return {
                "quantity": current.quantity - quantity,
                "rented_count": current.rented_count + quantity,
            }

        with self.store.write_lock:
            item = self.store.items.modify(item_id, take_units)
            if item is None:
                raise NotFoundError("Item", item_id)
            self._log(item, "out", quantity, "Item rented - {} units".format(quantity), user_id)
        return item

    def return_item(self, item_id, quantity, user_id=None):
        quantity = require_positive_quantity(quantity)

        def give_back_units(current):
            if quantity > current.rented_count:
                raise OverReturnError(item_id, quantity, current.rented_count)
            return {
                "quantity": current.quantity + quantity,
                "rented_count": current.rented_count - quantity,
            }

        with self.store.write_lock:
            item = self.store.items.modify(item_id, give_back_units)
            if item is None:
                raise NotFoundError("Item", item_id)
            self._log(item, "in", quantity, "Item returned - {} units".format(quantity), user_id)
        return item

    def delete_category(self, category_id):
        with self.store.write_lock:
            dependents = self.store.items.find_where(lambda item: item.category_id == category_id)
            if dependents:
                raise CategoryInUseError(category_id, len(dependents))
            deleted = self.store.categories.delete(category_id)
        if deleted:
            logger.info("Deleted category %s", category_id)
        return deleted


__all__ = ["StockLedger", "require_positive_quantity"]
