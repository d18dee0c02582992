from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from inventoria.core.constants import DEFAULT_EXPIRES_SOON_DAYS, UNCATEGORIZED
from inventoria.core.dates import start_of_day
from inventoria.core.stock_rules import (
    STOCK_LEVELS,
    expires_within,
    is_expired,
    is_low_stock,
    stock_level,
)
from inventoria.schemas.item import ItemWithCategory
from inventoria.schemas.transaction import ItemRef, TransactionWithDetails
from inventoria.schemas.user import UserRef


def round2(value):
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _newest_first(records):
    return sorted(records, key=lambda record: record.id, reverse=True)


class InventoryViews:
    """Read-only projections over the current store state.

    Nothing is cached: each call reads the collections it needs once and
    derives its answer from that snapshot.
    """

    def __init__(self, store):
        self.store = store

    def _category_names(self):
        return {category.id: category.name for category in self.store.categories.get_all()}

    def items_with_category_name(self, items=None):
        if items is None:
            items = _newest_first(self.store.items.get_all())
        names = self._category_names()
        results = []
        for item in items:
            category_name = names.get(item.category_id) if item.category_id is not None else None
            results.append(
                ItemWithCategory(
                    **item.model_dump(),
                    category_name=category_name or UNCATEGORIZED,
                )
            )
        return results

    def list_items(self, search=None, category=None):
        if search:
            items = self.search_items(search)
        elif category and str(category).lower() != "all":
            category_key = str(category).strip().lower()
            if category_key == "uncategorized":
                items = self.store.items.find_where(lambda item: item.category_id is None)
            else:
                try:
                    category_id = int(category_key)
                except ValueError:
                    category_id = None
                items = self.store.items.find_where(
                    lambda item: category_id is not None and item.category_id == category_id
                )
            items = _newest_first(items)
        else:
            items = _newest_first(self.store.items.get_all())
        return self.items_with_category_name(items)

    def low_stock_items(self):
        items = self.store.items.find_where(
            lambda item: is_low_stock(item.quantity, item.min_stock_level)
        )
        return self.items_with_category_name(items)

    def expiring_soon_items(self, threshold_days=DEFAULT_EXPIRES_SOON_DAYS, today=None):
        if threshold_days is None:
            threshold_days = DEFAULT_EXPIRES_SOON_DAYS
        if today is None:
            today = date.today()
        items = self.store.items.find_where(
            lambda item: expires_within(item.expirable, item.expiration_date, threshold_days, today=today)
        )
        items.sort(key=lambda item: (item.expiration_date, item.id))
        return self.items_with_category_name(items)

    def expired_items(self, today=None):
        items = self.store.items.find_where(
            lambda item: is_expired(item.expirable, item.expiration_date, today=today)
        )
        return self.items_with_category_name(items)

    def search_items(self, query):
        needle = (query or "").strip().lower()
        if not needle:
            return []

        def matches(item):
            return (
                needle in item.name.lower()
                or needle in item.sku.lower()
                or (item.description is not None and needle in item.description.lower())
            )

        return _newest_first(self.store.items.find_where(matches))

    def dashboard_stats(self, now=None):
        items = self.store.items.get_all()
        total_items = 0
        total_value = Decimal("0")
        low_stock_count = 0
        for item in items:
            total_items += item.quantity or 0
            total_value += Decimal(item.quantity or 0) * (item.unit_price or Decimal("0"))
            if is_low_stock(item.quantity, item.min_stock_level):
                low_stock_count += 1

        if now is None:
            now = datetime.now().astimezone()
        midnight = start_of_day(now)
        today_transactions = len(
            self.store.transactions.find_where(lambda entry: entry.created_at >= midnight)
        )
        return {
            "total_items": total_items,
            "total_value": round2(total_value),
            "low_stock_count": low_stock_count,
            "today_transactions": today_transactions,
        }

    def rental_stats(self):
        items = self.store.items.get_all()
        return {
            "rented_count": sum(item.rented_count or 0 for item in items),
            "broken_count": sum(item.broken_count or 0 for item in items),
        }

    def stock_report(self, today=None):
        levels = {level: 0 for level in STOCK_LEVELS}
        expired_count = 0
        items = self.store.items.get_all()
        for item in items:
            levels[stock_level(item.quantity, item.min_stock_level)] += 1
            if is_expired(item.expirable, item.expiration_date, today=today):
                expired_count += 1
        return {"levels": levels, "expired_count": expired_count, "item_count": len(items)}

    def transactions_with_details(self, limit=None):
        entries = sorted(
            self.store.transactions.get_all(),
            key=lambda entry: (entry.created_at, entry.id),
            reverse=True,
        )
        if limit:
            entries = entries[:limit]
        items = {item.id: item for item in self.store.items.get_all()}
        users = {user.id: user for user in self.store.users.get_all()}

        results = []
        for entry in entries:
            item = items.get(entry.item_id) if entry.item_id is not None else None
            user = users.get(entry.user_id)
            results.append(
                TransactionWithDetails(
                    **entry.model_dump(),
                    item=ItemRef.model_validate(item) if item is not None else None,
                    user=UserRef.model_validate(user) if user is not None else None,
                )
            )
        return results


__all__ = ["InventoryViews", "round2"]
