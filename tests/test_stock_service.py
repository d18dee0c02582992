import unittest
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from threading import Barrier

from inventoria.core.errors import (
    CategoryInUseError,
    DuplicateSkuError,
    InsufficientStockError,
    NotFoundError,
    OverReturnError,
    ValidationError,
)
from inventoria.database import build_engine, build_session_factory
from inventoria.services import CatalogService, InventoryViews, StockLedger
from inventoria.store import MemoryRecordStore, SqlRecordStore


def sql_store():
    bind = build_engine("sqlite:///:memory:")
    store = SqlRecordStore(build_session_factory(bind), bind=bind)
    store.create_schema()
    return store


WIDGET = {"name": "Widget", "sku": "W-1", "unitPrice": "10.00", "quantity": 10, "minStockLevel": 5}


class StockLedgerContract:
    def make_store(self):
        raise NotImplementedError

    def setUp(self):
        self.store = self.make_store()
        self.ledger = StockLedger(self.store)
        self.catalog = CatalogService(self.store, audit=self.ledger.audit)
        self.views = InventoryViews(self.store)
        self.admin = self.catalog.create_user(
            {"username": "admin", "fullName": "Admin User", "role": "admin"}
        )

    def entries_for(self, item_id):
        return self.store.transactions.find_where(lambda entry: entry.item_id == item_id)

    def low_stock_ids(self):
        return [item.id for item in self.views.low_stock_items()]

    def test_create_logs_one_in_entry(self):
        item = self.ledger.create_item(dict(WIDGET))

        self.assertEqual(item.unit_price, Decimal("10.00"))
        self.assertEqual((item.rented_count, item.broken_count), (0, 0))
        entries = self.entries_for(item.id)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].type, "in")
        self.assertEqual(entries[0].quantity, 10)
        self.assertEqual(entries[0].user_id, self.admin.id)
        self.assertEqual(entries[0].notes, "Item created: Widget")

    def test_create_with_zero_stock_logs_zero_entry(self):
        item = self.ledger.create_item({"name": "Empty", "sku": "E-1", "unitPrice": "1"})
        self.assertEqual(item.quantity, 0)
        self.assertEqual(item.min_stock_level, 5)
        self.assertEqual([(e.type, e.quantity) for e in self.entries_for(item.id)], [("in", 0)])

    def test_create_validation(self):
        invalid = [
            {"sku": "X-1", "unitPrice": "1.00"},
            {"name": "  ", "sku": "X-1", "unitPrice": "1.00"},
            {"name": "X", "sku": "X-1"},
            {"name": "X", "sku": "X-1", "unitPrice": "-1"},
            {"name": "X", "sku": "X-1", "unitPrice": "abc"},
            {"name": "X", "sku": "X-1", "unitPrice": "1", "quantity": -3},
            {"name": "X", "sku": "X-1", "unitPrice": "1", "categoryId": 999},
        ]
        for fields in invalid:
            with self.subTest(fields=fields):
                with self.assertRaises(ValidationError):
                    self.ledger.create_item(fields)
        self.assertEqual(self.store.items.count(), 0)

    def test_duplicate_sku(self):
        self.ledger.create_item(dict(WIDGET))
        with self.assertRaises(DuplicateSkuError):
            self.ledger.create_item(dict(WIDGET, name="Other"))
        self.assertEqual(self.store.items.count(), 1)

    def test_widget_low_stock_scenario(self):
        item = self.ledger.create_item(dict(WIDGET))
        self.assertNotIn(item.id, self.low_stock_ids())

        rented = self.ledger.rent_item(item.id, 8)
        self.assertEqual((rented.quantity, rented.rented_count), (2, 8))
        self.assertIn(item.id, self.low_stock_ids())

        returned = self.ledger.return_item(item.id, 8)
        self.assertEqual((returned.quantity, returned.rented_count), (10, 0))
        self.assertNotIn(item.id, self.low_stock_ids())

        entries = self.entries_for(item.id)
        self.assertEqual(
            [(entry.type, entry.quantity, entry.notes) for entry in entries],
            [
                ("in", 10, "Item created: Widget"),
                ("out", 8, "Item rented - 8 units"),
                ("in", 8, "Item returned - 8 units"),
            ],
        )

    def test_rent_return_round_trip(self):
        item = self.ledger.create_item(dict(WIDGET))
        for quantity in (1, 5, 10):
            with self.subTest(quantity=quantity):
                self.ledger.rent_item(item.id, quantity)
                after = self.ledger.return_item(item.id, quantity)
                self.assertEqual((after.quantity, after.rented_count), (10, 0))

    def test_insufficient_stock_writes_nothing(self):
        item = self.ledger.create_item(dict(WIDGET))
        before = self.store.transactions.count()

        with self.assertRaises(InsufficientStockError) as ctx:
            self.ledger.rent_item(item.id, 11)
        self.assertEqual((ctx.exception.requested, ctx.exception.available), (11, 10))

        current = self.ledger.get_item(item.id)
        self.assertEqual((current.quantity, current.rented_count), (10, 0))
        self.assertEqual(self.store.transactions.count(), before)

        self.ledger.rent_item(item.id, 10)
        self.assertEqual(self.ledger.get_item(item.id).quantity, 0)

    def test_over_return_writes_nothing(self):
        item = self.ledger.create_item(dict(WIDGET))
        self.ledger.rent_item(item.id, 3)
        before = self.store.transactions.count()

        with self.assertRaises(OverReturnError) as ctx:
            self.ledger.return_item(item.id, 4)
        self.assertEqual((ctx.exception.requested, ctx.exception.rented), (4, 3))

        current = self.ledger.get_item(item.id)
        self.assertEqual((current.quantity, current.rented_count), (7, 3))
        self.assertEqual(self.store.transactions.count(), before)

    def test_movement_quantity_must_be_positive_integer(self):
        item = self.ledger.create_item(dict(WIDGET))
        for quantity in (0, -1, 1.5, True, "3", None):
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValidationError):
                    self.ledger.rent_item(item.id, quantity)
                with self.assertRaises(ValidationError):
                    self.ledger.return_item(item.id, quantity)

    def test_unknown_item(self):
        with self.assertRaises(NotFoundError):
            self.ledger.rent_item(999, 1)
        with self.assertRaises(NotFoundError):
            self.ledger.return_item(999, 1)
        with self.assertRaises(NotFoundError):
            self.ledger.update_item(999, {"quantity": 1})
        with self.assertRaises(NotFoundError):
            self.ledger.get_item(999)
        self.assertFalse(self.ledger.delete_item(999))

    def test_rent_records_actor(self):
        clerk = self.catalog.create_user({"username": "clerk", "fullName": "Clerk", "role": "user"})
        item = self.ledger.create_item(dict(WIDGET))
        self.ledger.rent_item(item.id, 2, user_id=clerk.id)
        self.assertEqual(self.entries_for(item.id)[-1].user_id, clerk.id)

    def test_update_logs_quantity_changes(self):
        item = self.ledger.create_item(dict(WIDGET))

        self.ledger.update_item(item.id, {"quantity": 15})
        self.ledger.update_item(item.id, {"stockQuantity": 12})
        self.ledger.update_item(item.id, {"quantity": 12, "location": "Bin 4"})

        entries = self.entries_for(item.id)[1:]
        self.assertEqual(
            [(entry.type, entry.quantity, entry.notes) for entry in entries],
            [
                ("in", 5, "Quantity increased by 5"),
                ("out", 3, "Quantity decreased by 3"),
            ],
        )
        self.assertEqual(self.ledger.get_item(item.id).location, "Bin 4")

    def test_update_logs_broken_increase_only(self):
        item = self.ledger.create_item(dict(WIDGET))

        updated = self.ledger.update_item(item.id, {"brokenCount": 2})
        self.assertEqual((updated.quantity, updated.broken_count), (10, 2))
        self.ledger.update_item(item.id, {"brokenCount": 1})

        entries = self.entries_for(item.id)[1:]
        self.assertEqual(
            [(entry.type, entry.quantity, entry.notes) for entry in entries],
            [("adjustment", 2, "Broken count increased by 2")],
        )

    def test_update_validation(self):
        item = self.ledger.create_item(dict(WIDGET))
        for fields in ({"name": None}, {"quantity": -1}, {"unitPrice": "x"}, {"categoryId": 999}):
            with self.subTest(fields=fields):
                with self.assertRaises(ValidationError):
                    self.ledger.update_item(item.id, fields)
        self.assertEqual(self.ledger.get_item(item.id), item)

        cleared = self.ledger.update_item(item.id, {"description": None})
        self.assertIsNone(cleared.description)

    def test_delete_item_removes_its_transactions(self):
        item = self.ledger.create_item(dict(WIDGET))
        other = self.ledger.create_item(dict(WIDGET, sku="W-2"))
        self.ledger.rent_item(item.id, 2)

        self.assertTrue(self.ledger.delete_item(item.id))
        self.assertEqual(self.entries_for(item.id), [])
        self.assertEqual(len(self.entries_for(other.id)), 1)
        self.assertFalse(self.ledger.delete_item(item.id))

    def test_category_in_use(self):
        tools = self.catalog.create_category({"name": "Tools"})
        item = self.ledger.create_item(dict(WIDGET, categoryId=tools.id))

        with self.assertRaises(CategoryInUseError) as ctx:
            self.ledger.delete_category(tools.id)
        self.assertEqual(ctx.exception.item_count, 1)
        self.assertIsNotNone(self.store.categories.get(tools.id))

        self.assertTrue(self.ledger.delete_item(item.id))
        self.assertTrue(self.ledger.delete_category(tools.id))
        self.assertIsNone(self.store.categories.get(tools.id))
        self.assertFalse(self.ledger.delete_category(tools.id))

    def run_concurrently(self, operation, item_id, workers, expected_error):
        barrier = Barrier(workers, timeout=30)

        def attempt(_):
            barrier.wait()
            try:
                operation(item_id, 1)
            except expected_error:
                return False
            return True

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(attempt, range(workers)))

    def test_concurrent_rents_never_oversell(self):
        item = self.ledger.create_item(dict(WIDGET, sku="C-1", quantity=12))

        outcomes = self.run_concurrently(self.ledger.rent_item, item.id, 20, InsufficientStockError)

        self.assertEqual(outcomes.count(True), 12)
        current = self.store.items.get(item.id)
        self.assertEqual((current.quantity, current.rented_count), (0, 12))
        outs = [entry for entry in self.entries_for(item.id) if entry.type == "out"]
        self.assertEqual(len(outs), 12)

    def test_concurrent_returns_never_exceed_rented(self):
        item = self.ledger.create_item(dict(WIDGET, sku="C-2", quantity=0, rentedCount=12))

        outcomes = self.run_concurrently(self.ledger.return_item, item.id, 20, OverReturnError)

        self.assertEqual(outcomes.count(True), 12)
        current = self.store.items.get(item.id)
        self.assertEqual((current.quantity, current.rented_count), (12, 0))
        returns = [
            entry
            for entry in self.entries_for(item.id)
            if entry.type == "in" and entry.notes.startswith("Item returned")
        ]
        self.assertEqual(len(returns), 12)


class MemoryStockLedgerTest(StockLedgerContract, unittest.TestCase):
    def make_store(self):
        return MemoryRecordStore()


class SqlStockLedgerTest(StockLedgerContract, unittest.TestCase):
    def make_store(self):
        return sql_store()


if __name__ == "__main__":
    unittest.main()
