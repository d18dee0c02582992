import unittest
from datetime import date, datetime, timedelta

from inventoria.services import CatalogService, InventoryViews, StockLedger
from inventoria.store import MemoryRecordStore


class InventoryViewsTest(unittest.TestCase):
    def setUp(self):
        self.store = MemoryRecordStore()
        self.ledger = StockLedger(self.store)
        self.catalog = CatalogService(self.store, audit=self.ledger.audit)
        self.views = InventoryViews(self.store)
        self.catalog.create_user({"username": "admin", "fullName": "Admin User", "role": "admin"})
        self.food = self.catalog.create_category({"name": "Food"})
        self.today = date.today()

    def add_item(self, sku, **fields):
        payload = {"name": "Item {}".format(sku), "sku": sku, "unitPrice": "1.00", "quantity": 10}
        payload.update(fields)
        return self.ledger.create_item(payload)

    def test_dashboard_with_no_items(self):
        stats = self.views.dashboard_stats()
        self.assertEqual(stats["total_items"], 0)
        self.assertEqual(stats["total_value"], 0)
        self.assertEqual(stats["low_stock_count"], 0)

    def test_dashboard_totals(self):
        self.add_item("A", quantity=3, unitPrice="2.50")
        self.add_item("B", quantity=2, unitPrice="1.25", minStockLevel=5)
        self.add_item("C", quantity=0, unitPrice="99.99")

        stats = self.views.dashboard_stats()
        self.assertEqual(stats["total_items"], 5)
        self.assertEqual(stats["total_value"], 10.0)
        self.assertEqual(stats["low_stock_count"], 3)
        self.assertEqual(stats["today_transactions"], self.store.transactions.count())

        tomorrow = datetime.now().astimezone() + timedelta(days=1)
        self.assertEqual(self.views.dashboard_stats(now=tomorrow)["today_transactions"], 0)

    def test_low_stock_uses_default_min(self):
        low = self.add_item("A", quantity=4, minStockLevel=0)
        self.add_item("B", quantity=5, minStockLevel=0)
        self.assertEqual([item.id for item in self.views.low_stock_items()], [low.id])

    def test_expiring_soon(self):
        soon = self.add_item("A", expirable=True, expirationDate=(self.today + timedelta(days=3)).isoformat())
        later = self.add_item("B", expirable=True, expirationDate=(self.today + timedelta(days=10)).isoformat())
        self.add_item("C", expirable=False, expirationDate=(self.today + timedelta(days=1)).isoformat())
        self.add_item("D", expirable=True, expirationDate=(self.today - timedelta(days=1)).isoformat())

        self.assertEqual(
            [item.id for item in self.views.expiring_soon_items(7, today=self.today)],
            [soon.id],
        )
        self.assertEqual(
            [item.id for item in self.views.expiring_soon_items(14, today=self.today)],
            [soon.id, later.id],
        )
        self.assertEqual([item.sku for item in self.views.expired_items(today=self.today)], ["D"])

    def test_category_names(self):
        food_item = self.add_item("A", categoryId=self.food.id)
        loose_item = self.add_item("B")

        items = {item.id: item for item in self.views.items_with_category_name()}
        self.assertEqual(items[food_item.id].category_name, "Food")
        self.assertEqual(items[loose_item.id].category_name, "Uncategorized")
        self.assertEqual(list(items), [loose_item.id, food_item.id])

    def test_list_items_filters(self):
        food_item = self.add_item("A", categoryId=self.food.id, name="Milk")
        loose_item = self.add_item("B", name="Hammer")

        self.assertEqual(len(self.views.list_items()), 2)
        self.assertEqual(len(self.views.list_items(category="all")), 2)
        self.assertEqual([i.id for i in self.views.list_items(category=str(self.food.id))], [food_item.id])
        self.assertEqual([i.id for i in self.views.list_items(category="uncategorized")], [loose_item.id])
        self.assertEqual(self.views.list_items(category="nope"), [])
        self.assertEqual([i.id for i in self.views.list_items(search="milk", category="uncategorized")], [food_item.id])

    def test_search(self):
        hammer = self.add_item("TL-1", name="Claw Hammer", description="Steel head")
        self.add_item("FD-1", name="Bread")

        for query in ("hammer", "tl-", "STEEL"):
            with self.subTest(query=query):
                self.assertEqual([item.id for item in self.views.search_items(query)], [hammer.id])
        self.assertEqual(self.views.search_items("  "), [])

    def test_rental_stats(self):
        item = self.add_item("A", quantity=10)
        self.add_item("B", quantity=5, brokenCount=1)
        self.ledger.rent_item(item.id, 4)
        self.ledger.update_item(item.id, {"brokenCount": 2})

        self.assertEqual(self.views.rental_stats(), {"rented_count": 4, "broken_count": 3})

    def test_stock_report(self):
        self.add_item("A", quantity=0)
        self.add_item("B", quantity=1)
        self.add_item("C", quantity=30)
        self.add_item("D", quantity=6, expirable=True, expirationDate=self.today.isoformat())

        report = self.views.stock_report(today=self.today)
        self.assertEqual(report["item_count"], 4)
        self.assertEqual(report["expired_count"], 1)
        self.assertEqual(
            report["levels"],
            {"critical": 1, "urgent": 1, "low": 0, "good": 1, "saturated": 1},
        )

    def test_transactions_with_details(self):
        item = self.add_item("A")
        self.ledger.rent_item(item.id, 2)

        details = self.views.transactions_with_details()
        self.assertEqual(len(details), 3)
        self.assertEqual(details[0].notes, "Item rented - 2 units")
        self.assertEqual(details[0].item.sku, "A")
        self.assertEqual(details[0].user.username, "admin")
        self.assertIsNone(details[-1].item)
        self.assertEqual(details[-1].type, "user_created")

        self.assertEqual(len(self.views.transactions_with_details(limit=1)), 1)


if __name__ == "__main__":
    unittest.main()
