import unittest
from datetime import date, timedelta
from types import SimpleNamespace

from inventoria.core.stock_rules import (
    CRITICAL,
    GOOD,
    LOW,
    SATURATED,
    URGENT,
    classify_item,
    effective_min_stock,
    expires_within,
    is_expired,
    is_low_stock,
    stock_label,
    stock_level,
    stock_percentage,
)


class StockLevelTest(unittest.TestCase):
    def test_boundaries_for_min_five(self):
        cases = [
            (0, CRITICAL),
            (1, URGENT),
            (2, LOW),
            (4, LOW),
            (5, GOOD),
            (12, GOOD),
            (13, SATURATED),
        ]
        for quantity, expected in cases:
            with self.subTest(quantity=quantity):
                self.assertEqual(stock_level(quantity, 5), expected)

    def test_blank_min_uses_default(self):
        self.assertEqual(effective_min_stock(None), 5)
        self.assertEqual(effective_min_stock(0), 5)
        self.assertEqual(stock_level(4, 0), LOW)
        self.assertEqual(stock_level(13, None), SATURATED)

    def test_custom_min(self):
        self.assertEqual(stock_level(3, 10), URGENT)
        self.assertEqual(stock_level(9, 10), LOW)
        self.assertEqual(stock_level(25, 10), GOOD)
        self.assertEqual(stock_level(26, 10), SATURATED)

    def test_low_stock_is_strictly_below_min(self):
        self.assertTrue(is_low_stock(4, 5))
        self.assertFalse(is_low_stock(5, 5))
        self.assertTrue(is_low_stock(0, None))

    def test_percentage_is_capped(self):
        self.assertEqual(stock_percentage(10, 5), 100.0)
        self.assertEqual(stock_percentage(2, 4), 50.0)

    def test_labels(self):
        self.assertEqual(stock_label(CRITICAL), "Out of Stock")
        self.assertEqual(stock_label(SATURATED), "Saturated")


class ExpiryTest(unittest.TestCase):
    def setUp(self):
        self.today = date(2024, 6, 1)

    def test_expired_on_and_after_date(self):
        self.assertTrue(is_expired(True, self.today, today=self.today))
        self.assertTrue(is_expired(True, self.today - timedelta(days=1), today=self.today))
        self.assertFalse(is_expired(True, self.today + timedelta(days=1), today=self.today))

    def test_non_expirable_never_expires(self):
        self.assertFalse(is_expired(False, self.today - timedelta(days=30), today=self.today))
        self.assertFalse(is_expired(True, None, today=self.today))

    def test_expires_within_window(self):
        self.assertTrue(expires_within(True, self.today, 7, today=self.today))
        self.assertTrue(expires_within(True, self.today + timedelta(days=7), 7, today=self.today))
        self.assertFalse(expires_within(True, self.today + timedelta(days=8), 7, today=self.today))
        self.assertFalse(expires_within(True, self.today - timedelta(days=1), 7, today=self.today))
        self.assertFalse(expires_within(False, self.today, 7, today=self.today))

    def test_accepts_form_date_strings(self):
        self.assertTrue(expires_within(True, "03/06/2024", 7, today=self.today))
        self.assertTrue(is_expired(True, "2024-05-31", today=self.today))

    def test_classify_item(self):
        item = SimpleNamespace(
            quantity=1,
            min_stock_level=5,
            expirable=True,
            expiration_date=self.today,
        )
        self.assertEqual(
            classify_item(item, today=self.today),
            {"level": URGENT, "label": "Urgent", "percentage": 20.0, "expired": True},
        )


if __name__ == "__main__":
    unittest.main()
