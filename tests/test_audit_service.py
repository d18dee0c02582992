import unittest
from unittest.mock import patch

from inventoria.services.audit_service import AdminFallbackResolver, TransactionLogger
from inventoria.store import MemoryRecordStore


def add_user(store, username, role="user"):
    return store.users.insert(
        {"username": username, "full_name": username.title(), "role": role, "is_active": True}
    )


class AdminFallbackResolverTest(unittest.TestCase):
    def setUp(self):
        self.store = MemoryRecordStore()
        self.resolver = AdminFallbackResolver(self.store)

    def test_no_users(self):
        self.assertIsNone(self.resolver())
        self.assertIsNone(self.resolver(3))

    def test_prefers_existing_user(self):
        add_user(self.store, "admin", role="admin")
        clerk = add_user(self.store, "clerk")
        self.assertEqual(self.resolver(clerk.id), clerk.id)

    def test_falls_back_to_admin_then_anyone(self):
        clerk = add_user(self.store, "clerk")
        self.assertEqual(self.resolver(), clerk.id)
        self.assertEqual(self.resolver(999), clerk.id)

        admin = add_user(self.store, "boss", role="admin")
        self.assertEqual(self.resolver(), admin.id)
        self.assertEqual(self.resolver(999), admin.id)


class TransactionLoggerTest(unittest.TestCase):
    def setUp(self):
        self.store = MemoryRecordStore()
        self.logger = TransactionLogger(self.store)

    def entry(self, **overrides):
        entry = {"item_id": None, "type": "in", "quantity": 2, "notes": "restock"}
        entry.update(overrides)
        return entry

    def test_skips_when_nobody_to_attribute(self):
        with self.assertLogs("inventoria.services.audit_service", level="WARNING"):
            self.assertIsNone(self.logger.append(self.entry()))
        self.assertEqual(self.store.transactions.count(), 0)

    def test_appends_with_resolved_actor(self):
        admin = add_user(self.store, "admin", role="admin")
        logged = self.logger.append(self.entry(user_id=42, unit_price="3.5"))

        self.assertEqual(logged.user_id, admin.id)
        self.assertEqual(str(logged.unit_price), "3.50")
        self.assertEqual(self.store.transactions.get_all(), [logged])

    def test_injected_resolver(self):
        clerk = add_user(self.store, "clerk")
        audit = TransactionLogger(self.store, resolver=lambda user_id=None: clerk.id)
        self.assertEqual(audit.append(self.entry()).user_id, clerk.id)

    def test_never_raises(self):
        add_user(self.store, "admin", role="admin")
        with self.assertLogs("inventoria.services.audit_service", level="WARNING"):
            self.assertIsNone(self.logger.append(self.entry(quantity=-1)))
            self.assertIsNone(self.logger.append(self.entry(type="teleport")))

        with patch.object(self.store.transactions, "insert", side_effect=RuntimeError("disk full")):
            with self.assertLogs("inventoria.services.audit_service", level="WARNING"):
                self.assertIsNone(self.logger.append(self.entry()))
        self.assertEqual(self.store.transactions.count(), 0)

    def test_flush(self):
        add_user(self.store, "admin", role="admin")
        for _ in range(3):
            self.logger.append(self.entry())
        self.assertEqual(self.logger.flush(), 3)
        self.assertEqual(self.store.transactions.count(), 0)


if __name__ == "__main__":
    unittest.main()
