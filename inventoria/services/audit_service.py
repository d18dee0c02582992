import logging

from inventoria.schemas.common import parse_payload
from inventoria.schemas.transaction import TransactionEntry

logger = logging.getLogger(__name__)


class AdminFallbackResolver:
    """Pick the actor recorded on a transaction.

    The supplied user wins when it exists; otherwise the first admin, then
    any user. ``None`` means there is nobody to attribute the entry to.
    """

    def __init__(self, store):
        self.store = store

    def __call__(self, user_id=None):
        if user_id is not None:
            if self.store.users.get(user_id) is not None:
                return user_id
            logger.debug("Transaction actor %s not found, falling back to admin", user_id)
        admin = self.store.users.first_where(lambda user: user.role == "admin")
        if admin is not None:
            return admin.id
        users = self.store.users.get_all()
        if users:
            return users[0].id
        return None


class TransactionLogger:
    def __init__(self, store, resolver=None):
        self.store = store
        self.resolver = resolver if resolver is not None else AdminFallbackResolver(store)

    def append(self, entry):
        """Persist one audit entry; never raises.

        Returns the stored ``Transaction``, or ``None`` when no actor could be
        resolved or the write failed. Failures are logged as warnings.
        """
        try:
            entry = parse_payload(TransactionEntry, entry, "Invalid transaction entry")
            user_id = self.resolver(entry.user_id)
            if user_id is None:
                logger.warning(
                    "No users found, skipping %s transaction log",
                    entry.type,
                    extra={"item_id": entry.item_id},
                )
                return None
            fields = entry.model_dump()
            fields["user_id"] = user_id
            return self.store.transactions.insert(fields)
        except Exception as exc:
            logger.warning(
                "Failed to log transaction: %s",
                exc,
                exc_info=True,
            )
            return None

    def flush(self):
        with self.store.write_lock:
            count = self.store.transactions.count()
            self.store.transactions.clear()
        logger.info("Activity logs flushed (%s entries)", count)
        return count


__all__ = ["AdminFallbackResolver", "TransactionLogger"]
