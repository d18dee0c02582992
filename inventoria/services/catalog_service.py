import logging

from inventoria.core.constants import PRIMARY_ADMIN_USERNAME
from inventoria.core.errors import NotFoundError, ProtectedUserError
from inventoria.schemas.category import CategoryCreate, CategoryUpdate
from inventoria.schemas.common import parse_payload
from inventoria.schemas.user import UserCreate, UserUpdate
from inventoria.services.audit_service import TransactionLogger

logger = logging.getLogger(__name__)


class CatalogService:
    """Categories and users: everything that is not a stock movement."""

    def __init__(self, store, audit=None):
        self.store = store
        self.audit = audit if audit is not None else TransactionLogger(store)

    # ==============================
    # Categories
    # ==============================
    def list_categories(self):
        return self.store.categories.get_all()

    def get_category(self, category_id):
        category = self.store.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def create_category(self, fields):
        data = parse_payload(CategoryCreate, fields, "Invalid category data")
        with self.store.write_lock:
            category = self.store.categories.insert(data.model_dump())
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    def update_category(self, category_id, fields):
        data = parse_payload(CategoryUpdate, fields, "Invalid category data")
        with self.store.write_lock:
            category = self.store.categories.update(category_id, data.model_dump(exclude_unset=True))
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    # ==============================
    # Users
    # ==============================
    def list_users(self):
        return self.store.users.get_all()

    def get_user(self, user_id):
        user = self.store.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def create_user(self, fields, actor_id=None):
        data = parse_payload(UserCreate, fields, "Invalid user data")
        with self.store.write_lock:
            user = self.store.users.insert(data.model_dump())
            self.audit.append(
                {
                    "item_id": None,
                    "user_id": actor_id,
                    "type": "user_created",
                    "quantity": 1,
                    "unit_price": "0.00",
                    "notes": "User created: {} ({})".format(user.full_name, user.username),
                }
            )
        logger.info("Created user %s (%s, %s)", user.id, user.username, user.role)
        return user

    def update_user(self, user_id, fields):
        data = parse_payload(UserUpdate, fields, "Invalid user data")
        changes = data.model_dump(exclude_unset=True)
        with self.store.write_lock:
            current = self.get_user(user_id)
            if changes.get("role", current.role) != "admin" and current.role == "admin":
                self._ensure_other_admin(current)
            user = self.store.users.update(user_id, changes)
        return user

    def _ensure_other_admin(self, user):
        others = self.store.users.find_where(
            lambda candidate: candidate.role == "admin" and candidate.id != user.id
        )
        if not others:
            raise ProtectedUserError("Cannot remove the last admin user")
        return others[0]

    def delete_user(self, user_id, actor_id=None):
        with self.store.write_lock:
            user = self.store.users.get(user_id)
            if user is None:
                return False
            if user.username == PRIMARY_ADMIN_USERNAME:
                raise ProtectedUserError("Cannot delete the primary admin user")
            if user.role == "admin":
                successor = self._ensure_other_admin(user)
            else:
                successor = self.store.users.first_where(
                    lambda candidate: candidate.role == "admin"
                ) or self.store.users.first_where(lambda candidate: candidate.id != user.id)
            if successor is not None:
                reassigned = self.store.transactions.update_where(
                    lambda entry: entry.user_id == user.id,
                    {"user_id": successor.id},
                )
                if reassigned:
                    logger.info(
                        "Reassigned %s transaction(s) from user %s to %s",
                        len(reassigned),
                        user.id,
                        successor.id,
                    )
            else:
                self.store.transactions.delete_where(lambda entry: entry.user_id == user.id)
            deleted = self.store.users.delete(user_id)
            if deleted:
                self.audit.append(
                    {
                        "item_id": None,
                        "user_id": actor_id,
                        "type": "adjustment",
                        "quantity": 1,
                        "notes": "User deleted: {} ({})".format(user.full_name, user.username),
                    }
                )
        logger.info("Deleted user %s (%s)", user_id, user.username)
        return deleted


__all__ = ["CatalogService"]
