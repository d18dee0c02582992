from inventoria.models.category import CategoryRow
from inventoria.models.item import ItemRow
from inventoria.models.transaction import TransactionRow
from inventoria.models.user import UserRow

__all__ = [
    "CategoryRow",
    "ItemRow",
    "TransactionRow",
    "UserRow",
]
