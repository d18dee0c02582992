from typing import Literal, Optional

from pydantic import Field

from inventoria.schemas.common import ApiModel, Money, RecordModel, UtcDateTime
from inventoria.schemas.user import UserRef

TransactionType = Literal["in", "out", "adjustment", "user_created"]


class Transaction(RecordModel):
    id: int
    item_id: Optional[int] = None
    user_id: int
    type: TransactionType
    quantity: int
    unit_price: Optional[Money] = None
    notes: Optional[str] = None
    created_at: UtcDateTime


class TransactionEntry(ApiModel):
    item_id: Optional[int] = None
    user_id: Optional[int] = None
    type: TransactionType
    # Zero only occurs for the creation entry of an item stocked at 0.
    quantity: int = Field(ge=0)
    unit_price: Optional[Money] = None
    notes: Optional[str] = None


class ItemRef(RecordModel):
    id: int
    name: str
    sku: str


class TransactionWithDetails(Transaction):
    item: Optional[ItemRef] = None
    user: Optional[UserRef] = None
