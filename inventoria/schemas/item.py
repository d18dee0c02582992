from typing import ClassVar, Optional

from pydantic import AliasChoices, Field, model_validator

from inventoria.core.constants import DEFAULT_MIN_STOCK_LEVEL
from inventoria.schemas.common import (
    ApiModel,
    Money,
    OptionalDate,
    RecordModel,
    UtcDateTime,
    reject_explicit_nulls,
)


class Item(RecordModel):
    id: int
    name: str
    sku: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    quantity: int = 0
    unit_price: Money
    location: Optional[str] = None
    min_stock_level: Optional[int] = DEFAULT_MIN_STOCK_LEVEL
    status: str = "active"
    rented_count: int = 0
    broken_count: int = 0
    rentable: bool = True
    expirable: bool = False
    expiration_date: OptionalDate = None
    created_at: UtcDateTime
    updated_at: UtcDateTime


class ItemWithCategory(Item):
    category_name: Optional[str] = None


class ItemCreate(ApiModel):
    name: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    quantity: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("stockQuantity", "quantity"),
    )
    unit_price: Money = Field(ge=0)
    location: Optional[str] = None
    min_stock_level: int = Field(DEFAULT_MIN_STOCK_LEVEL, ge=0)
    status: str = "active"
    rented_count: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("rentedQuantity", "rentedCount", "rented_count"),
    )
    broken_count: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("brokenQuantity", "brokenCount", "broken_count"),
    )
    rentable: bool = True
    expirable: bool = False
    expiration_date: OptionalDate = None


class ItemUpdate(ApiModel):
    nullable_fields: ClassVar[frozenset] = frozenset(
        {"description", "category_id", "location", "expiration_date"}
    )

    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    quantity: Optional[int] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("stockQuantity", "quantity"),
    )
    unit_price: Optional[Money] = Field(None, ge=0)
    location: Optional[str] = None
    min_stock_level: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None
    rented_count: Optional[int] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("rentedQuantity", "rentedCount", "rented_count"),
    )
    broken_count: Optional[int] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("brokenQuantity", "brokenCount", "broken_count"),
    )
    rentable: Optional[bool] = None
    expirable: Optional[bool] = None
    expiration_date: OptionalDate = None

    @model_validator(mode="after")
    def check_nulls(self):
        return reject_explicit_nulls(self)


class StockMovement(ApiModel):
    quantity: int = Field(gt=0)
    user_id: Optional[int] = None


class StockStatus(ApiModel):
    level: str
    label: str
    percentage: float
    expired: bool
