from typing import ClassVar, Optional

from pydantic import Field, model_validator

from inventoria.schemas.common import ApiModel, RecordModel, UtcDateTime, reject_explicit_nulls


class Category(RecordModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: UtcDateTime


class CategoryCreate(ApiModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class CategoryUpdate(ApiModel):
    nullable_fields: ClassVar[frozenset] = frozenset({"description"})

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_nulls(self):
        return reject_explicit_nulls(self)
