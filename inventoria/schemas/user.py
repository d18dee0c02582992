from typing import ClassVar, Literal, Optional

from pydantic import Field, model_validator

from inventoria.schemas.common import ApiModel, RecordModel, UtcDateTime, reject_explicit_nulls

Role = Literal["admin", "user", "overseer"]


class User(RecordModel):
    id: int
    username: str
    full_name: str
    role: Role
    is_active: bool = True
    created_at: UtcDateTime
    updated_at: UtcDateTime


class UserCreate(ApiModel):
    username: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    role: Role = "user"
    is_active: bool = True


class UserUpdate(ApiModel):
    nullable_fields: ClassVar[frozenset] = frozenset()

    username: Optional[str] = Field(None, min_length=1)
    full_name: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def check_nulls(self):
        return reject_explicit_nulls(self)


class UserRef(RecordModel):
    id: int
    full_name: str
    username: str
