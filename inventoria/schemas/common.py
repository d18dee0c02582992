from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from inventoria.core.dates import normalize_date
from inventoria.core.errors import ValidationError

CENTS = Decimal("0.01")


class ApiModel(BaseModel):
    """Base for request payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class RecordModel(BaseModel):
    """Base for stored records; instances are immutable snapshots."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


def as_utc(value):
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def as_money(value):
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("must be a decimal number")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError("must be a decimal number") from exc
    if not amount.is_finite():
        raise ValueError("must be a decimal number")
    return amount.quantize(CENTS)


def as_date(value):
    if value is None or isinstance(value, date):
        return normalize_date(value)
    if isinstance(value, str) and not value.strip():
        return None
    parsed = normalize_date(value)
    if parsed is None:
        raise ValueError("invalid date: {!r}".format(value))
    return parsed


UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]
Money = Annotated[Decimal, BeforeValidator(as_money)]
OptionalDate = Annotated[Optional[date], BeforeValidator(as_date)]


def reject_explicit_nulls(model):
    for name in model.model_fields_set:
        if getattr(model, name) is None and name not in model.nullable_fields:
            raise ValueError("{} cannot be null".format(name))
    return model


def parse_payload(schema, payload, message):
    if isinstance(payload, schema):
        return payload
    if payload is None:
        payload = {}
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        details = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors(include_url=False)
        ]
        raise ValidationError(message, details=details) from exc
