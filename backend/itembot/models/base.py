# itembot/models/base.py
"""
Shared building blocks for stored records.
"""
import datetime as dt
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)


def _ensure_utc(value: dt.datetime) -> dt.datetime:
    # Naive timestamps in the blob are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


# Timezone-aware UTC datetime, serialized as ISO 8601
Timestamp = Annotated[dt.datetime, AfterValidator(_ensure_utc)]


class StoreRecord(BaseModel):
    """
    Base class for every record kept inside the store blob.

    Unknown fields are preserved so that a load/save cycle never drops data
    written by a newer client. An optional field holding a value of the wrong
    type falls back to its default instead of invalidating the record; only
    required fields (identifiers, timestamps) can reject a record.
    """
    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="wrap")
    @classmethod
    def default_on_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            field = cls.model_fields.get(info.field_name)
            if field is None or field.is_required():
                raise
            return field.get_default(call_default_factory=True)


def to_ms(value: dt.datetime) -> int:
    """Convert an aware datetime into epoch milliseconds."""
    return int(value.timestamp() * 1000)
