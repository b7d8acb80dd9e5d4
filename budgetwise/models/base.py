"""
Shared model plumbing.

Every persisted record is stored with camelCase keys so that stored
documents and backups keep the same shape regardless of which client
wrote them. Python code uses the snake_case field names.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Mapping, TypeVar, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Generate a unique record identifier."""
    return uuid4().hex


def utc_now() -> datetime:
    """Current time in UTC (timezone aware)."""
    return datetime.now(timezone.utc)


# Money is held as Decimal in memory and written to JSON as a plain number,
# so stored documents keep their numeric shape.
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]

ZERO = Decimal("0")


def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Convert a caller-supplied amount to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class RecordModel(BaseModel):
    """Base for all persisted records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_storage(self) -> dict[str, Any]:
        """Dump as a JSON-safe dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


M = TypeVar("M", bound=RecordModel)


def merge_partial(model: M, partial: Mapping[str, Any]) -> tuple[M, list[str]]:
    """
    Shallow-merge a partial payload into a record.

    Keys may use either the field name or its camelCase alias. Fields
    absent from the payload keep their current value. The merged result
    is re-validated by the model.

    Returns:
        (merged_record, ignored_keys)
    """
    fields = type(model).model_fields
    alias_to_name = {
        (info.alias or name): name for name, info in fields.items()
    }

    data = {name: getattr(model, name) for name in fields}
    ignored = []
    for key, value in partial.items():
        name = key if key in fields else alias_to_name.get(key)
        if name is None:
            ignored.append(key)
            continue
        data[name] = value

    return type(model).model_validate(data), ignored
