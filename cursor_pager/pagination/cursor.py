"""Opaque cursor encoding for cursor-based pagination.

A cursor is unpadded URL-safe base64 over a small JSON envelope::

    {"v": 1, "k": [{"t": "datetime", "v": "2024-01-01T00:00:00Z"}, {"t": "int", "v": 42}]}

Every key component is tagged with its type so that decoding hands back the
exact type that was encoded. Comparisons in the store depend on it: a date
that came back as a string would compare lexically instead of
chronologically.
"""

import base64
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..errors.problem_details import InvalidCursor


CURSOR_VERSION = 1

_NON_FINITE = ("inf", "-inf", "nan")


class _Tagged(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


class NullValue(_Tagged):
    """Component for a record whose paginated field is null or missing."""

    t: Literal["null"] = "null"
    v: None = None


class BoolValue(_Tagged):
    t: Literal["bool"] = "bool"
    v: bool


class IntValue(_Tagged):
    t: Literal["int"] = "int"
    v: int


class FloatValue(_Tagged):
    """Float component. JSON has no literal for inf or nan, so those travel as strings."""

    t: Literal["float"] = "float"
    v: float

    @field_serializer("v")
    def serialize_v(self, v: float) -> Union[float, str]:
        if math.isnan(v):
            return "nan"
        if math.isinf(v):
            return "inf" if v > 0 else "-inf"
        return v

    @field_validator("v", mode="before")
    @classmethod
    def validate_v(cls, v: Any) -> Any:
        if isinstance(v, str) and v in _NON_FINITE:
            return float(v)
        return v


class DecimalValue(_Tagged):
    t: Literal["decimal"] = "decimal"
    v: Decimal


class StrValue(_Tagged):
    t: Literal["str"] = "str"
    v: str


class DateTimeValue(_Tagged):
    t: Literal["datetime"] = "datetime"
    v: datetime


class DateValue(_Tagged):
    t: Literal["date"] = "date"
    v: date


class UUIDValue(_Tagged):
    t: Literal["uuid"] = "uuid"
    v: UUID


TaggedValue = Annotated[
    Union[
        NullValue, BoolValue, IntValue, FloatValue, DecimalValue,
        StrValue, DateTimeValue, DateValue, UUIDValue
    ],
    Field(discriminator="t")
]

# Checked in order: bool before int, datetime before date (subclasses first).
_VARIANTS: Tuple[Tuple[type, type], ...] = (
    (bool, BoolValue),
    (int, IntValue),
    (float, FloatValue),
    (Decimal, DecimalValue),
    (datetime, DateTimeValue),
    (date, DateValue),
    (UUID, UUIDValue),
    (str, StrValue),
)


class CursorEnvelope(BaseModel):
    """Versioned container for one or two tagged key components."""

    v: Literal[1] = CURSOR_VERSION
    k: List[TaggedValue] = Field(min_length=1, max_length=2)

    model_config = ConfigDict(extra="forbid", frozen=True)


def tag_value(value: Any) -> TaggedValue:
    """Wrap a raw value in its tagged variant.

    Raises:
        TypeError: If the value's type cannot be carried in a cursor
    """
    if value is None:
        return NullValue()
    for python_type, variant in _VARIANTS:
        if isinstance(value, python_type):
            return variant(v=value)
    raise TypeError(f"Unsupported cursor value type: {type(value).__name__}")


def encode_cursor(value: Union[Any, Tuple[Any, Any]]) -> str:
    """Encode a cursor value into an opaque token.

    Args:
        value: A single orderable value, or a ``(paginated_value, id_value)``
            pair when the paginated field is tie-broken on the id field

    Returns:
        URL-safe base64 cursor string without padding

    Raises:
        TypeError: If a component has an unsupported type
        ValueError: If a sequence other than a pair is given
    """
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise ValueError(f"Cursor pairs must have exactly 2 items, got {len(value)}")
        components = [tag_value(item) for item in value]
    else:
        components = [tag_value(value)]

    envelope = CursorEnvelope(k=components)
    encoded = base64.urlsafe_b64encode(envelope.model_dump_json().encode("utf-8"))
    return encoded.decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> Union[Any, Tuple[Any, Any]]:
    """Decode a token produced by :func:`encode_cursor`.

    Args:
        cursor: Opaque cursor string

    Returns:
        The single value, or a tuple when a pair was encoded

    Raises:
        InvalidCursor: If the cursor is empty, malformed or not ours
    """
    if not cursor or not isinstance(cursor, str):
        raise InvalidCursor("Empty cursor provided")

    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        envelope = CursorEnvelope.model_validate_json(raw)
    except ValueError as e:
        raise InvalidCursor(f"Invalid cursor format: {e}")

    values = [component.v for component in envelope.k]
    if len(values) == 1:
        return values[0]
    return tuple(values)
