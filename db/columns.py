"""
db/columns.py
-------------
Null-safe, type-converting accessors from a result row to Python values.

Rows are the dict-like RealDictRow objects produced by the pool's cursor
factory. Every getter returns None when the stored value is NULL, so an
absent value is never confused with 0, "" or False.
"""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from psycopg2.extras import Json

from errors import MappingError, TypeConversionError

E = TypeVar("E", bound=Enum)

_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


def _raw(row: Mapping[str, Any], column: str) -> Any:
    try:
        return row[column]
    except KeyError as e:
        raise MappingError(
            f"Column '{column}' is not present in the result row",
            context={"column": column},
        ) from e


def _conversion_error(column: str, value: Any, target: str) -> TypeConversionError:
    return TypeConversionError(
        f"Cannot convert column '{column}' value {value!r} to {target}",
        context={"column": column, "target": target},
    )


# ── READ ──────────────────────────────────────────────────

def get_uuid(row: Mapping[str, Any], column: str) -> Optional[uuid.UUID]:
    """Identifier column; accepts native uuid values or canonical text."""
    value = _raw(row, column)
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise _conversion_error(column, value, "UUID") from e


def get_str(row: Mapping[str, Any], column: str) -> Optional[str]:
    value = _raw(row, column)
    return None if value is None else str(value)


def get_long(row: Mapping[str, Any], column: str) -> Optional[int]:
    value = _raw(row, column)
    if value is None:
        return None
    if isinstance(value, bool):
        raise _conversion_error(column, value, "integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise _conversion_error(column, value, "integer") from e


def get_int(row: Mapping[str, Any], column: str) -> Optional[int]:
    """Like get_long, but the value must fit a signed 32-bit integer."""
    value = get_long(row, column)
    if value is not None and not _INT32_MIN <= value <= _INT32_MAX:
        raise _conversion_error(column, value, "32-bit integer")
    return value


def get_float(row: Mapping[str, Any], column: str) -> Optional[float]:
    value = _raw(row, column)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise _conversion_error(column, value, "float") from e


def get_bool(row: Mapping[str, Any], column: str) -> Optional[bool]:
    value = _raw(row, column)
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise _conversion_error(column, value, "boolean")


def get_bytes(row: Mapping[str, Any], column: str) -> Optional[bytes]:
    """BYTEA column; psycopg2 returns memoryview, which is copied out."""
    value = _raw(row, column)
    if value is None or isinstance(value, bytes):
        return value
    if isinstance(value, (memoryview, bytearray)):
        return bytes(value)
    raise _conversion_error(column, value, "bytes")


def get_datetime(row: Mapping[str, Any], column: str) -> Optional[datetime]:
    """
    TIMESTAMP column as a naive datetime.

    Zone-aware values (TIMESTAMPTZ) are normalised to UTC before the
    offset is dropped, mirroring `to_timestamp`.
    """
    value = _raw(row, column)
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise _conversion_error(column, value, "datetime")
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def get_enum(row: Mapping[str, Any], column: str, enum_type: Type[E]) -> Optional[E]:
    """Categorical column; NULL stays None rather than becoming a default member."""
    value = get_str(row, column)
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError as e:
        raise _conversion_error(column, value, enum_type.__name__) from e


def get_json(row: Mapping[str, Any], column: str) -> Any:
    """
    JSON/JSONB column, already decoded by psycopg2.

    The value is returned as stored: a dict, list or scalar. A JSON string
    document arrives as `str` and is not decoded a second time.
    """
    return _raw(row, column)


def get_json_text(row: Mapping[str, Any], column: str) -> Any:
    """
    Text or bytea column holding a JSON document, decoded here.

    Values that are not text or bytes are returned unchanged.

    Raises:
        MappingError: If the stored content is not valid UTF-8 JSON.
    """
    value = _raw(row, column)
    if not isinstance(value, (str, bytes, bytearray, memoryview)):
        return value
    try:
        if not isinstance(value, str):
            value = bytes(value).decode("utf-8")
        return json.loads(value)
    except ValueError as e:
        raise MappingError(
            f"Column '{column}' does not contain valid JSON: {e}",
            context={"column": column},
        ) from e


# ── WRITE ─────────────────────────────────────────────────

def to_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    """Inverse of get_datetime: aware values become naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_json(value: Any) -> Optional[Json]:
    """Wrap a dict/list for binding to a json/jsonb parameter."""
    return None if value is None else Json(value)


def enum_value(value: Optional[Enum]) -> Any:
    return None if value is None else value.value
