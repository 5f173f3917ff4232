"""Default scalar conversions.

The scalar handler assigns directly when source and destination share a type
and otherwise consults this table. Anything not listed is not convertible by
default and needs a registered converter:

    numeric widening      int -> float, int -> complex, float -> complex,
                          int/float -> Decimal
    same-family narrowing float -> int (truncates), Decimal -> int/float
    same family           value -> subclass of its family (int -> MyInt, str -> MyStr)
    enums                 member -> its value's type, value -> Enum (by value)
    text                  str <-> bytes (UTF-8), bytes <-> bytearray
    time                  datetime <-> str using the policy's time layout; naive
                          datetimes are formatted as UTC

Never by default: numbers <-> str, bool <-> numbers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from structmap.core.errors import TypeMismatchError
from structmap.core.types import ABSENT

_FAMILIES: tuple[type, ...] = (bool, int, float, complex, Decimal, str, bytes, bytearray)

_WIDENING: frozenset[tuple[type, type]] = frozenset(
    {
        (int, float),
        (int, complex),
        (float, complex),
        (int, Decimal),
        (float, Decimal),
        (float, int),
        (Decimal, int),
        (Decimal, float),
    }
)


def _family(cls: type) -> type | None:
    for base in _FAMILIES:
        if issubclass(cls, base):
            return base
    return None


def _build(target: type, value: Any) -> Any:
    try:
        return target(value)
    except (TypeError, ValueError, OverflowError, InvalidOperation) as e:
        raise TypeMismatchError(
            f"cannot convert {type(value).__qualname__} {value!r} to {target.__qualname__}"
        ) from e


def convert_scalar(value: Any, target: type, *, time_layout: str) -> Any:
    """Convert a scalar to target using the default conversion table.

    Args:
        value: Source scalar.
        target: Concrete destination class.
        time_layout: strftime/strptime format for datetime <-> str.

    Returns:
        Converted value, or ABSENT when the pair is not convertible by default.

    Raises:
        TypeMismatchError: If the pair is convertible in principle but this
            particular value is not (unknown enum value, undecodable bytes,
            unparsable timestamp, NaN to int, ...).
    """
    if type(value) is target:
        return value

    if issubclass(target, Enum):
        if isinstance(value, target):
            return value
        if isinstance(value, Enum):
            value = value.value
        return _build(target, value)

    if isinstance(value, Enum):
        inner = value.value
        if isinstance(inner, Enum):
            return ABSENT
        return convert_scalar(inner, target, time_layout=time_layout)

    if isinstance(value, datetime) and issubclass(target, str):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return target(value.strftime(time_layout))
    if isinstance(value, str) and issubclass(target, datetime):
        try:
            return target.strptime(value, time_layout)
        except ValueError as e:
            raise TypeMismatchError(f"cannot parse {value!r} with layout {time_layout!r}") from e

    source_family = _family(type(value))
    target_family = _family(target)
    if source_family is None or target_family is None:
        return ABSENT

    if source_family is target_family:
        return _build(target, value)
    if source_family is str and target_family is bytes:
        return target(value.encode("utf-8"))
    if source_family in (bytes, bytearray) and target_family is str:
        try:
            return target(bytes(value).decode("utf-8"))
        except UnicodeDecodeError as e:
            raise TypeMismatchError("cannot decode bytes as UTF-8") from e
    if {source_family, target_family} == {bytes, bytearray}:
        return target(value)
    if (source_family, target_family) in _WIDENING:
        if target_family is Decimal and source_family is float:
            return _build(target, str(value))
        return _build(target, value)
    return ABSENT
