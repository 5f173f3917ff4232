"""Pure functions over shapes: zero values, zero checks, allocation, assignability."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from structmap.core.errors import UnsupportedTypeError
from structmap.core.shape.core import is_struct, is_struct_type
from structmap.core.shape.models import Shape, TypeInfo
from structmap.core.types import ABSENT

_SCALAR_ZEROS: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
    Decimal: Decimal(0),
    timedelta: timedelta(0),
}


def zero_value(
    info: TypeInfo,
    track: Callable[[Any], Any] | None = None,
    _building: frozenset[type] = frozenset(),
) -> Any:
    """Zero value for a declared type.

    Optional and dynamic declarations are None. Containers are empty, fixed
    tuples hold per-position zeros and structs are zero-filled instances.
    Scalars without a natural zero (Enum, datetime, UUID, ...) are None.

    Args:
        info: Declared type.
        track: Called with every struct instance allocated on the way.

    Returns:
        A fresh zero value (mutable zeros are never shared).
    """
    if info.shape in (Shape.REFERENCE, Shape.DYNAMIC) or info.origin is None:
        return None
    origin = info.origin
    if info.shape is Shape.SEQUENCE:
        if info.fixed:
            return tuple(zero_value(a, track, _building) for a in info.args)
        return origin()
    if info.shape is Shape.MAPPING:
        return origin()
    if info.shape is Shape.STRUCT:
        if origin in _building:
            # Non-optional self reference: cannot be zero-filled eagerly
            return None
        return allocate(origin, track, _building | {origin})
    if origin in _SCALAR_ZEROS:
        return _SCALAR_ZEROS[origin]
    if bytearray is origin:
        return bytearray()
    if issubclass(origin, (int, float, complex, str, bytes)) and not issubclass(origin, Enum):
        return origin()
    return None


def allocate(
    cls: type,
    track: Callable[[Any], Any] | None = None,
    _building: frozenset[type] = frozenset(),
) -> Any:
    """Create a zero-filled instance of a struct class without running __init__.

    Dataclass fields take their declared default, default factory or zero
    value. Pydantic models are built with ``model_construct`` so no validation
    runs.

    Args:
        cls: Dataclass or Pydantic model class.
        track: Called with the new instance and every nested struct allocated
            for its zero-valued fields.

    Returns:
        New instance.

    Raises:
        UnsupportedTypeError: If cls is not a struct class.
    """
    # Late import to avoid circular dependency
    from structmap.core.fields.core import struct_layout

    if not is_struct_type(cls):
        raise UnsupportedTypeError(f"cannot allocate {getattr(cls, '__qualname__', cls)!r}")
    layout = struct_layout(cls)
    building = _building | {cls}

    if layout.pydantic:
        required = {
            meta.name: zero_value(meta.info, track, building)
            for meta in layout.fields
            if meta.default is ABSENT and meta.default_factory is None
        }
        instance = cls.model_construct(**required)  # type: ignore[attr-defined]
        return track(instance) if track is not None else instance

    instance = cls.__new__(cls)
    for meta in layout.fields:
        if meta.default_factory is not None:
            value = meta.default_factory()
        elif meta.default is not ABSENT:
            value = meta.default
        else:
            value = zero_value(meta.info, track, building)
        # Frozen dataclasses initialize through object.__setattr__ as well
        object.__setattr__(instance, meta.name, value)
    return track(instance) if track is not None else instance


def is_zero(value: Any, _seen: frozenset[int] = frozenset()) -> bool:
    """Check whether a value is the zero value of its type.

    None, False, numeric zero, empty strings and containers, and structs whose
    fields are all zero are zero. Enum members and other scalars are not. A
    struct that reaches itself through its fields is not zero.
    """
    # Late import to avoid circular dependency
    from structmap.core.fields.core import read_field, struct_layout

    if value is None or value is ABSENT:
        return True
    if isinstance(value, Enum):
        return False
    if isinstance(value, (bool, int, float, complex, Decimal, timedelta)):
        return not value
    if isinstance(value, (str, bytes, bytearray, Mapping, list, tuple, set, frozenset, deque)):
        return len(value) == 0
    if is_struct(value):
        if id(value) in _seen:
            return False
        seen = _seen | {id(value)}
        layout = struct_layout(type(value))
        return all(is_zero(read_field(value, meta.name), seen) for meta in layout.fields)
    return False


def is_assignable(value: Any, info: TypeInfo) -> bool:
    """Check whether a value may be stored in a slot declared as info.

    Args:
        value: Candidate value.
        info: Declared type of the slot.

    Returns:
        True if the value's runtime type satisfies the declaration.
    """
    if info.is_dynamic:
        return True
    if value is None:
        return info.admits_none
    if info.shape is Shape.REFERENCE:
        return is_assignable(value, info.inner)
    if info.origin is None:
        return True
    if info.origin is float and isinstance(value, int) and not isinstance(value, bool):
        # int is acceptable wherever float is declared
        return True
    return isinstance(value, info.origin)


def same_type(value: Any, info: TypeInfo) -> bool:
    """Check whether the value's exact runtime type is the declared concrete type."""
    return info.origin is not None and type(value) is info.origin
