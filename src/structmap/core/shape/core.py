"""Declared-type description and runtime shape classification.

Usage:
    info = describe(list[Address] | None)
    info.shape            # Shape.REFERENCE
    info.inner.element()  # TypeInfo for Address

    shape_of(value, info)  # shape used by the dispatcher
"""

from __future__ import annotations

import collections
import collections.abc
import types
from dataclasses import is_dataclass
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    ForwardRef,
    Literal,
    TypeAliasType,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from structmap.core.shape.models import DYNAMIC, Shape, TypeInfo

ATOMIC_TYPES: tuple[type, ...] = (datetime, date, time, timedelta)
"""Temporal value types copied as a whole, never decomposed into fields."""

_SEQUENCE_ORIGINS: dict[Any, type] = {
    list: list,
    collections.deque: collections.deque,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    set: set,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
    frozenset: frozenset,
}

_MAPPING_ORIGINS: dict[Any, type] = {
    dict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.OrderedDict: collections.OrderedDict,
    collections.defaultdict: dict,
}

_SEQUENCE_RUNTIME = (list, tuple, set, frozenset, collections.deque)
_REFERENCE_RUNTIME = (list, dict, set, bytearray, collections.deque)


def is_pydantic_type(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def is_struct_type(cls: Any) -> bool:
    """Check if a class is a struct: a dataclass or a Pydantic model.

    Args:
        cls: Object to check.

    Returns:
        True for dataclass classes and BaseModel subclasses.
    """
    if not isinstance(cls, type):
        return False
    return is_dataclass(cls) or is_pydantic_type(cls)


def is_struct(value: Any) -> bool:
    """Check if a value is an instance of a struct class."""
    return is_struct_type(type(value))


def is_reference_like(value: Any) -> bool:
    """Check if a value's identity is its address: a mutable container or struct.

    Reference-like values are the ones tracked for circular-reference
    detection. Scalars and tuples are never tracked.
    """
    return isinstance(value, _REFERENCE_RUNTIME) or is_struct(value)


def describe(hint: Any) -> TypeInfo:
    """Describe a type hint as a TypeInfo.

    Unknown, unresolved or unsupported hints describe as DYNAMIC.

    Args:
        hint: Annotation such as ``int``, ``list[str]``, ``Address | None``.

    Returns:
        Normalized descriptor (cached for hashable hints).
    """
    try:
        return _describe_cached(hint)
    except TypeError:
        # Unhashable hint (e.g. Annotated with a dict payload)
        return _describe(hint)


@lru_cache(maxsize=1024)
def _describe_cached(hint: Any) -> TypeInfo:
    return _describe(hint)


def _describe(hint: Any) -> TypeInfo:
    if hint is None or hint is Any or hint is object or hint is type(None):
        return DYNAMIC
    if isinstance(hint, (str, ForwardRef, TypeVar)):
        return DYNAMIC
    if isinstance(hint, TypeAliasType):
        return describe(hint.__value__)
    if hasattr(hint, "__supertype__"):
        # typing.NewType
        return describe(hint.__supertype__)

    origin = get_origin(hint)
    args = get_args(hint)

    if origin is Annotated:
        return describe(args[0])
    if origin is Union or origin is types.UnionType:
        return _describe_union(hint, args)
    if origin is Literal:
        return TypeInfo(shape=Shape.SCALAR, origin=type(args[0]), hint=hint)
    if origin is not None:
        return _describe_generic(hint, origin, args)
    if isinstance(hint, type):
        return _describe_class(hint)
    return DYNAMIC


def _describe_union(hint: Any, args: tuple[Any, ...]) -> TypeInfo:
    members = [a for a in args if a is not type(None)]
    if len(members) == len(args):
        return TypeInfo(shape=Shape.DYNAMIC, hint=hint)
    inner = describe(members[0]) if len(members) == 1 else DYNAMIC
    if inner.is_dynamic:
        return TypeInfo(shape=Shape.DYNAMIC, hint=hint)
    return TypeInfo(shape=Shape.REFERENCE, args=(inner,), hint=hint)


def _describe_generic(hint: Any, origin: Any, args: tuple[Any, ...]) -> TypeInfo:
    if origin is tuple:
        return _describe_tuple(hint, args)
    if origin in _SEQUENCE_ORIGINS:
        element = describe(args[0]) if args else DYNAMIC
        return TypeInfo(
            shape=Shape.SEQUENCE, origin=_SEQUENCE_ORIGINS[origin], args=(element,), hint=hint
        )
    if origin in _MAPPING_ORIGINS:
        key, value = (describe(args[0]), describe(args[1])) if len(args) == 2 else (DYNAMIC, DYNAMIC)
        return TypeInfo(
            shape=Shape.MAPPING, origin=_MAPPING_ORIGINS[origin], args=(key, value), hint=hint
        )
    if isinstance(origin, type) and is_struct_type(origin):
        # Parametrized generic struct (e.g. Page[int])
        return TypeInfo(shape=Shape.STRUCT, origin=origin, hint=hint)
    return TypeInfo(shape=Shape.DYNAMIC, hint=hint)


def _describe_tuple(hint: Any, args: tuple[Any, ...]) -> TypeInfo:
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        element = describe(args[0]) if args else DYNAMIC
        return TypeInfo(shape=Shape.SEQUENCE, origin=tuple, args=(element,), hint=hint)
    if args == ((),):
        # tuple[()] is the empty fixed tuple
        return TypeInfo(shape=Shape.SEQUENCE, origin=tuple, fixed=True, hint=hint)
    return TypeInfo(
        shape=Shape.SEQUENCE,
        origin=tuple,
        args=tuple(describe(a) for a in args),
        fixed=True,
        hint=hint,
    )


def _describe_class(cls: type) -> TypeInfo:
    if issubclass(cls, ATOMIC_TYPES):
        return TypeInfo(shape=Shape.SCALAR, origin=cls, hint=cls)
    if is_struct_type(cls):
        return TypeInfo(shape=Shape.STRUCT, origin=cls, hint=cls)
    if cls is tuple:
        return TypeInfo(shape=Shape.SEQUENCE, origin=tuple, args=(DYNAMIC,), hint=cls)
    for origins, shape in ((_SEQUENCE_ORIGINS, Shape.SEQUENCE), (_MAPPING_ORIGINS, Shape.MAPPING)):
        if cls in origins:
            width = 1 if shape is Shape.SEQUENCE else 2
            return TypeInfo(shape=shape, origin=origins[cls], args=(DYNAMIC,) * width, hint=cls)
    if issubclass(cls, dict):
        return TypeInfo(shape=Shape.MAPPING, origin=cls, args=(DYNAMIC, DYNAMIC), hint=cls)
    if issubclass(cls, list):
        return TypeInfo(shape=Shape.SEQUENCE, origin=cls, args=(DYNAMIC,), hint=cls)
    return TypeInfo(shape=Shape.SCALAR, origin=cls, hint=cls)


def describe_value(value: Any) -> TypeInfo:
    """Describe a value by its runtime class."""
    return describe(type(value))


def shape_of(value: Any, declared: TypeInfo) -> Shape:
    """Classify a source value for dispatch.

    Optional and dynamic declarations win, since they are transparent
    wrappers around a concrete value; otherwise the runtime value decides.

    Args:
        value: Source value (never None or ABSENT here).
        declared: Declared type of the slot the value was read from.

    Returns:
        Shape used to select the handler.
    """
    if declared.shape in (Shape.REFERENCE, Shape.DYNAMIC):
        return declared.shape
    if isinstance(value, ATOMIC_TYPES):
        return Shape.SCALAR
    if is_struct(value):
        return Shape.STRUCT
    if isinstance(value, collections.abc.Mapping):
        return Shape.MAPPING
    if isinstance(value, _SEQUENCE_RUNTIME):
        return Shape.SEQUENCE
    return Shape.SCALAR
