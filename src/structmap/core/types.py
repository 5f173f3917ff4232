"""Core type definitions for structmap."""

from collections.abc import Callable
from typing import Any, Final


class _Absent:
    """Marker for a value that does not exist at all (distinct from None)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()
"""Structurally absent source value, e.g. an unset ``__slots__`` attribute."""

EXCLUDE_MARKER: Final = "-"
"""Tag value that excludes a field from mapping."""

SECONDARY_TAG: Final = "json"
"""Well-known secondary tag key consulted when secondary tags are enabled."""

type Converter = Callable[[Any], Any]
"""Signature: (source_value) -> replacement_value. Must be pure."""

type FieldNameTransform = Callable[[str], str]
"""Signature: (source_field_name) -> destination_field_name."""

type ErrorHandler = Callable[[Exception, str, str], Exception | None]
"""Signature: (error, source_field, destination_field) -> replacement or None to suppress."""
