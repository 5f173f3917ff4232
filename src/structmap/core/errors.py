"""Mapping error hierarchy.

Every failure raised by structmap derives from MapperError. Wrapping errors
(MapError, MappingFailedError) chain the underlying failure through
``__cause__`` so callers can ask for the root cause without string matching:

    try:
        structmap.copy(dst, src)
    except MappingFailedError as e:
        if e.caused_by(CircularReferenceError):
            ...
"""

from __future__ import annotations

from typing import Any


class MapperError(Exception):
    """Base class for all mapping failures."""

    @property
    def root_cause(self) -> BaseException:
        """Innermost exception in the ``__cause__`` chain (self if unchained)."""
        current: BaseException = self
        while current.__cause__ is not None:
            current = current.__cause__
        return current

    def caused_by(self, kind: type[BaseException]) -> bool:
        """Check whether this error or anything it wraps is an instance of kind.

        Args:
            kind: Exception class to look for.

        Returns:
            True if kind appears anywhere in the ``__cause__`` chain.
        """
        current: BaseException | None = self
        while current is not None:
            if isinstance(current, kind):
                return True
            current = current.__cause__
        return False


class NilPointerError(MapperError):
    """Raised when the source or destination argument is None."""

    def __init__(self, message: str = "nil pointer provided") -> None:
        super().__init__(message)


class InvalidDestinationError(MapperError):
    """Raised when the destination is not a mutable object."""

    def __init__(self, message: str = "destination must be a mutable object") -> None:
        super().__init__(message)


class DepthExceededError(MapperError):
    """Raised when nesting goes beyond the configured maximum depth."""

    def __init__(self, max_depth: int | None = None) -> None:
        self.max_depth = max_depth
        super().__init__(f"maximum depth exceeded (max_depth={max_depth})")


class CircularReferenceError(MapperError):
    """Raised when an object is reached twice during one operation."""

    def __init__(self, value_type: type | None = None) -> None:
        self.value_type = value_type
        suffix = f" at {value_type.__qualname__}" if value_type is not None else ""
        super().__init__(f"circular reference detected{suffix}")


class TypeMismatchError(MapperError):
    """Raised when a conversion or assignment between incompatible values fails."""


class UnsupportedTypeError(MapperError):
    """Raised when a value or destination type has no way to be handled."""


class CapacityExceededError(MapperError):
    """Raised when a sequence is longer than the configured allocation limit."""

    def __init__(self, length: int, capacity: int) -> None:
        self.length = length
        self.capacity = capacity
        super().__init__(f"sequence length {length} exceeds max_sequence_capacity {capacity}")


class ConfigurationError(MapperError, ValueError):
    """Raised when a policy is built from invalid settings or options."""


class MapError(MapperError):
    """Soft error recorded while mapping one field, element or entry.

    The failure itself is available as ``__cause__``.

    Attributes:
        operation: Handler that recorded the failure (map_struct, map_sequence, ...).
        depth: Recursion depth at which the failure was recorded.
        src_field: Source field name, for struct fields.
        dst_field: Destination field name, for struct fields.
        src_type: Qualified name of the source type.
        dst_type: Qualified name of the destination type.
        index: Element position, for sequence elements.
        key: Source key, for mapping entries.
    """

    def __init__(
        self,
        cause: BaseException,
        *,
        operation: str,
        depth: int = 0,
        src_field: str = "",
        dst_field: str = "",
        src_type: str = "",
        dst_type: str = "",
        index: int | None = None,
        key: Any = None,
    ) -> None:
        self.operation = operation
        self.depth = depth
        self.src_field = src_field
        self.dst_field = dst_field
        self.src_type = src_type
        self.dst_type = dst_type
        self.index = index
        self.key = key
        self._cause = cause
        self.__cause__ = cause
        super().__init__(self._describe(cause))

    def _describe(self, cause: BaseException) -> str:
        if self.src_field and self.dst_field:
            return (
                f"failed to map {self.src_type}.{self.src_field} -> "
                f"{self.dst_type}.{self.dst_field}: {cause}"
            )
        if self.index is not None:
            return f"sequence index {self.index}: {cause}"
        if self.operation == "map_mapping":
            return f"mapping key {self.key!r}: {cause}"
        return f"{self.operation} operation failed: {cause}"

    @property
    def cause(self) -> BaseException:
        """The failure this record wraps."""
        return self._cause


class MappingFailedError(MapperError):
    """Terminal failure of a top-level call that accumulated soft errors.

    Attributes:
        count: Number of soft errors recorded.
        first: The first soft error recorded (also the ``__cause__``).
    """

    def __init__(self, count: int, first: MapError) -> None:
        self.count = count
        self.first = first
        self.__cause__ = first
        super().__init__(f"mapping completed with {count} errors: {first}")
