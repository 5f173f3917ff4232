"""Shape models: the closed set of value shapes and declared-type descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class Shape(Enum):
    """Structural category of a value; selects the handler that processes it.

    The set is closed: every value falls into exactly one shape and new shapes
    are not registered by users.
    """

    REFERENCE = auto()  # declared X | None
    STRUCT = auto()  # dataclass or pydantic model instance
    MAPPING = auto()  # dict-like
    SEQUENCE = auto()  # list, tuple, set, frozenset, deque
    DYNAMIC = auto()  # declared Any / object / multi-member union
    SCALAR = auto()  # everything else


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Normalized description of a declared type hint.

    Attributes:
        shape: Shape implied by the declaration.
        origin: Concrete runtime class (list, dict, struct class, int, ...),
            None for REFERENCE and DYNAMIC.
        args: Described type arguments. REFERENCE: (inner,). SEQUENCE: one
            element type, or one per position for fixed tuples. MAPPING:
            (key, value).
        fixed: True for fixed-arity tuples.
        hint: The raw hint this was built from.
    """

    shape: Shape
    origin: type | None = None
    args: tuple[TypeInfo, ...] = ()
    fixed: bool = False
    hint: Any = field(default=None, compare=False)

    @property
    def is_dynamic(self) -> bool:
        return self.shape is Shape.DYNAMIC

    @property
    def admits_none(self) -> bool:
        """Whether None is a legal value for this declaration."""
        return self.shape in (Shape.REFERENCE, Shape.DYNAMIC)

    @property
    def inner(self) -> TypeInfo:
        """Target of an optional declaration."""
        if self.shape is not Shape.REFERENCE:
            return self
        return self.args[0]

    @property
    def growable(self) -> bool:
        """Sequence whose length follows the source (everything but fixed tuples)."""
        return self.shape is Shape.SEQUENCE and not self.fixed

    def element(self, position: int = 0) -> TypeInfo:
        """Declared element type for a sequence position."""
        if not self.args:
            return DYNAMIC
        if self.fixed:
            return self.args[position] if position < len(self.args) else DYNAMIC
        return self.args[0]

    @property
    def key(self) -> TypeInfo:
        return self.args[0] if self.shape is Shape.MAPPING and self.args else DYNAMIC

    @property
    def value(self) -> TypeInfo:
        return self.args[1] if self.shape is Shape.MAPPING and self.args else DYNAMIC

    @property
    def name(self) -> str:
        """Readable type name for error messages."""
        if self.origin is not None:
            return self.origin.__qualname__
        if self.shape is Shape.REFERENCE:
            return f"{self.inner.name} | None"
        return "Any"


DYNAMIC = TypeInfo(shape=Shape.DYNAMIC)
"""Descriptor for undeclared or dynamically typed slots."""
