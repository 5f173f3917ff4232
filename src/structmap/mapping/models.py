"""Mapping models: source values paired with the type they were declared as."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from structmap.core.shape import TypeInfo, describe_value


@dataclass(frozen=True, slots=True)
class SourceValue:
    """A value read from the source graph and the declared type of its slot.

    The declaration matters for optional and dynamic slots, which are
    unwrapped before the concrete value is handled.
    """

    value: Any
    info: TypeInfo

    @classmethod
    def of(cls, value: Any) -> SourceValue:
        """Wrap a free-standing value, declared as its own runtime class."""
        return cls(value, describe_value(value))

    def concrete(self) -> SourceValue:
        """The same value re-declared by its runtime class."""
        return SourceValue.of(self.value)
