"""Field models: introspected struct layouts.

A StructLayout is the flattened, declaration-ordered view of a dataclass or
Pydantic model class, computed once per class and cached.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from structmap.core.shape.models import TypeInfo
from structmap.core.types import ABSENT


@dataclass(frozen=True, slots=True)
class FieldMeta:
    """Metadata for one declared struct field."""

    name: str
    info: TypeInfo
    tags: Mapping[str, str] = field(default_factory=dict, compare=False)
    secondary: str | None = None  # json tag (dataclasses) or alias (pydantic)
    frozen: bool = False  # field-level immutability (pydantic Field(frozen=True))
    default: Any = field(default=ABSENT, compare=False)
    default_factory: Callable[[], Any] | None = field(default=None, compare=False)

    @property
    def private(self) -> bool:
        """Unexported by Python convention (leading underscore)."""
        return self.name.startswith("_")

    def tag(self, key: str) -> str | None:
        """Tag value under key, or None when absent."""
        return self.tags.get(key)


@dataclass(frozen=True, slots=True)
class StructLayout:
    """Declaration-ordered fields of a struct class."""

    cls: type
    fields: tuple[FieldMeta, ...]
    frozen: bool = False
    pydantic: bool = False
    by_name: Mapping[str, FieldMeta] = field(default_factory=dict, compare=False)

    def get(self, name: str) -> FieldMeta | None:
        """Exact-name field lookup."""
        return self.by_name.get(name)

    def find_casefold(self, name: str) -> FieldMeta | None:
        """First field, in declaration order, whose name matches ignoring case."""
        folded = name.casefold()
        for meta in self.fields:
            if meta.name.casefold() == folded:
                return meta
        return None
