"""Struct introspection for dataclasses and Pydantic models.

Usage:
    layout = struct_layout(UserDTO)
    for meta in layout.fields:
        print(meta.name, meta.info.shape)
"""

from __future__ import annotations

import dataclasses
from functools import lru_cache
from typing import Any, get_type_hints

from structmap.core.fields.models import FieldMeta, StructLayout
from structmap.core.shape.core import describe, is_pydantic_type, is_struct_type
from structmap.core.types import ABSENT, SECONDARY_TAG


def _string_tags(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): v for k, v in raw.items() if isinstance(v, str)}


def _resolve_hints(cls: type) -> dict[str, Any]:
    """Resolve annotations, falling back to raw ones when forward refs are unresolvable."""
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        return {f.name: f.type for f in dataclasses.fields(cls)}


def _dataclass_layout(cls: type) -> StructLayout:
    hints = _resolve_hints(cls)
    metas = []
    for f in dataclasses.fields(cls):
        tags = _string_tags(dict(f.metadata))
        metas.append(
            FieldMeta(
                name=f.name,
                info=describe(hints.get(f.name, f.type)),
                tags=tags,
                secondary=tags.get(SECONDARY_TAG),
                default=ABSENT if f.default is dataclasses.MISSING else f.default,
                default_factory=(
                    None if f.default_factory is dataclasses.MISSING else f.default_factory
                ),
            )
        )
    params = getattr(cls, "__dataclass_params__", None)
    return StructLayout(
        cls=cls,
        fields=tuple(metas),
        frozen=bool(params and params.frozen),
        by_name={m.name: m for m in metas},
    )


def _pydantic_layout(cls: type) -> StructLayout:
    metas = []
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        metas.append(
            FieldMeta(
                name=name,
                info=describe(info.annotation),
                tags=_string_tags(info.json_schema_extra),
                secondary=info.serialization_alias or info.alias,
                frozen=bool(info.frozen),
                default=ABSENT if info.is_required() else info.get_default(call_default_factory=False),
                default_factory=info.default_factory,
            )
        )
    return StructLayout(
        cls=cls,
        fields=tuple(metas),
        frozen=bool(cls.model_config.get("frozen", False)),  # type: ignore[attr-defined]
        pydantic=True,
        by_name={m.name: m for m in metas},
    )


@lru_cache(maxsize=512)
def struct_layout(cls: type) -> StructLayout:
    """Compute (and cache) the field layout of a struct class.

    Args:
        cls: Dataclass or Pydantic model class.

    Returns:
        StructLayout with fields in declaration order, inherited fields first.

    Raises:
        TypeError: If cls is not a struct class.
    """
    if not is_struct_type(cls):
        raise TypeError(f"{cls.__name__} is not a dataclass or Pydantic model")
    if is_pydantic_type(cls):
        return _pydantic_layout(cls)
    return _dataclass_layout(cls)


def read_field(obj: Any, name: str) -> Any:
    """Read a field value, returning ABSENT when the attribute is unset."""
    return getattr(obj, name, ABSENT)
