"""Destination slots: writable locations the dispatcher maps into.

A slot pairs a location (an attribute, a container item, a free-standing
holder, or the caller's root object) with the type declared for it. Handlers
read the current value, decide what to do from the declared type, and write
back through set().
"""

from __future__ import annotations

from collections import deque
from typing import Any

from structmap.core.errors import TypeMismatchError
from structmap.core.shape import TypeInfo, describe_value


class Slot:
    """Base class for destination locations."""

    __slots__ = ("info",)

    def __init__(self, info: TypeInfo) -> None:
        self.info = info

    @property
    def writable(self) -> bool:
        return True

    def get(self) -> Any:
        raise NotImplementedError

    def set(self, value: Any) -> None:
        raise NotImplementedError

    def narrow(self, info: TypeInfo) -> Slot:
        """Same location, viewed with a more specific declared type."""
        return NarrowedSlot(self, info)


class NarrowedSlot(Slot):
    """A slot re-declared with a narrower type (e.g. the inner type of an optional)."""

    __slots__ = ("_base",)

    def __init__(self, base: Slot, info: TypeInfo) -> None:
        super().__init__(info)
        self._base = base

    @property
    def writable(self) -> bool:
        return self._base.writable

    def get(self) -> Any:
        return self._base.get()

    def set(self, value: Any) -> None:
        self._base.set(value)


class AttributeSlot(Slot):
    """A struct field on a destination object.

    Args:
        obj: Destination struct instance.
        name: Field name.
        info: Declared field type.
        writable: Whether the field may be written at all.
        bypass: Write with object.__setattr__ (fresh instances of frozen classes).
    """

    __slots__ = ("_obj", "_name", "_writable", "_bypass")

    def __init__(
        self, obj: Any, name: str, info: TypeInfo, *, writable: bool = True, bypass: bool = False
    ) -> None:
        super().__init__(info)
        self._obj = obj
        self._name = name
        self._writable = writable
        self._bypass = bypass

    @property
    def writable(self) -> bool:
        return self._writable

    def get(self) -> Any:
        return getattr(self._obj, self._name, None)

    def set(self, value: Any) -> None:
        try:
            if self._bypass:
                object.__setattr__(self._obj, self._name, value)
            else:
                setattr(self._obj, self._name, value)
        except (TypeError, ValueError) as e:
            # Pydantic validate_assignment raises ValidationError (a ValueError)
            raise TypeMismatchError(
                f"cannot assign {type(value).__qualname__} to "
                f"{type(self._obj).__qualname__}.{self._name}"
            ) from e


class ItemSlot(Slot):
    """An element of a mutable destination container (list index or dict key)."""

    __slots__ = ("_container", "_key")

    def __init__(self, container: Any, key: Any, info: TypeInfo) -> None:
        super().__init__(info)
        self._container = container
        self._key = key

    def get(self) -> Any:
        return self._container[self._key]

    def set(self, value: Any) -> None:
        self._container[self._key] = value


class ValueSlot(Slot):
    """A free-standing holder, initially None, that remembers whether it was assigned.

    Used for mapping keys/values, set elements and dynamic holders, where the
    caller decides afterwards what to do with the populated value.
    """

    __slots__ = ("value", "assigned")

    def __init__(self, info: TypeInfo) -> None:
        super().__init__(info)
        self.value: Any = None
        self.assigned = False

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value
        self.assigned = True


class RootSlot(Slot):
    """The caller's destination object.

    Structs are filled field by field, so the root itself is only replaced
    for containers, and then in place, keeping the caller's reference valid.
    """

    __slots__ = ("_obj",)

    def __init__(self, obj: Any) -> None:
        super().__init__(describe_value(obj))
        self._obj = obj

    @property
    def writable(self) -> bool:
        return isinstance(self._obj, (list, dict, deque))

    def get(self) -> Any:
        return self._obj

    def set(self, value: Any) -> None:
        if value is self._obj:
            return
        if isinstance(self._obj, list):
            self._obj[:] = value
        elif isinstance(self._obj, dict):
            self._obj.clear()
            self._obj.update(value)
        elif isinstance(self._obj, deque):
            self._obj.clear()
            self._obj.extend(value)
        else:
            raise TypeMismatchError(f"cannot replace root {type(self._obj).__qualname__}")
