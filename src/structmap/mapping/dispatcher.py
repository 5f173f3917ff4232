"""Value dispatcher and shape handlers.

The dispatcher is the single recursive entry point: every value the mapper
visits goes through map_value, which applies the cross-cutting rules (depth
bound, None handling, cycle detection, converters, shallow sharing) and then
hands the value to the handler for its shape. Handlers recurse back into
map_value for nested values.

Handlers never raise for values they cannot place. Mismatched shapes are
silently skipped, and per-field, per-element and per-entry failures are
recorded on the context as soft errors so the rest of the graph is still
mapped. Depth, cycle and capacity violations on the value being dispatched
propagate to the enclosing handler, which records them.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from structmap.core.errors import (
    CapacityExceededError,
    DepthExceededError,
    MapError,
    MapperError,
    TypeMismatchError,
    UnsupportedTypeError,
)
from structmap.core.fields import (
    destination_name,
    find_destination,
    participates,
    read_field,
    struct_layout,
)
from structmap.core.scalar import convert_scalar
from structmap.core.shape import (
    Shape,
    allocate,
    describe_value,
    is_assignable,
    is_reference_like,
    is_struct,
    is_zero,
    same_type,
    shape_of,
    zero_value,
)
from structmap.core.types import ABSENT, Converter
from structmap.mapping.context import OperationContext
from structmap.mapping.models import SourceValue
from structmap.mapping.slots import AttributeSlot, ItemSlot, Slot, ValueSlot

logger = logging.getLogger(__name__)

type Handler = Callable[[Slot, SourceValue, OperationContext], None]

# Wrapper shapes unwrap to a concrete value, which is tracked instead
_WRAPPER_SHAPES = frozenset({Shape.REFERENCE, Shape.DYNAMIC})
_SHAREABLE_SHAPES = frozenset({Shape.STRUCT, Shape.SEQUENCE, Shape.MAPPING})


def _qualname(cls: type) -> str:
    return getattr(cls, "__qualname__", repr(cls))


class Dispatcher:
    """Routes values to shape handlers.

    A Dispatcher holds no per-call state and can be shared by any number of
    concurrent operations; everything mutable lives in the OperationContext.
    """

    def __init__(self) -> None:
        self._handlers: dict[Shape, Handler] = {
            Shape.REFERENCE: self.map_reference,
            Shape.STRUCT: self.map_struct,
            Shape.MAPPING: self.map_mapping,
            Shape.SEQUENCE: self.map_sequence,
            Shape.DYNAMIC: self.map_dynamic,
            Shape.SCALAR: self.map_scalar,
        }

    def map_value(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Map one source value into a destination slot.

        Args:
            slot: Destination location and its declared type.
            source: Source value and its declared type.
            ctx: State of the operation in progress.

        Raises:
            DepthExceededError: If the current depth is beyond the policy bound.
            CircularReferenceError: If the value was already visited.
            TypeMismatchError: If a converter fails or a write is rejected.
            UnsupportedTypeError: If no handler exists for the value's shape.
        """
        policy = ctx.policy
        value = source.value
        if value is ABSENT:
            return
        if policy.depth_exceeded(ctx.depth):
            raise DepthExceededError(policy.max_depth)
        if value is None:
            self._assign_none(slot, ctx)
            return

        shape = shape_of(value, source.info)
        if (
            not policy.skip_cycle_check
            and shape not in _WRAPPER_SHAPES
            and is_reference_like(value)
        ):
            ctx.check_circular(value)

        converter = policy.converter_for(type(value))
        if converter is not None:
            self._apply_converter(slot, value, converter)
            return

        if not policy.deep_copy and shape in _SHAREABLE_SHAPES and self._share(slot, source):
            return

        handler = self._handlers.get(shape)
        if handler is None:
            raise UnsupportedTypeError(f"no handler for {shape.name} value {_qualname(type(value))}")
        with ctx.descend():
            handler(slot, source, ctx)

    def _assign_none(self, slot: Slot, ctx: OperationContext) -> None:
        if ctx.policy.skip_nil:
            return
        if slot.writable and slot.info.admits_none:
            slot.set(None)

    def _apply_converter(self, slot: Slot, value: Any, converter: Converter) -> None:
        try:
            converted = converter(value)
        except MapperError:
            raise
        except Exception as e:
            raise TypeMismatchError(
                f"converter for {_qualname(type(value))} failed: {e}"
            ) from e
        if slot.writable and is_assignable(converted, slot.info):
            slot.set(converted)

    def _share(self, slot: Slot, source: SourceValue) -> bool:
        """Assign the source by reference when shallow copies are requested.

        Containers are shared only when their declared element types match
        too, so list[Address] never lands in a list[AddressView] slot.
        """
        if not slot.writable:
            return False
        target = slot.info.inner
        value = source.value
        shareable = target.is_dynamic or (
            same_type(value, target) and (target.shape is Shape.STRUCT or source.info == target)
        )
        if shareable:
            slot.set(value)
        return shareable

    # Reference

    def map_reference(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Unwrap an optional source value and map its target."""
        if source.value is None:
            self._assign_none(slot, ctx)
            return
        target = SourceValue(source.value, source.info.inner)
        if slot.info.shape is Shape.REFERENCE:
            inner = slot.narrow(slot.info.inner)
            if inner.info.shape is Shape.STRUCT and is_struct(source.value):
                self._ensure_struct(inner, ctx)
            self.map_value(inner, target, ctx)
        else:
            self.map_value(slot, target, ctx)

    # Struct

    def _ensure_struct(self, slot: Slot, ctx: OperationContext) -> Any:
        """Current struct in slot, allocating a zero-filled one if it holds None."""
        current = slot.get()
        if current is not None:
            return current
        origin = slot.info.origin
        if not slot.writable or slot.info.shape is not Shape.STRUCT or origin is None:
            return None
        instance = allocate(origin, ctx.mark_fresh)
        slot.set(instance)
        return instance

    def _fill_dynamic(
        self, slot: Slot, source: SourceValue, ctx: OperationContext, handler: Handler
    ) -> None:
        """Map into a fresh holder typed as the source value, then store it.

        The source value was already recorded as visited by map_value, so the
        handler is called directly instead of dispatching again.
        """
        if not slot.writable:
            return
        holder = ValueSlot(describe_value(source.value))
        handler(holder, source, ctx)
        if holder.assigned:
            slot.set(holder.value)

    def map_struct(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Copy matching fields from a source struct into a destination struct."""
        policy = ctx.policy
        if slot.info.shape is Shape.REFERENCE:
            slot = slot.narrow(slot.info.inner)
        if slot.info.is_dynamic:
            self._fill_dynamic(slot, source, ctx, self.map_struct)
            return

        target = slot.get()
        if target is None:
            target = self._ensure_struct(slot, ctx)
        if target is None or not is_struct(target):
            return

        src_obj = source.value
        src_layout = struct_layout(type(src_obj))
        dst_layout = struct_layout(type(target))
        fresh = ctx.is_fresh(target)
        if dst_layout.frozen and not fresh:
            # Immutable instance owned by the caller: fill a copy and swap it in
            if not slot.writable:
                return
            target = ctx.mark_fresh(copy.copy(target))
            slot.set(target)
            fresh = True

        for meta in src_layout.fields:
            if not participates(meta, policy):
                continue
            dst_meta = find_destination(dst_layout, destination_name(meta, policy), policy)
            if dst_meta is None:
                continue
            if dst_meta.frozen and not fresh:
                continue
            field_slot = AttributeSlot(
                target,
                dst_meta.name,
                dst_meta.info,
                bypass=dst_layout.frozen or dst_meta.frozen,
            )
            src_value = read_field(src_obj, meta.name)
            try:
                if policy.zero_fields and src_value is not ABSENT and is_zero(src_value):
                    field_slot.set(zero_value(dst_meta.info, ctx.mark_fresh))
                    continue
                self.map_value(field_slot, SourceValue(src_value, meta.info), ctx)
            except MapperError as e:
                self._field_failed(e, meta.name, dst_meta.name, src_layout.cls, dst_layout.cls, ctx)

    def _field_failed(
        self,
        error: MapperError,
        src_field: str,
        dst_field: str,
        src_cls: type,
        dst_cls: type,
        ctx: OperationContext,
    ) -> None:
        handler = ctx.policy.error_handler
        routed: BaseException | None = error
        if handler is not None:
            routed = handler(error, src_field, dst_field)
        if routed is None:
            logger.debug("Suppressed failure mapping %s -> %s: %s", src_field, dst_field, error)
            return
        record = MapError(
            routed,
            operation="map_struct",
            depth=ctx.depth,
            src_field=src_field,
            dst_field=dst_field,
            src_type=_qualname(src_cls),
            dst_type=_qualname(dst_cls),
        )
        logger.debug("Recorded soft error: %s", record)
        ctx.add_error(record)

    # Sequence

    def map_sequence(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Copy sequence elements position by position."""
        policy = ctx.policy
        if slot.info.shape is Shape.REFERENCE:
            slot = slot.narrow(slot.info.inner)
        info = slot.info
        if info.is_dynamic:
            self._fill_dynamic(slot, source, ctx, self.map_sequence)
            return
        if info.shape is not Shape.SEQUENCE:
            return

        n = len(source.value)
        capacity = policy.max_sequence_capacity
        if capacity and n > capacity:
            raise CapacityExceededError(n, capacity)

        if info.origin in (set, frozenset):
            self._fill_unordered(slot, source, ctx)
        elif info.origin is tuple:
            self._fill_tuple(slot, source, n, ctx)
        else:
            self._fill_mutable(slot, source, n, ctx)

    def _fill_mutable(self, slot: Slot, source: SourceValue, n: int, ctx: OperationContext) -> None:
        info = slot.info
        target = slot.get()
        if target is None or len(target) < n:
            if slot.writable:
                slot.set(info.origin(zero_value(info.element(i), ctx.mark_fresh) for i in range(n)))
                target = slot.get()
            elif target is None:
                return
        length = min(len(target), n)
        for i, item in enumerate(source.value):
            if i >= length:
                break
            element = SourceValue(item, source.info.element(i))
            self._map_element(ItemSlot(target, i, info.element(i)), element, i, ctx)

    def _fill_tuple(self, slot: Slot, source: SourceValue, n: int, ctx: OperationContext) -> None:
        if not slot.writable:
            return
        info = slot.info
        current = slot.get()
        if info.fixed:
            buffer = list(current if current is not None else zero_value(info, ctx.mark_fresh))
        elif current is not None and len(current) >= n:
            buffer = list(current)
        else:
            buffer = [zero_value(info.element(), ctx.mark_fresh) for _ in range(n)]
        length = min(len(buffer), n)
        for i, item in enumerate(source.value):
            if i >= length:
                break
            element = SourceValue(item, source.info.element(i))
            self._map_element(ItemSlot(buffer, i, info.element(i)), element, i, ctx)
        slot.set(tuple(buffer))

    def _fill_unordered(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        if not slot.writable:
            return
        info = slot.info
        elements = []
        for i, item in enumerate(source.value):
            holder = ValueSlot(info.element())
            element = SourceValue(item, source.info.element(i))
            if self._map_element(holder, element, i, ctx) and holder.assigned:
                elements.append(holder.value)
        try:
            rebuilt = info.origin(elements)
        except TypeError as e:
            raise TypeMismatchError(f"unhashable element for {_qualname(info.origin)}") from e
        slot.set(rebuilt)

    def _map_element(
        self, slot: Slot, element: SourceValue, index: int, ctx: OperationContext
    ) -> bool:
        try:
            self.map_value(slot, element, ctx)
        except MapperError as e:
            record = MapError(e, operation="map_sequence", depth=ctx.depth, index=index)
            logger.debug("Recorded soft error: %s", record)
            ctx.add_error(record)
            return False
        return True

    # Mapping

    def map_mapping(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Copy entries, converting keys and values to the declared types."""
        if slot.info.shape is Shape.REFERENCE:
            slot = slot.narrow(slot.info.inner)
        info = slot.info
        if info.is_dynamic:
            self._fill_dynamic(slot, source, ctx, self.map_mapping)
            return
        if info.shape is not Shape.MAPPING or not isinstance(source.value, Mapping):
            return

        target = slot.get()
        if target is None:
            if not slot.writable:
                return
            slot.set(info.origin())
            target = slot.get()

        src_key, src_value = source.info.key, source.info.value
        for key, item in source.value.items():
            key_slot = ValueSlot(info.key)
            value_slot = ValueSlot(info.value)
            try:
                self.map_value(key_slot, SourceValue(key, src_key), ctx)
                self.map_value(value_slot, SourceValue(item, src_value), ctx)
                if not (key_slot.assigned and value_slot.assigned):
                    continue
                try:
                    target[key_slot.value] = value_slot.value
                except TypeError as e:
                    raise TypeMismatchError(
                        f"cannot store key {key_slot.value!r} in {_qualname(type(target))}"
                    ) from e
            except MapperError as e:
                record = MapError(e, operation="map_mapping", depth=ctx.depth, key=key)
                logger.debug("Recorded soft error: %s", record)
                ctx.add_error(record)

    # Dynamic

    def map_dynamic(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Map the concrete value held by a dynamically typed source slot."""
        concrete = source.concrete()
        if not slot.info.is_dynamic:
            self.map_value(slot, concrete, ctx)
            return
        if not slot.writable:
            return
        holder = ValueSlot(concrete.info)
        self.map_value(holder, concrete, ctx)
        if holder.assigned:
            slot.set(holder.value)

    # Scalar

    def map_scalar(self, slot: Slot, source: SourceValue, ctx: OperationContext) -> None:
        """Assign a scalar, converting it by the default table when needed."""
        policy = ctx.policy
        if not slot.writable:
            return
        value = source.value
        if isinstance(value, bytearray):
            value = bytearray(value)
        info = slot.info.inner
        if info.is_dynamic:
            slot.set(value)
            return
        origin = info.origin
        if origin is None or info.shape is not Shape.SCALAR:
            return
        if type(value) is origin or (
            isinstance(value, origin) and not isinstance(value, (bool, Enum))
        ):
            slot.set(value)
            return
        converted = convert_scalar(value, origin, time_layout=policy.time_layout)
        if converted is not ABSENT:
            slot.set(converted)
