"""Mapping module: the stateful graph traversal.

Architecture Note:
    Per-call state lives in OperationContext and nowhere else. The
    Dispatcher and its handlers are stateless and shared by every Mapper.
"""

from structmap.mapping.context import ContextPool, OperationContext
from structmap.mapping.dispatcher import Dispatcher
from structmap.mapping.mapper import Mapper, copy
from structmap.mapping.models import SourceValue
from structmap.mapping.slots import (
    AttributeSlot,
    ItemSlot,
    NarrowedSlot,
    RootSlot,
    Slot,
    ValueSlot,
)

__all__ = [
    # Entry points
    "copy",
    "Mapper",
    # Traversal
    "Dispatcher",
    "SourceValue",
    "OperationContext",
    "ContextPool",
    # Slots
    "Slot",
    "NarrowedSlot",
    "AttributeSlot",
    "ItemSlot",
    "ValueSlot",
    "RootSlot",
]
