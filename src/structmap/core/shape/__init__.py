"""Shape functionality: declared-type descriptors, classification and zero values."""

from structmap.core.shape.core import (
    ATOMIC_TYPES,
    describe,
    describe_value,
    is_pydantic_type,
    is_reference_like,
    is_struct,
    is_struct_type,
    shape_of,
)
from structmap.core.shape.models import DYNAMIC, Shape, TypeInfo
from structmap.core.shape.operations import allocate, is_assignable, is_zero, same_type, zero_value

__all__ = [
    # Models
    "Shape",
    "TypeInfo",
    "DYNAMIC",
    # Core
    "ATOMIC_TYPES",
    "describe",
    "describe_value",
    "shape_of",
    "is_struct",
    "is_struct_type",
    "is_pydantic_type",
    "is_reference_like",
    # Operations
    "zero_value",
    "allocate",
    "is_zero",
    "is_assignable",
    "same_type",
]
