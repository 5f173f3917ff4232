"""Core functionalities: stateless type introspection, conversion and errors.

Architecture Note:
    core/ contains pure, stateless building blocks: shape classification,
    struct layouts, field resolution and scalar conversion. Nothing here
    mutates mapping state. For the stateful traversal, see mapping/; for
    policy construction, see config/.
"""

from structmap.core.errors import (
    CapacityExceededError,
    CircularReferenceError,
    ConfigurationError,
    DepthExceededError,
    InvalidDestinationError,
    MapError,
    MapperError,
    MappingFailedError,
    NilPointerError,
    TypeMismatchError,
    UnsupportedTypeError,
)
from structmap.core.fields import (
    FieldMeta,
    StructLayout,
    destination_name,
    find_destination,
    participates,
    read_field,
    struct_layout,
)
from structmap.core.scalar import convert_scalar
from structmap.core.shape import (
    DYNAMIC,
    Shape,
    TypeInfo,
    allocate,
    describe,
    is_assignable,
    is_reference_like,
    is_struct,
    is_zero,
    shape_of,
    zero_value,
)
from structmap.core.types import ABSENT, EXCLUDE_MARKER, SECONDARY_TAG

__all__ = [
    # Types
    "ABSENT",
    "EXCLUDE_MARKER",
    "SECONDARY_TAG",
    # Errors
    "MapperError",
    "NilPointerError",
    "InvalidDestinationError",
    "DepthExceededError",
    "CircularReferenceError",
    "TypeMismatchError",
    "UnsupportedTypeError",
    "CapacityExceededError",
    "ConfigurationError",
    "MapError",
    "MappingFailedError",
    # Shape
    "Shape",
    "TypeInfo",
    "DYNAMIC",
    "describe",
    "shape_of",
    "is_struct",
    "is_reference_like",
    "zero_value",
    "allocate",
    "is_zero",
    "is_assignable",
    # Fields
    "FieldMeta",
    "StructLayout",
    "struct_layout",
    "read_field",
    "participates",
    "destination_name",
    "find_destination",
    # Scalar
    "convert_scalar",
]
