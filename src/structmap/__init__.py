"""StructMap: configurable deep copying between dataclasses and Pydantic models.

Usage:
    from dataclasses import dataclass, field

    from structmap import Mapper, copy, with_tag_name

    @dataclass
    class UserRecord:
        full_name: str = field(default="", metadata={"mapper": "name"})
        age: int = 0

    @dataclass
    class UserView:
        name: str = ""
        age: int = 0

    view = UserView()
    copy(view, UserRecord("Alice", 30), with_tag_name("mapper"))

    mapper = Mapper(with_tag_name("mapper"))
    mapper.map(view, UserRecord("Bob", 41))
"""

__version__ = "0.1.0"

# Configuration
from structmap.config import (
    DEFAULT_MAX_DEPTH,
    RFC3339,
    MapperSettings,
    Option,
    Policy,
    with_allow_private_fields,
    with_case_sensitive,
    with_converter,
    with_deep_copy,
    with_error_handler,
    with_field_name_transform,
    with_ignore_unexported,
    with_max_depth,
    with_max_sequence_capacity,
    with_secondary_tag,
    with_skip_cycle_check,
    with_skip_nil,
    with_tag_name,
    with_time_layout,
    with_zero_fields,
)

# Errors
from structmap.core import (
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

# Entry points
from structmap.mapping import Mapper, copy

__all__ = [
    # Version
    "__version__",
    # Entry points
    "copy",
    "Mapper",
    # Configuration
    "MapperSettings",
    "Policy",
    "Option",
    "DEFAULT_MAX_DEPTH",
    "RFC3339",
    "with_max_depth",
    "with_tag_name",
    "with_ignore_unexported",
    "with_deep_copy",
    "with_zero_fields",
    "with_skip_nil",
    "with_case_sensitive",
    "with_secondary_tag",
    "with_converter",
    "with_field_name_transform",
    "with_error_handler",
    "with_skip_cycle_check",
    "with_time_layout",
    "with_max_sequence_capacity",
    "with_allow_private_fields",
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
]
