"""Struct field functionality: layouts, introspection and name resolution."""

from structmap.core.fields.core import read_field, struct_layout
from structmap.core.fields.models import FieldMeta, StructLayout
from structmap.core.fields.resolver import destination_name, find_destination, participates

__all__ = [
    # Models
    "FieldMeta",
    "StructLayout",
    # Core
    "struct_layout",
    "read_field",
    # Resolver
    "participates",
    "destination_name",
    "find_destination",
]
