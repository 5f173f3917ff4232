"""Named options for building policies.

Each option sets exactly one Policy attribute. Options are applied in the
order given, so later options override earlier ones.

Usage:
    structmap.copy(dst, src,
        with_max_depth(5),
        with_tag_name("mapper"),
        with_case_sensitive(False),
    )
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any

from structmap.core.errors import ConfigurationError
from structmap.core.types import Converter, ErrorHandler, FieldNameTransform


@dataclass(frozen=True, slots=True)
class Option:
    """A single policy mutation: set attribute to value."""

    attribute: str
    value: Any

    def apply(self, draft: dict[str, Any]) -> None:
        """Apply this option to a policy draft in place.

        Converter options add to the registered converters instead of
        replacing them.

        Args:
            draft: Attribute name to value mapping used to construct a Policy.

        Raises:
            ConfigurationError: If the attribute is not a policy attribute.
        """
        if self.attribute not in draft:
            raise ConfigurationError(f"unknown policy attribute {self.attribute!r}")
        if self.attribute == "converters":
            draft["converters"] = {**draft["converters"], **self.value}
        else:
            draft[self.attribute] = self.value


def with_max_depth(depth: int | None) -> Option:
    """Set the maximum nesting depth (None for unbounded)."""
    return Option("max_depth", depth)


def with_tag_name(tag: str | None) -> Option:
    """Set the metadata key used to rename and select fields.

    Once set, only source fields carrying this tag are mapped:

        @dataclass
        class Source:
            full_name: str = field(metadata={"mapper": "name"})

        structmap.copy(dst, src, with_tag_name("mapper"))
    """
    return Option("tag_name", tag)


def with_ignore_unexported(ignore: bool = True) -> Option:
    """Skip fields whose name starts with an underscore."""
    return Option("ignore_unexported", ignore)


def with_deep_copy(deep: bool = True) -> Option:
    """Copy containers and structs instead of sharing references with the source."""
    return Option("deep_copy", deep)


def with_zero_fields(zero: bool = True) -> Option:
    """Zero destination fields whose source field holds a zero value."""
    return Option("zero_fields", zero)


def with_skip_nil(skip: bool = True) -> Option:
    """Leave the destination untouched where the source holds None."""
    return Option("skip_nil", skip)


def with_case_sensitive(sensitive: bool = True) -> Option:
    """Control whether destination field names must match case exactly."""
    return Option("case_sensitive", sensitive)


def with_secondary_tag(use: bool = True) -> Option:
    """Also resolve names from json metadata (dataclasses) or aliases (pydantic)."""
    return Option("use_secondary_tag", use)


def with_converter(cls: type, converter: Converter) -> Option:
    """Register a converter for values whose exact type is cls.

    The converter short-circuits default handling for that value:

        structmap.copy(dst, src,
            with_converter(datetime, lambda t: t.strftime("%Y-%m-%d")))
    """
    return Option("converters", {cls: converter})


def with_field_name_transform(transform: FieldNameTransform | None) -> Option:
    """Transform source field names before destination lookup."""
    return Option("field_name_transform", transform)


def with_error_handler(handler: ErrorHandler | None) -> Option:
    """Route struct field failures through handler.

    Returning None suppresses the failure; returning an exception records it.

        def log_and_continue(err, src_field, dst_field):
            logger.warning("skipping %s -> %s: %s", src_field, dst_field, err)
            return None
    """
    return Option("error_handler", handler)


def with_skip_cycle_check(skip: bool = True) -> Option:
    """Disable circular-reference detection. Requires a bounded max_depth."""
    return Option("skip_cycle_check", skip)


def with_time_layout(layout: str) -> Option:
    """Set the strftime/strptime format used for datetime <-> str conversions."""
    return Option("time_layout", layout)


def with_max_sequence_capacity(capacity: int) -> Option:
    """Limit how many elements a sequence may have when copied (0 = unlimited)."""
    return Option("max_sequence_capacity", capacity)


def with_allow_private_fields(allow: bool = True) -> Option:
    """Copy underscore fields even when unexported fields are ignored."""
    if allow:
        warnings.warn(
            "allow_private_fields copies underscore-prefixed fields and bypasses encapsulation",
            stacklevel=2,
        )
    return Option("allow_private_fields", allow)
