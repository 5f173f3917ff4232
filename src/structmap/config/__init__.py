"""Configuration module: environment-aware defaults, options and policies.

Usage:
    from structmap.config import MapperSettings, Policy, with_max_depth

    settings = MapperSettings(case_sensitive=False)
    policy = Policy.build(with_max_depth(8), settings=settings)
"""

from structmap.config.options import (
    Option,
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
from structmap.config.policy import Policy
from structmap.config.settings import DEFAULT_MAX_DEPTH, RFC3339, MapperSettings

__all__ = [
    # Settings
    "MapperSettings",
    "DEFAULT_MAX_DEPTH",
    "RFC3339",
    # Policy
    "Policy",
    # Options
    "Option",
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
]
