"""Default mapping settings using Pydantic Settings.

Provides the environment-aware defaults every Policy starts from. Only plain
values live here; callables (converters, transforms, error handlers) are
supplied through options.

Usage:
    from structmap.config import MapperSettings

    # Load from environment variables (STRUCTMAP_*)
    settings = MapperSettings()

    # Or override with explicit values
    settings = MapperSettings(max_depth=8, case_sensitive=False)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_DEPTH = 32
"""Default maximum nesting depth."""

RFC3339 = "%Y-%m-%dT%H:%M:%S%:z"
"""Default time layout for datetime <-> str conversions."""


class MapperSettings(BaseSettings):  # type: ignore[misc]
    """Default values for mapping policies.

    Attributes:
        max_depth: Maximum nesting depth (None for unbounded).
        tag_name: Metadata key used for field renaming/selection (None disables).
        ignore_unexported: Skip fields whose name starts with an underscore.
        deep_copy: Copy every reachable container instead of sharing references.
        zero_fields: Zero destination fields whose source field is zero.
        skip_nil: Leave destination untouched when the source value is None.
        case_sensitive: Require exact-case destination field names.
        use_secondary_tag: Consult json metadata / pydantic aliases for names.
        skip_cycle_check: Disable circular-reference detection.
        time_layout: strftime/strptime format for datetime <-> str.
        max_sequence_capacity: Longest sequence that may be allocated (0 = unlimited).
        allow_private_fields: Copy underscore fields even when ignore_unexported is set.

    Environment Variables:
        STRUCTMAP_MAX_DEPTH
        STRUCTMAP_TAG_NAME
        STRUCTMAP_IGNORE_UNEXPORTED
        STRUCTMAP_DEEP_COPY
        STRUCTMAP_ZERO_FIELDS
        STRUCTMAP_SKIP_NIL
        STRUCTMAP_CASE_SENSITIVE
        STRUCTMAP_USE_SECONDARY_TAG
        STRUCTMAP_SKIP_CYCLE_CHECK
        STRUCTMAP_TIME_LAYOUT
        STRUCTMAP_MAX_SEQUENCE_CAPACITY
        STRUCTMAP_ALLOW_PRIVATE_FIELDS
    """

    model_config = SettingsConfigDict(
        env_prefix="STRUCTMAP_",
        extra="ignore",
    )

    max_depth: int | None = Field(default=DEFAULT_MAX_DEPTH, ge=0)
    tag_name: str | None = None
    ignore_unexported: bool = True
    deep_copy: bool = True
    zero_fields: bool = False
    skip_nil: bool = False
    case_sensitive: bool = True
    use_secondary_tag: bool = False
    skip_cycle_check: bool = False
    time_layout: str = RFC3339
    max_sequence_capacity: int = Field(default=0, ge=0)
    allow_private_fields: bool = False
