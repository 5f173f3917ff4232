"""Immutable mapping policy.

A Policy is built once from MapperSettings defaults plus options, validated,
and then shared read-only by every operation that uses it (including
operations running concurrently on other threads).

Usage:
    policy = Policy.build(with_max_depth(5), with_tag_name("mapper"))
    policy.depth_exceeded(6)  # True
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from structmap.config.settings import DEFAULT_MAX_DEPTH, RFC3339, MapperSettings
from structmap.core.errors import ConfigurationError
from structmap.core.types import EXCLUDE_MARKER, Converter, ErrorHandler, FieldNameTransform

if TYPE_CHECKING:
    from structmap.config.options import Option


@dataclass(frozen=True, slots=True)
class Policy:
    """Validated configuration snapshot for mapping operations.

    Callbacks (converters, field_name_transform, error_handler) are invoked
    synchronously and are expected to be pure: a policy may be shared by
    concurrent operations and nothing stops a callback from capturing shared
    mutable state.
    """

    max_depth: int | None = DEFAULT_MAX_DEPTH
    """Maximum nesting depth. None = unbounded."""

    tag_name: str | None = None
    """Metadata key for field renaming/selection. None or "" disables tag mapping."""

    ignore_unexported: bool = True
    deep_copy: bool = True
    zero_fields: bool = False
    skip_nil: bool = False
    case_sensitive: bool = True
    use_secondary_tag: bool = False
    skip_cycle_check: bool = False

    converters: Mapping[type, Converter] = field(default_factory=dict, hash=False)
    """Converters keyed by exact source type. Stored as a read-only mapping."""

    field_name_transform: FieldNameTransform | None = None
    error_handler: ErrorHandler | None = None

    time_layout: str = RFC3339
    max_sequence_capacity: int = 0
    """Longest sequence that may be allocated. 0 = unlimited."""

    allow_private_fields: bool = False

    def __post_init__(self) -> None:
        self._validate()
        object.__setattr__(self, "converters", MappingProxyType(dict(self.converters)))

    def _validate(self) -> None:
        """Check invariants.

        Raises:
            ConfigurationError: If any attribute holds an invalid setting.
        """
        if self.max_depth is not None and (
            not isinstance(self.max_depth, int) or self.max_depth < 0
        ):
            raise ConfigurationError(
                f"invalid max_depth {self.max_depth!r} (must be None or >= 0)"
            )
        if self.max_sequence_capacity < 0:
            raise ConfigurationError(
                f"invalid max_sequence_capacity {self.max_sequence_capacity} (must be >= 0)"
            )
        if self.tag_name == EXCLUDE_MARKER:
            raise ConfigurationError(f"tag_name cannot be the exclusion marker {EXCLUDE_MARKER!r}")
        if not self.time_layout:
            raise ConfigurationError("time_layout cannot be empty")
        for key, converter in self.converters.items():
            if not isinstance(key, type):
                raise ConfigurationError(f"converter key {key!r} is not a type")
            if not callable(converter):
                raise ConfigurationError(f"converter for {key.__qualname__} is not callable")
        if self.field_name_transform is not None and not callable(self.field_name_transform):
            raise ConfigurationError("field_name_transform is not callable")
        if self.error_handler is not None and not callable(self.error_handler):
            raise ConfigurationError("error_handler is not callable")
        if self.skip_cycle_check and self.max_depth is None:
            # Nothing would stop a cyclic source from recursing forever
            raise ConfigurationError(
                "skip_cycle_check requires a bounded max_depth; set max_depth or keep cycle checks"
            )

    @classmethod
    def build(cls, *options: Option, settings: MapperSettings | None = None) -> Policy:
        """Build a policy from settings defaults plus options, in order.

        Args:
            *options: Options applied left to right; later options win.
            settings: Defaults to start from. Loaded from the environment if None.

        Returns:
            Validated, immutable policy.

        Raises:
            ConfigurationError: If the resulting policy is invalid.
        """
        base = settings if settings is not None else MapperSettings()
        draft: dict[str, Any] = base.model_dump()
        # Callables cannot come from settings; options supply them
        draft.update(converters={}, field_name_transform=None, error_handler=None)
        for option in options:
            option.apply(draft)
        return cls(**draft)

    def depth_exceeded(self, depth: int) -> bool:
        """Check whether depth is beyond the configured bound."""
        return self.max_depth is not None and depth > self.max_depth

    def converter_for(self, cls: type) -> Converter | None:
        """Converter registered for exactly this type, if any."""
        return self.converters.get(cls)
