"""Top-level entry points: one-shot copy and reusable Mapper.

Usage:
    from structmap import Mapper, copy, with_case_sensitive

    copy(dst, src)

    mapper = Mapper(with_case_sensitive(False))
    mapper.map(dst, src)
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from structmap.config.options import Option
from structmap.config.policy import Policy
from structmap.config.settings import MapperSettings
from structmap.core.errors import InvalidDestinationError, MappingFailedError, NilPointerError
from structmap.core.fields import struct_layout
from structmap.core.shape import is_struct
from structmap.mapping.context import ContextPool, OperationContext
from structmap.mapping.dispatcher import Dispatcher
from structmap.mapping.models import SourceValue
from structmap.mapping.slots import RootSlot

logger = logging.getLogger(__name__)

_DISPATCHER = Dispatcher()


def _check_arguments(destination: Any, source: Any) -> None:
    """Validate the arguments of a top-level call.

    Raises:
        NilPointerError: If either argument is None.
        InvalidDestinationError: If destination cannot be mapped into in place.
    """
    if destination is None or source is None:
        raise NilPointerError("destination and source must not be None")
    if isinstance(destination, (list, dict, deque)):
        return
    if not is_struct(destination):
        raise InvalidDestinationError(
            f"destination must be a mutable struct or container, got {type(destination).__qualname__}"
        )
    if struct_layout(type(destination)).frozen:
        raise InvalidDestinationError(
            f"destination {type(destination).__qualname__} is frozen"
        )


def _run(dispatcher: Dispatcher, destination: Any, source: Any, ctx: OperationContext) -> None:
    dispatcher.map_value(RootSlot(destination), SourceValue.of(source), ctx)
    if ctx.errors:
        logger.debug(
            "Mapping %s -> %s finished with %d soft errors",
            type(source).__qualname__,
            type(destination).__qualname__,
            len(ctx.errors),
        )
        raise MappingFailedError(len(ctx.errors), ctx.errors[0])


def copy(
    destination: Any,
    source: Any,
    *options: Option,
    settings: MapperSettings | None = None,
) -> None:
    """Copy source into destination with a one-off policy.

    Args:
        destination: Struct instance or list/dict/deque mutated in place.
        source: Any value.
        *options: Options applied over the settings defaults.
        settings: Defaults to start from. Loaded from the environment if None.

    Raises:
        NilPointerError: If either argument is None.
        InvalidDestinationError: If destination is not mutable in place.
        ConfigurationError: If the options produce an invalid policy.
        MappingFailedError: If any field, element or entry failed to map. The
            destination keeps every part that did map.
        MapperError: Depth, cycle or type failures at the top level.
    """
    _check_arguments(destination, source)
    policy = Policy.build(*options, settings=settings)
    _run(_DISPATCHER, destination, source, OperationContext(policy))


class Mapper:
    """Reusable mapper with a fixed policy.

    The policy is validated once at construction. A Mapper may be shared
    across threads: each call runs on its own context taken from a pool.
    """

    def __init__(self, *options: Option, settings: MapperSettings | None = None) -> None:
        """Build the policy for all calls on this mapper.

        Args:
            *options: Options applied over the settings defaults.
            settings: Defaults to start from. Loaded from the environment if None.

        Raises:
            ConfigurationError: If the options produce an invalid policy.
        """
        self._policy = Policy.build(*options, settings=settings)
        self._pool = ContextPool()
        self._dispatcher = _DISPATCHER

    @property
    def policy(self) -> Policy:
        return self._policy

    def map(self, destination: Any, source: Any) -> None:
        """Copy source into destination using this mapper's policy.

        Raises:
            Same as copy(), except ConfigurationError.
        """
        _check_arguments(destination, source)
        with self._pool.checkout(self._policy) as ctx:
            _run(self._dispatcher, destination, source, ctx)
