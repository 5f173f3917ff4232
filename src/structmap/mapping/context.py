"""Per-operation mapping state and its reuse pool.

An OperationContext belongs to exactly one in-flight top-level call. The
ContextPool only recycles contexts to avoid reallocating scratch state; it
never hands one context to two callers at once.

Usage:
    pool = ContextPool()
    with pool.checkout(policy) as ctx:
        dispatcher.map_value(slot, source, ctx)
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from structmap.config.policy import Policy
from structmap.core.errors import CircularReferenceError, MapError


class OperationContext:
    """Mutable scratch state for one top-level mapping call.

    Tracks visited source objects (for circular-reference detection), the
    current recursion depth, accumulated soft errors, and the objects this
    operation allocated itself (which may be written even if their class is
    frozen).
    """

    __slots__ = ("visited", "depth", "policy", "errors", "fresh")

    def __init__(self, policy: Policy) -> None:
        self.visited: dict[int, Any] = {}  # id -> object, keeps ids stable
        self.depth = 0
        self.policy = policy
        self.errors: list[MapError] = []
        self.fresh: dict[int, Any] = {}  # id -> object allocated by this operation

    def reset(self, policy: Policy) -> None:
        """Clear all state and bind policy before reuse."""
        self.clear()
        self.policy = policy

    def clear(self) -> None:
        """Drop visited, fresh and error state. The policy is kept."""
        self.visited.clear()
        self.errors.clear()
        self.fresh.clear()
        self.depth = 0

    def check_circular(self, value: Any) -> None:
        """Record value as visited.

        Raises:
            CircularReferenceError: If value was already visited in this operation.
        """
        key = id(value)
        if key in self.visited:
            raise CircularReferenceError(type(value))
        self.visited[key] = value

    def add_error(self, error: MapError | None) -> None:
        """Append a soft error. None is ignored."""
        if error is not None:
            self.errors.append(error)

    def mark_fresh(self, obj: Any) -> Any:
        """Remember obj as allocated by this operation and return it."""
        self.fresh[id(obj)] = obj
        return obj

    def is_fresh(self, obj: Any) -> bool:
        return id(obj) in self.fresh

    @contextmanager
    def descend(self) -> Iterator[None]:
        """Increment depth for the duration of a nested call.

        The decrement runs on every exit path, so the counter never leaks
        across sibling calls.
        """
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


class ContextPool:
    """Thread-safe free list of reusable OperationContexts."""

    def __init__(self, max_idle: int = 64) -> None:
        """Initialize an empty pool.

        Args:
            max_idle: Maximum number of idle contexts kept for reuse.
        """
        self._lock = threading.Lock()
        self._idle: list[OperationContext] = []
        self._max_idle = max_idle

    def acquire(self, policy: Policy) -> OperationContext:
        """Take an idle context (or create one), reset for policy."""
        with self._lock:
            ctx = self._idle.pop() if self._idle else None
        if ctx is None:
            return OperationContext(policy)
        ctx.reset(policy)
        return ctx

    def release(self, ctx: OperationContext) -> None:
        """Return a context to the pool once its call has finished."""
        # Drop references to caller objects before parking the context
        ctx.clear()
        with self._lock:
            if len(self._idle) < self._max_idle:
                self._idle.append(ctx)

    @contextmanager
    def checkout(self, policy: Policy) -> Iterator[OperationContext]:
        """Acquire a context for one call and release it afterwards."""
        ctx = self.acquire(policy)
        try:
            yield ctx
        finally:
            self.release(ctx)

    @property
    def idle_count(self) -> int:
        with self._lock:
            return len(self._idle)
