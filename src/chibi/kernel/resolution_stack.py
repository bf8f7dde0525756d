"""
Tracking of identifiers being resolved across re-entrant kernel calls.

Producer functions (dynamic values, factory and provider creators) receive the
resolution context and may call back into the kernel. Those nested calls build
new plans, so the Planner cannot see cycles that pass through a producer. This
stack covers them.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from .errors import CircularDependencyError
from .keys import ServiceId

# Immutable tuples keep the stack isolated between threads and async tasks
_resolution_stack: ContextVar[tuple[ServiceId, ...]] = ContextVar(
    "resolution_stack",
    default=(),
)


def current_stack() -> tuple[ServiceId, ...]:
    return _resolution_stack.get()


@contextmanager
def entering(service_id: ServiceId) -> Iterator[None]:
    """Push `service_id` for the duration of the block, failing on re-entry."""
    stack = _resolution_stack.get()
    if service_id in stack:
        raise CircularDependencyError([*stack, service_id])

    token = _resolution_stack.set((*stack, service_id))
    try:
        yield
    finally:
        _resolution_stack.reset(token)
