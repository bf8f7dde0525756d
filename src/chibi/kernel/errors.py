"""
Errors raised while planning and resolving dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import error_messages as messages
from .keys import ServiceId, format_chain, format_service_id

if TYPE_CHECKING:
    from .bindings import Binding


class KernelError(Exception):
    """Base class for all kernel errors."""


class InvalidBindingTypeError(KernelError):
    """Raised when a binding has no strategy to produce a value."""

    def __init__(self, service_id: ServiceId):
        self.service_id = service_id
        super().__init__(f"{messages.INVALID_BINDING_TYPE} {format_service_id(service_id)}")


class CircularDependencyError(KernelError):
    """Raised when circular dependencies are detected."""

    def __init__(self, chain: list[ServiceId]):
        self.chain = chain
        super().__init__(f"{messages.CIRCULAR_DEPENDENCY} {format_chain(chain)}")


class NotRegisteredError(KernelError):
    """Raised when a required binding is not found."""

    def __init__(self, service_id: ServiceId, dependent: ServiceId | None = None):
        self.service_id = service_id
        self.dependent = dependent
        msg = f"{messages.NOT_REGISTERED} {format_service_id(service_id)}"
        if dependent is not None:
            msg += f" (required by {format_service_id(dependent)})"
        super().__init__(msg)


class AmbiguousMatchError(KernelError):
    """Raised when several bindings match an injection point that needs one."""

    def __init__(self, service_id: ServiceId, candidates: list[Binding]):
        self.service_id = service_id
        self.candidates = candidates
        listing = ", ".join(str(binding) for binding in candidates)
        super().__init__(
            f"{messages.AMBIGUOUS_MATCH} {format_service_id(service_id)} (candidates: {listing})"
        )


class InvalidMetadataError(KernelError):
    """Raised when the dependencies of an implementation cannot be derived."""

    def __init__(self, implementation: Any, reason: str):
        self.implementation = implementation
        self.reason = reason
        name = getattr(implementation, "__name__", str(implementation))
        super().__init__(f"{messages.INVALID_METADATA} {name}: {reason}")


class MissingPlanError(KernelError):
    """Raised when a context is resolved before a plan was attached to it."""

    def __init__(self) -> None:
        super().__init__(messages.MISSING_PLAN)
