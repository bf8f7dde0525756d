"""
Chibi Kernel - the resolution core of a dependency injection container.

This library provides:
- A registry of bindings keyed by service identifier
- A Planner expanding a root identifier into a request tree with cycle detection
- A Resolver constructing the object graph with singleton caching
- A Kernel façade tying them together
"""

from .bindings import Binding, BindingScope, BindingType
from .errors import (
    AmbiguousMatchError,
    CircularDependencyError,
    InvalidBindingTypeError,
    InvalidMetadataError,
    KernelError,
    MissingPlanError,
    NotRegisteredError,
)
from .kernel import Kernel, KernelOptions
from .keys import Id, Inject, ServiceId, Tagged
from .metadata import Dependency, MetadataReader, injectable
from .plan import Context, Plan, Request
from .planner import Planner
from .registry import BindingRegistry
from .resolver import Resolver
from .target import Constraints, Target

__all__ = [
    "AmbiguousMatchError",
    "Binding",
    "BindingRegistry",
    "BindingScope",
    "BindingType",
    "CircularDependencyError",
    "Constraints",
    "Context",
    "Dependency",
    "Id",
    "Inject",
    "InvalidBindingTypeError",
    "InvalidMetadataError",
    "Kernel",
    "KernelError",
    "KernelOptions",
    "MetadataReader",
    "MissingPlanError",
    "NotRegisteredError",
    "Plan",
    "Planner",
    "Request",
    "Resolver",
    "ServiceId",
    "Tagged",
    "Target",
    "injectable",
]
