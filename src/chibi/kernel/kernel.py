"""
Kernel - the container façade over the registry, planner and resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from . import resolution_stack
from .bindings import Binding, BindingScope
from .keys import ServiceId
from .metadata import MetadataReader
from .planner import Planner
from .registry import BindingRegistry
from .resolver import Resolver
from .target import Constraints, Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KernelOptions:
    """Kernel-wide configuration."""

    default_scope: BindingScope = BindingScope.TRANSIENT


class Kernel:
    """
    Dependency injection container.

    Every `resolve*` call creates a fresh context, plans the request tree for
    the requested identifier and resolves it. Failures are raised unchanged;
    no partially built object graph is ever returned.

    Example:
        ```python
        kernel = Kernel()
        kernel.bind(Binding("IKatana", BindingType.INSTANCE, Katana, BindingScope.SINGLETON))
        kernel.bind(Binding("INinja", BindingType.INSTANCE, Ninja))

        ninja = kernel.resolve("INinja")
        ```
    """

    def __init__(
        self,
        options: KernelOptions | None = None,
        metadata_reader: MetadataReader | None = None,
    ):
        self._options = options or KernelOptions()
        self._registry = BindingRegistry()
        self._planner = Planner(metadata_reader)
        self._resolver = Resolver()

    @property
    def options(self) -> KernelOptions:
        return self._options

    @property
    def registry(self) -> BindingRegistry:
        return self._registry

    @property
    def planner(self) -> Planner:
        return self._planner

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    def bind(self, binding: Binding) -> Binding:
        """Register a binding, applying the default scope when it has none."""
        if binding.scope is None:
            binding.scope = self._options.default_scope
        self._registry.add(binding)
        return binding

    def unbind(self, service_id: ServiceId) -> None:
        """
        Remove all bindings for an identifier and their cached singletons.

        Raises:
            NotRegisteredError: If nothing is bound to the identifier
        """
        self._registry.remove(service_id)

    def unbind_all(self) -> None:
        self._registry.clear()

    def is_bound(self, service_id: ServiceId) -> bool:
        return self._registry.has(service_id)

    def resolve(self, service_id: ServiceId) -> Any:
        """Resolve the single binding registered for an identifier."""
        return self._resolve(service_id, None)

    def resolve_named(self, service_id: ServiceId, name: str) -> Any:
        """Resolve the binding registered for an identifier under `name`."""
        return self._resolve(service_id, Target.root(service_id, Constraints(named=name)))

    def resolve_tagged(self, service_id: ServiceId, key: str, value: Any) -> Any:
        """Resolve the binding for an identifier carrying the tag `key=value`."""
        return self._resolve(
            service_id, Target.root(service_id, Constraints(tags=((key, value),)))
        )

    def resolve_all(self, service_id: ServiceId) -> list[Any]:
        """Resolve every binding of an identifier, in registration order."""
        result: list[Any] = self._resolve(
            service_id, Target.root(service_id, Constraints(multi=True))
        )
        return result

    def _resolve(self, service_id: ServiceId, target: Target | None) -> Any:
        with resolution_stack.entering(service_id):
            context = self._planner.create_context(self)
            self._planner.create_plan(context, service_id, target)
            logger.debug("Resolving %s", service_id)
            return self._resolver.resolve(context)
