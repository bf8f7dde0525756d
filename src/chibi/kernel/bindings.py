"""
Binding definitions and types.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .keys import ServiceId, format_service_id

if TYPE_CHECKING:
    from .metadata import Dependency


class BindingType(Enum):
    """Strategies a binding can use to produce its value."""

    CONSTANT_VALUE = "constant_value"
    DYNAMIC_VALUE = "dynamic_value"
    CONSTRUCTOR = "constructor"
    FACTORY = "factory"
    PROVIDER = "provider"
    INSTANCE = "instance"
    INVALID = "invalid"


class BindingScope(Enum):
    """Lifetime of values produced by INSTANCE bindings."""

    TRANSIENT = "transient"
    SINGLETON = "singleton"


@dataclass(eq=False)
class Binding:
    """
    Association of a service identifier with a construction strategy.

    `implementation` holds the implementation type (INSTANCE, CONSTRUCTOR),
    the stored value (CONSTANT_VALUE) or a callable receiving the resolution
    context (DYNAMIC_VALUE, FACTORY, PROVIDER). A binding registered without
    one is INVALID.

    `cache` stays None until a singleton INSTANCE binding is constructed for
    the first time and keeps the value until the binding is unbound.
    """

    service_id: ServiceId
    binding_type: BindingType = BindingType.INVALID
    implementation: Any = None
    scope: BindingScope | None = None
    dependencies: list[Dependency] | None = None
    name: str | None = None
    tags: dict[str, Any] = field(default_factory=dict)
    cache: Any = field(default=None, repr=False)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def is_singleton(self) -> bool:
        return self.scope is BindingScope.SINGLETON

    def clear_cache(self) -> None:
        with self.lock:
            self.cache = None

    def __str__(self) -> str:
        impl_name = getattr(self.implementation, "__name__", type(self.implementation).__name__)
        name_str = f" @{self.name}" if self.name else ""
        tags_str = (
            f" {{{', '.join(f'{k}={v}' for k, v in self.tags.items())}}}" if self.tags else ""
        )
        return (
            f"{format_service_id(self.service_id)}{name_str}{tags_str} -> {impl_name}"
            f" ({self.binding_type.value})"
        )
