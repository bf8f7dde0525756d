"""
Injection point descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .bindings import Binding
from .keys import ServiceId, format_service_id


@dataclass(frozen=True)
class Constraints:
    """Restrictions an injection point places on candidate bindings."""

    named: str | None = None
    tags: tuple[tuple[str, Any], ...] = ()
    multi: bool = False

    def matches(self, binding: Binding) -> bool:
        """Check whether a binding satisfies these constraints."""
        if self.named is not None and binding.name != self.named:
            return False
        return all(
            key in binding.tags and binding.tags[key] == value for key, value in self.tags
        )

    def __str__(self) -> str:
        parts: list[str] = []
        if self.named is not None:
            parts.append(f"@{self.named}")
        parts.extend(f"{key}={value}" for key, value in self.tags)
        if self.multi:
            parts.append("*")
        return " ".join(parts)


UNCONSTRAINED = Constraints()


@dataclass(frozen=True)
class Target:
    """Where a resolved value is injected: parameter name and requested identifier."""

    name: str | None
    service_id: ServiceId
    constraints: Constraints = UNCONSTRAINED

    @classmethod
    def root(cls, service_id: ServiceId, constraints: Constraints = UNCONSTRAINED) -> Target:
        """Create a target for a top-level resolution."""
        return cls(None, service_id, constraints)

    @property
    def is_multi(self) -> bool:
        return self.constraints.multi

    def matches(self, binding: Binding) -> bool:
        return self.constraints.matches(binding)

    def __str__(self) -> str:
        name_str = f"{self.name}: " if self.name else ""
        constraints_str = f" {self.constraints}" if self.constraints != UNCONSTRAINED else ""
        return f"{name_str}{format_service_id(self.service_id)}{constraints_str}"
