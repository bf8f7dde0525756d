"""
Service identifiers and the annotation markers used to refine them.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, TypeAlias

ServiceId: TypeAlias = Hashable


def format_service_id(service_id: ServiceId) -> str:
    """Render a service identifier for diagnostics."""
    if isinstance(service_id, str):
        return service_id
    return getattr(service_id, "__name__", str(service_id))


def format_chain(chain: list[ServiceId]) -> str:
    return " -> ".join(format_service_id(service_id) for service_id in chain)


@dataclass(frozen=True)
class Inject:
    """
    Override the service identifier of an annotated parameter.

    Example:
        ```python
        class Ninja:
            def __init__(self, katana: Annotated[Katana, Inject("IKatana")]):
                ...
        ```
    """

    service_id: ServiceId
    multi: bool = False

    def __repr__(self) -> str:
        return f"Inject({self.service_id!r})"


@dataclass(frozen=True)
class Id:
    """Request the binding registered under the given name."""

    value: str

    def __repr__(self) -> str:
        return f"Id({self.value!r})"


@dataclass(frozen=True)
class Tagged:
    """Request a binding carrying the given tag."""

    key: str
    value: Any

    def __repr__(self) -> str:
        return f"Tagged({self.key!r}, {self.value!r})"
