"""
Request trees produced by the Planner and consumed by the Resolver.

Requests are stored in an arena owned by their Plan. A Request refers to its
parent and children by index, so the tree holds no reference cycles.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .bindings import Binding
from .keys import ServiceId, format_service_id
from .target import Target

if TYPE_CHECKING:
    from .kernel import Kernel
    from .registry import BindingRegistry


class Context:
    """State shared by every request of one top-level resolution."""

    def __init__(self, kernel: Kernel):
        self.kernel = kernel
        self.plan: Plan | None = None

    @property
    def registry(self) -> BindingRegistry:
        return self.kernel.registry

    def add_plan(self, plan: Plan) -> None:
        self.plan = plan


@dataclass
class Request:
    """One node of the request tree: a single point needing resolution."""

    index: int
    service_id: ServiceId
    bindings: list[Binding]
    target: Target | None = None
    parent_index: int | None = None
    child_indices: list[int] = field(default_factory=list)

    @property
    def is_multi(self) -> bool:
        return self.target is not None and self.target.is_multi

    @property
    def binding(self) -> Binding:
        """The single matched binding of a non-multi request."""
        return self.bindings[0]

    def __str__(self) -> str:
        target_str = f" [{self.target}]" if self.target else ""
        return f"Request({format_service_id(self.service_id)}{target_str})"


class Plan:
    """The expanded request tree for one resolution attempt."""

    def __init__(
        self,
        context: Context,
        service_id: ServiceId,
        bindings: list[Binding],
        target: Target | None = None,
    ):
        self.context = context
        self._requests: list[Request] = [Request(0, service_id, bindings, target)]

    @property
    def root_request(self) -> Request:
        return self._requests[0]

    def add_child_request(
        self,
        parent: Request,
        service_id: ServiceId,
        bindings: list[Binding],
        target: Target | None = None,
    ) -> Request:
        """Append a child to `parent`; children keep insertion order."""
        request = Request(len(self._requests), service_id, bindings, target, parent.index)
        self._requests.append(request)
        parent.child_indices.append(request.index)
        return request

    def parent_of(self, request: Request) -> Request | None:
        if request.parent_index is None:
            return None
        return self._requests[request.parent_index]

    def children_of(self, request: Request) -> list[Request]:
        return [self._requests[index] for index in request.child_indices]

    def ancestors(self, request: Request) -> Iterator[Request]:
        """Walk from `request` (inclusive) up to the root."""
        current: Request | None = request
        while current is not None:
            yield current
            current = self.parent_of(current)

    def identifier_chain(self, request: Request) -> list[ServiceId]:
        """Identifiers from the root down to `request`, one per dependency hop."""
        chain: list[ServiceId] = []
        for ancestor in self.ancestors(request):
            parent = self.parent_of(ancestor)
            # Branches of a multi request repeat their parent's identifier
            if parent is not None and parent.is_multi and parent.service_id == ancestor.service_id:
                continue
            chain.append(ancestor.service_id)
        chain.reverse()
        return chain

    def requests(self) -> list[Request]:
        return list(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __str__(self) -> str:
        lines: list[str] = []

        def render(request: Request, depth: int) -> None:
            lines.append(f"{'  ' * depth}{request}")
            for child in self.children_of(request):
                render(child, depth + 1)

        render(self.root_request, 0)
        return "\n".join(lines)
