"""
Planner: expands a root identifier into a request tree.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from .bindings import Binding, BindingType
from .errors import AmbiguousMatchError, CircularDependencyError, NotRegisteredError
from .keys import ServiceId
from .metadata import MetadataReader
from .plan import Context, Plan, Request
from .target import Target

if TYPE_CHECKING:
    from .kernel import Kernel

logger = logging.getLogger(__name__)


class Planner:
    """
    Builds Plans by depth-first expansion of INSTANCE bindings.

    Each INSTANCE binding contributes one child request per constructor
    dependency, in declared order. Every other binding type is a leaf.
    Cycles are detected on the ancestor chain before a child is expanded.
    """

    def __init__(self, metadata_reader: MetadataReader | None = None):
        super().__init__()
        self._metadata_reader = metadata_reader or MetadataReader()

    @property
    def metadata_reader(self) -> MetadataReader:
        return self._metadata_reader

    def create_context(self, kernel: Kernel) -> Context:
        """Allocate a fresh, empty context."""
        return Context(kernel)

    def create_plan(
        self, context: Context, service_id: ServiceId, target: Target | None = None
    ) -> Plan:
        """
        Create the request tree for `service_id` and attach it to the context.

        Raises:
            NotRegisteredError: If any requested identifier has no matching binding
            AmbiguousMatchError: If several bindings match a single-value injection point
            CircularDependencyError: If an identifier depends on itself
        """
        bindings = self._match_bindings(context, service_id, target, dependent=None)
        plan = Plan(context, service_id, bindings, target)
        self._expand(plan, plan.root_request)
        context.add_plan(plan)

        logger.debug("Created plan with %d request(s) for %s", len(plan), service_id)
        return plan

    def _expand(self, plan: Plan, request: Request) -> None:
        if request.is_multi:
            self._expand_branches(plan, request)
            return

        binding = request.binding
        if binding.binding_type is not BindingType.INSTANCE:
            return

        for dependency in self._metadata_reader.get_dependencies(binding):
            self._check_cycle(plan, request, dependency.service_id)

            target = dependency.to_target()
            bindings = self._match_bindings(
                plan.context, dependency.service_id, target, dependent=request.service_id
            )
            child = plan.add_child_request(request, dependency.service_id, bindings, target)
            self._expand(plan, child)

    def _expand_branches(self, plan: Plan, request: Request) -> None:
        """Give each binding of a multi request its own single-binding child."""
        assert request.target is not None
        branch_target = dataclasses.replace(
            request.target,
            constraints=dataclasses.replace(request.target.constraints, multi=False),
        )
        for binding in request.bindings:
            branch = plan.add_child_request(request, request.service_id, [binding], branch_target)
            self._expand(plan, branch)

    @staticmethod
    def _check_cycle(plan: Plan, request: Request, service_id: ServiceId) -> None:
        for ancestor in plan.ancestors(request):
            if ancestor.service_id == service_id:
                chain = [*plan.identifier_chain(request), service_id]
                raise CircularDependencyError(chain)

    @staticmethod
    def _match_bindings(
        context: Context,
        service_id: ServiceId,
        target: Target | None,
        dependent: ServiceId | None,
    ) -> list[Binding]:
        candidates = context.registry.get(service_id)
        matched = [b for b in candidates if target is None or target.matches(b)]

        if not matched:
            raise NotRegisteredError(service_id, dependent)
        if len(matched) > 1 and not (target is not None and target.is_multi):
            raise AmbiguousMatchError(service_id, matched)
        return matched
