"""
Dependency resolution and execution engine.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from . import resolution_stack
from .bindings import Binding, BindingType
from .errors import InvalidBindingTypeError, MissingPlanError
from .plan import Context, Plan, Request

logger = logging.getLogger(__name__)

_PRODUCER_TYPES = frozenset(
    {BindingType.DYNAMIC_VALUE, BindingType.FACTORY, BindingType.PROVIDER}
)


class Resolver:
    """
    Walks a Plan bottom-up and produces the requested value.

    Children are resolved before their parent is constructed, in declared
    order. The only state kept between calls is each binding's singleton
    cache, guarded by the binding's lock.
    """

    def resolve(self, context: Context) -> Any:
        """Resolve the active plan of `context`."""
        plan = context.plan
        if plan is None:
            raise MissingPlanError()

        self._validate(plan)
        return self._resolve_request(plan, plan.root_request)

    @staticmethod
    def _validate(plan: Plan) -> None:
        """Fail before any construction if the plan holds an INVALID binding."""
        for request in plan.requests():
            for binding in request.bindings:
                if binding.binding_type is BindingType.INVALID:
                    raise InvalidBindingTypeError(request.service_id)

    def _resolve_request(self, plan: Plan, request: Request) -> Any:
        if request.is_multi:
            return [self._resolve_request(plan, branch) for branch in plan.children_of(request)]

        return self._resolve_binding(plan, request, request.binding)

    def _resolve_binding(self, plan: Plan, request: Request, binding: Binding) -> Any:
        binding_type = binding.binding_type
        context = plan.context

        if binding_type is BindingType.INVALID:
            raise InvalidBindingTypeError(request.service_id)

        elif binding_type is BindingType.CONSTANT_VALUE:
            return binding.implementation

        elif binding_type is BindingType.CONSTRUCTOR:
            return binding.implementation

        elif binding_type in _PRODUCER_TYPES:
            # Dynamic values, factory and provider creators are never cached
            with self._producing(plan, request):
                return binding.implementation(context)

        elif binding_type is BindingType.INSTANCE:
            if binding.is_singleton:
                return self._resolve_singleton(plan, request, binding)
            return self._construct(plan, request, binding)

        else:
            raise InvalidBindingTypeError(request.service_id)

    def _resolve_singleton(self, plan: Plan, request: Request, binding: Binding) -> Any:
        if binding.cache is not None:
            logger.debug("Using cached singleton for %s", request.service_id)
            return binding.cache

        # Resolved outside the lock; producers among them may re-enter the kernel
        args = self._resolve_children(plan, request)
        with binding.lock:
            if binding.cache is None:
                binding.cache = self._create_instance(binding.implementation, args)
            return binding.cache

    def _construct(self, plan: Plan, request: Request, binding: Binding) -> Any:
        return self._create_instance(binding.implementation, self._resolve_children(plan, request))

    def _resolve_children(self, plan: Plan, request: Request) -> list[Any]:
        return [self._resolve_request(plan, child) for child in plan.children_of(request)]

    def _create_instance(self, implementation: Callable[..., Any], args: list[Any]) -> Any:
        """Call the implementation type's constructor with the resolved arguments."""
        logger.debug(
            "Constructing %s with %d argument(s)",
            getattr(implementation, "__name__", implementation),
            len(args),
        )
        return implementation(*args)

    @staticmethod
    def _producing(plan: Plan, request: Request) -> AbstractContextManager[None]:
        """Guard a producer call against re-entrant cycles."""
        # The kernel already tracks the root identifier of the call
        if len(plan.identifier_chain(request)) == 1:
            return nullcontext()
        return resolution_stack.entering(request.service_id)
