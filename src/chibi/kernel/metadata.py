"""
Dependency metadata for implementation types.

Dependencies of an INSTANCE binding are described by an ordered list of
`Dependency` descriptors. They come from, in priority order:

1. the binding itself (`Binding.dependencies`, attached at registration),
2. the `@injectable(...)` class decorator,
3. introspection of the constructor signature, where `Annotated` metadata
   (`Inject`, `Id`, `Tagged`) refines the identifier and constraints.
"""

from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Annotated, Any, TypeVar, get_args, get_origin, get_type_hints

from .bindings import Binding
from .errors import InvalidMetadataError
from .keys import Id, Inject, ServiceId, Tagged
from .target import UNCONSTRAINED, Constraints, Target

C = TypeVar("C", bound=type)

INJECTABLE_ATTR = "__injectable_dependencies__"


@dataclass(frozen=True)
class Dependency:
    """One constructor dependency: parameter name, identifier and constraints."""

    name: str
    service_id: ServiceId
    constraints: Constraints = UNCONSTRAINED

    @classmethod
    def named(cls, name: str, service_id: ServiceId, binding_name: str) -> Dependency:
        return cls(name, service_id, Constraints(named=binding_name))

    @classmethod
    def tagged(cls, name: str, service_id: ServiceId, key: str, value: Any) -> Dependency:
        return cls(name, service_id, Constraints(tags=((key, value),)))

    @classmethod
    def multi(cls, name: str, service_id: ServiceId) -> Dependency:
        return cls(name, service_id, Constraints(multi=True))

    def to_target(self) -> Target:
        return Target(self.name, self.service_id, self.constraints)


def _signature(implementation: type) -> inspect.Signature:
    try:
        return inspect.signature(implementation)
    except (TypeError, ValueError) as e:
        raise InvalidMetadataError(implementation, f"signature is not available ({e})") from e


def _positional_parameters(implementation: type) -> list[inspect.Parameter]:
    return [
        param
        for param in _signature(implementation).parameters.values()
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
    ]


def injectable(*dependencies: ServiceId | Dependency) -> Any:
    """
    Declare the constructor dependencies of a class.

    Plain identifiers are paired with the constructor's positional parameter
    names in order; `Dependency` instances are used as they are.

    Example:
        ```python
        @injectable("IKatana", "IShuriken")
        class Ninja:
            def __init__(self, katana, shuriken):
                ...
        ```
    """

    def decorator(cls: C) -> C:
        params = _positional_parameters(cls)
        if len(params) < len(dependencies):
            raise InvalidMetadataError(
                cls,
                f"{len(dependencies)} dependencies declared but the constructor "
                f"takes {len(params)} positional parameter(s)",
            )

        declared: list[Dependency] = []
        for param, dependency in zip(params, dependencies, strict=False):
            if isinstance(dependency, Dependency):
                declared.append(dependency)
            else:
                declared.append(Dependency(param.name, dependency))

        setattr(cls, INJECTABLE_ATTR, tuple(declared))
        return cls

    return decorator


class MetadataReader:
    """Reads the ordered dependency descriptors of implementation types."""

    def __init__(self) -> None:
        self._cache: dict[type, tuple[Dependency, ...]] = {}
        self._lock = threading.Lock()

    def get_dependencies(self, binding: Binding) -> list[Dependency]:
        """Get the dependencies of an INSTANCE binding's implementation."""
        if binding.dependencies is not None:
            return list(binding.dependencies)
        return list(self.get_type_dependencies(binding.implementation))

    def get_type_dependencies(self, implementation: type) -> tuple[Dependency, ...]:
        with self._lock:
            cached = self._cache.get(implementation)
        if cached is not None:
            return cached

        # Only the class's own declaration counts; subclasses re-declare or introspect
        declared = implementation.__dict__.get(INJECTABLE_ATTR)
        dependencies = (
            tuple(declared) if declared is not None else self._introspect(implementation)
        )

        with self._lock:
            self._cache[implementation] = dependencies
        return dependencies

    def _introspect(self, implementation: type) -> tuple[Dependency, ...]:
        """Derive dependencies from the constructor signature."""
        hints = self._type_hints(implementation)
        signature = _signature(implementation)

        dependencies: list[Dependency] = []
        for param in signature.parameters.values():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.default is not param.empty:
                # Left to the implementation
                continue
            if param.kind is param.KEYWORD_ONLY:
                raise InvalidMetadataError(
                    implementation, f"required keyword-only parameter '{param.name}'"
                )

            annotation = hints.get(param.name, param.annotation)
            if annotation is param.empty:
                raise InvalidMetadataError(
                    implementation, f"parameter '{param.name}' has no type annotation"
                )
            dependencies.append(self._from_annotation(param.name, annotation))

        return tuple(dependencies)

    @staticmethod
    def _type_hints(implementation: type) -> dict[str, Any]:
        init = implementation.__init__ if isinstance(implementation, type) else implementation
        try:
            return get_type_hints(init, include_extras=True)
        except (NameError, TypeError):
            pass

        # Evaluate one parameter at a time; unresolvable forward references stay as strings
        globalns = getattr(init, "__globals__", {})
        hints: dict[str, Any] = {}
        for name, annotation in inspect.get_annotations(init).items():
            single = SimpleNamespace(__annotations__={name: annotation})
            try:
                hints.update(get_type_hints(single, globalns=globalns, include_extras=True))
            except (NameError, TypeError):
                continue
        return hints

    @staticmethod
    def _from_annotation(name: str, annotation: Any) -> Dependency:
        if get_origin(annotation) is not Annotated:
            return Dependency(name, annotation)

        service_id, *extras = get_args(annotation)
        named: str | None = None
        tags: list[tuple[str, Any]] = []
        multi = False
        for extra in extras:
            if isinstance(extra, Inject):
                service_id = extra.service_id
                multi = multi or extra.multi
            elif isinstance(extra, Id):
                named = extra.value
            elif isinstance(extra, Tagged):
                tags.append((extra.key, extra.value))

        return Dependency(name, service_id, Constraints(named, tuple(tags), multi))
