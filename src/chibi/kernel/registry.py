"""
Storage of bindings keyed by service identifier.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict

from .bindings import Binding
from .errors import NotRegisteredError
from .keys import ServiceId

logger = logging.getLogger(__name__)


class BindingRegistry:
    """
    Ordered set of bindings per service identifier.

    Registration order is preserved so that multi-inject resolution is
    deterministic. The registry holds no resolution logic.
    """

    def __init__(self) -> None:
        super().__init__()
        self._bindings: dict[ServiceId, list[Binding]] = defaultdict(list)
        self._lock = threading.Lock()

    def add(self, binding: Binding) -> None:
        """Add a binding after any existing bindings for the same identifier."""
        with self._lock:
            self._bindings[binding.service_id].append(binding)
        logger.debug("Registered %s", binding)

    def get(self, service_id: ServiceId) -> list[Binding]:
        """Get all bindings for an identifier in registration order."""
        with self._lock:
            return list(self._bindings.get(service_id, ()))

    def remove(self, service_id: ServiceId) -> None:
        """Remove every binding for an identifier, dropping their cached singletons."""
        with self._lock:
            removed = self._bindings.pop(service_id, None)
        if not removed:
            raise NotRegisteredError(service_id)

        for binding in removed:
            binding.clear_cache()
        logger.debug("Removed %d binding(s) for %s", len(removed), service_id)

    def has(self, service_id: ServiceId) -> bool:
        with self._lock:
            return bool(self._bindings.get(service_id))

    def clear(self) -> None:
        with self._lock:
            removed = [binding for bindings in self._bindings.values() for binding in bindings]
            self._bindings.clear()
        for binding in removed:
            binding.clear_cache()

    def service_ids(self) -> list[ServiceId]:
        with self._lock:
            return [service_id for service_id, bindings in self._bindings.items() if bindings]

    def __contains__(self, service_id: ServiceId) -> bool:
        return self.has(service_id)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bindings) for bindings in self._bindings.values())
