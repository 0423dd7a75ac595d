"""
In-memory mapping store.

Behaves like the API server for the four operations the reconciler uses:
create fails on an existing name, update and delete fail on a missing one.
Objects are copied on the way in and out so callers cannot mutate the store.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from canaryroute.errors import MappingNotFoundError, StoreError
from canaryroute.models.mapping import Mapping
from canaryroute.storage.base import ClientType, register_client

logger = logging.getLogger(__name__)


@register_client(ClientType.MEMORY)
class MemoryMappingClient:
    """Mapping store held in a dict, keyed by name."""

    def __init__(
        self,
        namespace: str = "default",
        mappings: Optional[List[Mapping]] = None,
    ):
        self.namespace = namespace
        self._mappings: Dict[str, Mapping] = {}
        self._generation = 0
        for mapping in mappings or []:
            self._store(mapping)

    def _store(self, mapping: Mapping) -> Mapping:
        self._generation += 1
        stored = mapping.model_copy(deep=True)
        stored.metadata.namespace = self.namespace
        stored.metadata.resource_version = str(self._generation)
        self._mappings[stored.name] = stored
        return stored.model_copy(deep=True)

    def get(self, name: str) -> Mapping:
        try:
            return self._mappings[name].model_copy(deep=True)
        except KeyError:
            raise MappingNotFoundError(name, self.namespace) from None

    def create(self, mapping: Mapping) -> Mapping:
        if mapping.name in self._mappings:
            raise StoreError(f"mappings {mapping.name!r} already exists", status=409)
        logger.debug(f"Created mapping {self.namespace}/{mapping.name}")
        return self._store(mapping)

    def update(self, mapping: Mapping) -> Mapping:
        if mapping.name not in self._mappings:
            raise MappingNotFoundError(mapping.name, self.namespace)
        logger.debug(f"Updated mapping {self.namespace}/{mapping.name}")
        return self._store(mapping)

    def delete(self, name: str) -> None:
        if self._mappings.pop(name, None) is None:
            raise MappingNotFoundError(name, self.namespace)
        logger.debug(f"Deleted mapping {self.namespace}/{name}")

    def names(self) -> List[str]:
        """Names of all stored mappings, sorted."""
        return sorted(self._mappings)
