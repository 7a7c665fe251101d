"""Process-wide registry of entity descriptors.

The registry is merge-only: a registration call overlays its batch of
descriptors onto the current state in one step, and descriptors are never
removed individually.  The merge builds a new mapping and swaps it in under
a lock, so readers see either the state before or after a merge, never a
mix.

Components receive the registry (or a snapshot of it) explicitly.
:meth:`CatalogRegistry.get_instance` returns the process singleton for
callers that want one shared registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType

from catalog_engine.models.descriptors import ColumnDescriptor, EntityDescriptor, EntityKind
from catalog_engine.models.identifiers import Identifier

logger = logging.getLogger(__name__)


def find_entity_by_db_name(
    entities: Mapping[Identifier, EntityDescriptor],
    type_name: str,
    kind: EntityKind,
) -> Identifier | None:
    """Return the identifier of the *kind* entity whose database name is *type_name*.

    When several identifiers map to the same database type the smallest one
    (in identifier order) wins, so the answer does not depend on insertion
    order.
    """
    matches = [ident for ident, entity in entities.items() if entity.kind == kind and entity.db_name == type_name]
    return min(matches) if matches else None


class CatalogRegistry:
    """Identifier -> :class:`EntityDescriptor` mapping for the whole process."""

    _instance: CatalogRegistry | None = None
    _lock_cls = threading.Lock()

    def __init__(self) -> None:
        self._entities: Mapping[Identifier, EntityDescriptor] = MappingProxyType({})
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> CatalogRegistry:
        """Return the process-wide registry, creating it if needed."""
        if cls._instance is None:
            with cls._lock_cls:
                if cls._instance is None:
                    cls._instance = CatalogRegistry()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide registry (for testing)."""
        with cls._lock_cls:
            cls._instance = None

    # -- Mutation --

    def merge(self, batch: Mapping[Identifier, EntityDescriptor]) -> None:
        """Overlay *batch* onto the registry as one atomic step."""
        with self._lock:
            merged = dict(self._entities)
            merged.update(batch)
            self._entities = MappingProxyType(merged)
        logger.info("Registry merged %d entities (%d registered)", len(batch), len(merged))

    # -- Lookup --

    def snapshot(self) -> dict[Identifier, EntityDescriptor]:
        """Return a point-in-time copy of the registry contents."""
        return dict(self._entities)

    def get(self, identifier: Identifier) -> EntityDescriptor | None:
        return self._entities.get(identifier)

    def entities(self) -> list[Identifier]:
        """Return all registered entity identifiers, sorted."""
        return sorted(self._entities)

    def columns_of(self, identifier: Identifier) -> dict[Identifier, ColumnDescriptor]:
        entity = self._entities.get(identifier)
        return dict(entity.columns) if entity is not None else {}

    def insert_identifier_of(self, identifier: Identifier) -> Identifier | None:
        entity = self._entities.get(identifier)
        if entity is None or entity.is_enum:
            return None
        return entity.insert_identifier

    def entity_for_type(self, type_name: str, kind: EntityKind) -> Identifier | None:
        """Return the registered *kind* entity for database type *type_name*."""
        return find_entity_by_db_name(self._entities, type_name, kind)

    def tables_with_column(self, column: Identifier) -> list[Identifier]:
        """Return all entities that declare *column*, sorted."""
        return sorted(ident for ident, entity in self._entities.items() if column in entity.columns)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entities

    def __len__(self) -> int:
        return len(self._entities)
