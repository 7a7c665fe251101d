"""Cross-entity consistency checks for a registration batch.

Two independent passes run over the entities of the *current* batch:

* **Column types** -- a column identifier that appears in several entities
  must have the same declared type everywhere: raw type name plus array,
  composite or enum category.
* **Name collisions** -- no entity identifier may also be used as a column
  identifier.

Both raise on the first violation, which aborts the registration call
before anything is committed.  Conflicts with entities registered by
earlier calls are not detected; re-registering an entity with a changed
schema in a later call is allowed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from catalog_engine.errors import NameCollisionError, TypeConsistencyError
from catalog_engine.models.descriptors import EntityDescriptor
from catalog_engine.models.identifiers import Identifier

logger = logging.getLogger(__name__)


def check_column_types(batch: Mapping[Identifier, EntityDescriptor]) -> None:
    """Raise :class:`TypeConsistencyError` if a column identifier has two types."""
    seen: dict[Identifier, str] = {}
    for entity in batch.values():
        for column_id, column in entity.columns.items():
            previous = seen.get(column_id)
            declared = column.declared_type
            if previous is not None and previous != declared:
                raise TypeConsistencyError(column_id, previous, declared)
            seen[column_id] = declared


def check_name_collisions(batch: Mapping[Identifier, EntityDescriptor]) -> None:
    """Raise :class:`NameCollisionError` if an entity identifier is also a column identifier."""
    column_ids = {column_id for entity in batch.values() for column_id in entity.columns}
    for entity_id in batch:
        if entity_id in column_ids:
            raise NameCollisionError(entity_id)


def validate_batch(batch: Mapping[Identifier, EntityDescriptor]) -> None:
    """Run both consistency passes over *batch*."""
    check_column_types(batch)
    check_name_collisions(batch)
    logger.debug("Consistency checks passed for %d entities", len(batch))
