"""Propagate enum-type transforms onto enum columns.

When an enum type is registered with a transform, every enum column of that
type inherits the transform unless the column declares its own.  Applying
the propagation twice changes nothing: after the first pass the columns
already carry a transform.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from catalog_engine.models.descriptors import ColumnDescriptor, EntityDescriptor, EntityKind
from catalog_engine.models.identifiers import Identifier
from catalog_engine.registry import find_entity_by_db_name

logger = logging.getLogger(__name__)


def _inherit_transform(
    column: ColumnDescriptor,
    registry: Mapping[Identifier, EntityDescriptor],
) -> ColumnDescriptor:
    if not column.enum or column.transform is not None:
        return column
    enum_id = find_entity_by_db_name(registry, column.type_name, EntityKind.ENUM)
    if enum_id is None:
        return column
    transform = registry[enum_id].transform
    if transform is None:
        return column
    logger.debug("Column %s inherits transform %s from %s", column.identifier, transform.name, enum_id)
    return column.model_copy(update={"transform": transform})


def propagate_enum_transforms(
    registry: Mapping[Identifier, EntityDescriptor],
    batch: Mapping[Identifier, EntityDescriptor],
) -> dict[Identifier, EntityDescriptor]:
    """Return a copy of *batch* with enum transforms propagated to its columns.

    Parameters
    ----------
    registry:
        The effective registry in which enum types are looked up.
    batch:
        The newly normalized entities.
    """
    return {
        ident: entity.with_columns({cid: _inherit_transform(col, registry) for cid, col in entity.columns.items()})
        for ident, entity in batch.items()
    }
