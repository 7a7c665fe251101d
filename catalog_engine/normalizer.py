"""Turn raw introspection responses into :class:`EntityDescriptor` objects.

Normalization is a pure transform.  Column identifiers are scoped to the
declaring entity's scope, column overrides from the declaration are
applied, and array columns are recognised by their PostgreSQL category
code.  Element types of arrays are resolved in a second pass
(:func:`resolve_array_element_types`) because an element may name a
composite or enum type declared earlier in the same registration call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from catalog_engine.introspection import RawColumn, RawEntityDescription
from catalog_engine.models.descriptors import (
    ColumnCategory,
    ColumnDescriptor,
    EntityDeclaration,
    EntityDescriptor,
    EntityKind,
)
from catalog_engine.models.identifiers import Identifier
from catalog_engine.registry import find_entity_by_db_name

logger = logging.getLogger(__name__)

# PostgreSQL pg_type.typcategory codes.
ARRAY_CATEGORY = "A"
COMPOSITE_CATEGORY = "C"
ENUM_CATEGORY = "E"

# PostgreSQL names array types after their element type with a leading underscore.
_ARRAY_TYPE_PREFIX = "_"


def _column_category(raw: RawColumn) -> ColumnCategory:
    if raw.category == ARRAY_CATEGORY:
        return ColumnCategory.ARRAY
    if raw.enum or raw.category == ENUM_CATEGORY:
        return ColumnCategory.ENUM
    if raw.category == COMPOSITE_CATEGORY:
        return ColumnCategory.COMPOSITE
    return ColumnCategory.SCALAR


def _element_type_name(type_name: str) -> str:
    if type_name.startswith(_ARRAY_TYPE_PREFIX):
        return type_name[len(_ARRAY_TYPE_PREFIX) :]
    return type_name


def normalize_column(raw: RawColumn, declaration: EntityDeclaration) -> ColumnDescriptor:
    """Build the descriptor for one raw column of *declaration*."""
    override = declaration.options.columns.get(raw.name)
    identifier = Identifier(scope=declaration.scope, name=raw.name)
    transform = None
    if override is not None:
        identifier = override.identifier or identifier
        transform = override.transform

    category = _column_category(raw)
    type_name = _element_type_name(raw.type_name) if category == ColumnCategory.ARRAY else raw.type_name

    return ColumnDescriptor(
        identifier=identifier,
        db_name=raw.name,
        type_name=type_name,
        category=category,
        not_null=raw.not_null,
        enum=raw.enum,
        has_default=raw.has_default,
        type_specific_data=raw.type_specific_data or 0,
        element_type=type_name if category == ColumnCategory.ARRAY else None,
        transform=transform,
    )


def normalize_entity(raw: RawEntityDescription, declaration: EntityDeclaration) -> EntityDescriptor:
    """Build the :class:`EntityDescriptor` for *declaration* from its raw description.

    Parameters
    ----------
    raw:
        What the introspection source reported for the entity.
    declaration:
        The declared database name, identifier and relation options.

    Returns
    -------
    EntityDescriptor
        Descriptor with scoped column identifiers and a derived insert
        identifier.  Array element types are still raw names.
    """
    columns: dict[Identifier, ColumnDescriptor] = {}
    if raw.kind != EntityKind.ENUM:
        for raw_column in raw.columns:
            column = normalize_column(raw_column, declaration)
            columns[column.identifier] = column

    logger.debug(
        "Normalized %s %s (%s) with %d column(s)",
        raw.kind.value,
        declaration.identifier,
        declaration.table_name,
        len(columns),
    )

    return EntityDescriptor(
        identifier=declaration.identifier,
        db_name=declaration.table_name,
        kind=raw.kind,
        columns=columns,
        insert_identifier=declaration.identifier.insert_identifier(),
        relations=dict(declaration.options.joins),
        transform=declaration.options.transform,
        values=list(raw.values) if raw.kind == EntityKind.ENUM else [],
    )


def resolve_element_type(
    column: ColumnDescriptor,
    batch: Mapping[Identifier, EntityDescriptor],
    registry: Mapping[Identifier, EntityDescriptor],
) -> ColumnDescriptor:
    """Resolve an array column's element type to a registered entity, if any.

    Composite types are preferred over enum types; the in-progress *batch*
    is consulted before the prior *registry*.  Non-array columns are
    returned unchanged.
    """
    if not column.is_array:
        return column
    element_name = column.type_name
    for source in (batch, registry):
        for kind in (EntityKind.COMPOSITE, EntityKind.ENUM):
            found = find_entity_by_db_name(source, element_name, kind)
            if found is not None:
                return column.model_copy(update={"element_type": found})
    return column.model_copy(update={"element_type": element_name})


def resolve_array_element_types(
    batch: Mapping[Identifier, EntityDescriptor],
    registry: Mapping[Identifier, EntityDescriptor],
) -> dict[Identifier, EntityDescriptor]:
    """Return a copy of *batch* with every array element type resolved."""
    resolved: dict[Identifier, EntityDescriptor] = {}
    for ident, entity in batch.items():
        columns = {cid: resolve_element_type(col, batch, registry) for cid, col in entity.columns.items()}
        resolved[ident] = entity.with_columns(columns)
    return resolved
