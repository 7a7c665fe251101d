"""Domain models for the catalog engine."""

from catalog_engine.models.descriptors import (
    ColumnCategory,
    ColumnDescriptor,
    ColumnOverride,
    EntityDeclaration,
    EntityDescriptor,
    EntityKind,
    JoinKind,
    JoinSpec,
    RelationOptions,
)
from catalog_engine.models.identifiers import Identifier

__all__ = [
    "ColumnCategory",
    "ColumnDescriptor",
    "ColumnOverride",
    "EntityDeclaration",
    "EntityDescriptor",
    "EntityKind",
    "Identifier",
    "JoinKind",
    "JoinSpec",
    "RelationOptions",
]
