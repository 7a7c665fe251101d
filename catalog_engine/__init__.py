"""Catalog engine -- typed metadata and validators over relational entities.

Quick start::

    from catalog_engine import (
        CatalogRegistry, EntityDeclaration, Identifier, InMemoryIntrospector, define_entities,
    )

    registry = CatalogRegistry.get_instance()
    result = define_entities(
        registry,
        InMemoryIntrospector(descriptions),
        [EntityDeclaration(table_name="customer", identifier=Identifier("shop", "customer"))],
    )
    result.catalog.is_valid(Identifier("shop", "customer-insert"), row)
"""

from catalog_engine.builder import RegistrationResult, define_entities
from catalog_engine.errors import (
    CatalogError,
    CyclicTypeReferenceError,
    DuplicateEntityError,
    NameCollisionError,
    SchemaIntrospectionError,
    TypeConsistencyError,
    UnknownValidatorError,
)
from catalog_engine.introspection import (
    InMemoryIntrospector,
    MemoizingIntrospector,
    RawColumn,
    RawEntityDescription,
    SchemaIntrospector,
)
from catalog_engine.models import (
    ColumnCategory,
    ColumnDescriptor,
    ColumnOverride,
    EntityDeclaration,
    EntityDescriptor,
    EntityKind,
    Identifier,
    JoinKind,
    JoinSpec,
    RelationOptions,
)
from catalog_engine.registry import CatalogRegistry
from catalog_engine.transforms import EnumMemberTransform, FunctionTransform, Transform
from catalog_engine.validators import ValidatorCatalog, conforms, describe, explain

__all__ = [
    "CatalogError",
    "CatalogRegistry",
    "ColumnCategory",
    "ColumnDescriptor",
    "ColumnOverride",
    "CyclicTypeReferenceError",
    "DuplicateEntityError",
    "EntityDeclaration",
    "EntityDescriptor",
    "EntityKind",
    "EnumMemberTransform",
    "FunctionTransform",
    "Identifier",
    "InMemoryIntrospector",
    "JoinKind",
    "JoinSpec",
    "MemoizingIntrospector",
    "NameCollisionError",
    "RawColumn",
    "RawEntityDescription",
    "RegistrationResult",
    "RelationOptions",
    "SchemaIntrospectionError",
    "SchemaIntrospector",
    "Transform",
    "TypeConsistencyError",
    "UnknownValidatorError",
    "ValidatorCatalog",
    "conforms",
    "define_entities",
    "describe",
    "explain",
]
