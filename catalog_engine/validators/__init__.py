"""Validator expressions, base-type predicates and conformance checking."""

from catalog_engine.validators.catalog import ValidatorCatalog
from catalog_engine.validators.conformance import conforms, explain
from catalog_engine.validators.expressions import (
    AllOf,
    BaseType,
    CollectionOf,
    EntityRef,
    Keys,
    MaxLength,
    Nullable,
    Transformed,
    Validator,
    ValueSet,
    describe,
    references,
)

__all__ = [
    "AllOf",
    "BaseType",
    "CollectionOf",
    "EntityRef",
    "Keys",
    "MaxLength",
    "Nullable",
    "Transformed",
    "Validator",
    "ValidatorCatalog",
    "ValueSet",
    "conforms",
    "describe",
    "explain",
    "references",
]
