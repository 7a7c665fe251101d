"""Schema introspection collaborator interface.

The engine never talks to a database.  It asks a :class:`SchemaIntrospector`
to describe each declared entity and, for enum columns whose type is not
registered, to list the legal values of the enum type.  Whatever the
collaborator raises propagates to the caller unchanged.

Two implementations ship with the engine:

* :class:`InMemoryIntrospector` -- serves pre-fetched descriptions, e.g.
  loaded from a JSON fixture captured from ``pg_catalog``.
* :class:`MemoizingIntrospector` -- wraps another introspector so that each
  distinct entity or enum type is looked up at most once per registration
  call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from catalog_engine.errors import SchemaIntrospectionError
from catalog_engine.models.descriptors import EntityKind, RelationOptions

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Raw response models
# ---------------------------------------------------------------------------


class RawColumn(BaseModel):
    """A column as reported by the introspection source."""

    name: str = Field(..., min_length=1, description="Column name in the database.")
    type_name: str = Field(..., min_length=1, description="Raw type name, e.g. 'int4' or '_text'.")
    not_null: bool = Field(default=False, description="Whether the column is declared NOT NULL.")
    enum: bool = Field(default=False, description="Whether the type is an enum type.")
    category: str = Field(
        default="",
        description="PostgreSQL typcategory code: 'A' array, 'C' composite, 'E' enum, etc.",
    )
    type_specific_data: int | None = Field(
        default=0,
        description="Type modifier (atttypmod), 0 or None when inapplicable.",
    )
    has_default: bool = Field(default=False, description="Whether the column has a database default.")


class RawEntityDescription(BaseModel):
    """Everything the introspection source knows about one entity."""

    kind: EntityKind
    columns: list[RawColumn] = Field(default_factory=list, description="Columns in ordinal order.")
    values: list[str] = Field(
        default_factory=list,
        description="Enum entities only: the enum labels in sort order.",
    )


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class SchemaIntrospector(Protocol):
    """Synchronous lookup of entity descriptions."""

    def describe_entity(self, table_name: str, scope: str, relations: RelationOptions) -> RawEntityDescription:
        """Describe the table, view, composite or enum type *table_name*."""
        ...

    def enum_values(self, type_name: str) -> list[str]:
        """Return the ordered labels of the enum type *type_name*."""
        ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


class InMemoryIntrospector:
    """Introspector backed by pre-fetched descriptions.

    Parameters
    ----------
    entities:
        Mapping of database name to :class:`RawEntityDescription` (or a
        plain dict accepted by it).
    enum_types:
        Mapping of enum type name to its labels.  Enum entities in
        *entities* are also served by :meth:`enum_values`.
    """

    def __init__(
        self,
        entities: Mapping[str, RawEntityDescription | Mapping[str, Any]] | None = None,
        enum_types: Mapping[str, list[str]] | None = None,
    ) -> None:
        self._entities: dict[str, RawEntityDescription] = {
            name: desc if isinstance(desc, RawEntityDescription) else RawEntityDescription.model_validate(desc)
            for name, desc in (entities or {}).items()
        }
        self._enum_types: dict[str, list[str]] = {name: list(vals) for name, vals in (enum_types or {}).items()}

    def describe_entity(self, table_name: str, scope: str, relations: RelationOptions) -> RawEntityDescription:
        try:
            return self._entities[table_name]
        except KeyError:
            raise SchemaIntrospectionError(f"Unable to describe '{table_name}' for scope '{scope}'.") from None

    def enum_values(self, type_name: str) -> list[str]:
        if type_name in self._enum_types:
            return list(self._enum_types[type_name])
        desc = self._entities.get(type_name)
        if desc is not None and desc.kind == EntityKind.ENUM:
            return list(desc.values)
        return []


class MemoizingIntrospector:
    """Cache lookups of another introspector for the duration of one call."""

    def __init__(self, delegate: SchemaIntrospector) -> None:
        self._delegate = delegate
        self._entities: dict[tuple[str, str], RawEntityDescription] = {}
        self._enum_values: dict[str, list[str]] = {}

    def describe_entity(self, table_name: str, scope: str, relations: RelationOptions) -> RawEntityDescription:
        key = (scope, table_name)
        if key not in self._entities:
            logger.debug("Introspecting entity %s in scope %s", table_name, scope)
            self._entities[key] = self._delegate.describe_entity(table_name, scope, relations)
        return self._entities[key]

    def enum_values(self, type_name: str) -> list[str]:
        if type_name not in self._enum_values:
            logger.debug("Introspecting enum values of %s", type_name)
            self._enum_values[type_name] = list(self._delegate.enum_values(type_name))
        return self._enum_values[type_name]
