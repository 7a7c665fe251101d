"""Descriptor models for entities, columns and registration declarations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from catalog_engine.models.identifiers import Identifier
from catalog_engine.transforms import Transform


class EntityKind(str, Enum):
    """What kind of database object an entity describes."""

    TABLE = "table"
    VIEW = "view"
    COMPOSITE = "composite"
    ENUM = "enum"


class ColumnCategory(str, Enum):
    """Classification of a column's raw type."""

    SCALAR = "scalar"
    ARRAY = "array"
    COMPOSITE = "composite"
    ENUM = "enum"


class JoinKind(str, Enum):
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"


class JoinSpec(BaseModel):
    """A declared relation from one entity to another.

    Joins are metadata for the query layer; the engine only records them.
    """

    kind: JoinKind
    local_column: str = Field(..., min_length=1, description="Column on this entity.")
    target: Identifier = Field(..., description="Identifier of the joined entity.")
    target_column: str = Field(..., min_length=1, description="Column on the joined entity.")


class ColumnOverride(BaseModel):
    """Per-column options declared alongside an entity."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    identifier: Identifier | None = Field(
        default=None,
        description="Replacement identifier for the column (defaults to scope/column_name).",
    )
    transform: Transform | None = Field(
        default=None,
        description="Column-level transform; takes precedence over any enum-wide transform.",
    )


class RelationOptions(BaseModel):
    """Declared relation/join map and options for one entity."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    joins: dict[str, JoinSpec] = Field(default_factory=dict)
    transform: Transform | None = Field(
        default=None,
        description="Entity-wide transform (meaningful for enum types).",
    )
    columns: dict[str, ColumnOverride] = Field(
        default_factory=dict,
        description="Overrides keyed by the database column name.",
    )


class EntityDeclaration(BaseModel):
    """One entity requested in a registration call."""

    table_name: str = Field(..., min_length=1, description="Name of the table or type in the database.")
    identifier: Identifier = Field(..., description="Identifier the entity is registered under.")
    options: RelationOptions = Field(default_factory=RelationOptions)

    @property
    def scope(self) -> str:
        return self.identifier.scope


class ColumnDescriptor(BaseModel):
    """Normalized description of one column."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    identifier: Identifier
    db_name: str = Field(..., min_length=1, description="Column name in the database.")
    type_name: str = Field(
        ...,
        min_length=1,
        description="Raw type name; for arrays, the element type name.",
    )
    category: ColumnCategory = ColumnCategory.SCALAR
    not_null: bool = False
    enum: bool = False
    has_default: bool = False
    type_specific_data: int = Field(
        default=0,
        description="Type modifier reported by the database (e.g. varchar length incl. header), 0 when absent.",
    )
    element_type: Identifier | str | None = Field(
        default=None,
        description="Arrays only: registered entity identifier or raw scalar type of the elements.",
    )
    transform: Transform | None = None

    @property
    def is_array(self) -> bool:
        return self.category == ColumnCategory.ARRAY

    @property
    def declared_type(self) -> str:
        """Type as declared in the database.

        Arrays get back the ``_`` prefix stripped during normalization;
        composite and enum types carry their category, so a scalar, an array
        and a row type of the same name all differ.
        """
        if self.is_array:
            return f"_{self.type_name}"
        if self.category in (ColumnCategory.COMPOSITE, ColumnCategory.ENUM):
            return f"{self.type_name} ({self.category.value})"
        return self.type_name

    @property
    def required_for_insert(self) -> bool:
        """NOT NULL columns without a database default must be supplied on insert."""
        return self.not_null and not self.has_default


class EntityDescriptor(BaseModel):
    """Normalized description of a table, view, composite or enum type.

    ``columns`` preserves the order reported by the introspection source.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    identifier: Identifier
    db_name: str = Field(..., min_length=1)
    kind: EntityKind
    columns: dict[Identifier, ColumnDescriptor] = Field(default_factory=dict)
    insert_identifier: Identifier
    relations: dict[str, JoinSpec] = Field(default_factory=dict)
    transform: Transform | None = None
    values: list[str] = Field(
        default_factory=list,
        description="Enum entities only: legal values in declaration order.",
    )

    @model_validator(mode="after")
    def validate_kind_requirements(self) -> EntityDescriptor:
        if self.kind == EntityKind.ENUM and self.columns:
            raise ValueError(f"Enum entity '{self.identifier}' cannot have columns.")
        return self

    @property
    def is_enum(self) -> bool:
        return self.kind == EntityKind.ENUM

    def required_insert_columns(self) -> list[Identifier]:
        return [cid for cid, col in self.columns.items() if col.required_for_insert]

    def optional_insert_columns(self) -> list[Identifier]:
        return [cid for cid, col in self.columns.items() if not col.required_for_insert]

    def with_columns(self, columns: dict[Identifier, ColumnDescriptor]) -> EntityDescriptor:
        """Return a copy with *columns* replacing the current column map."""
        return self.model_copy(update={"columns": columns})
