"""Exception hierarchy for the catalog engine.

Every error raised by the engine derives from :class:`CatalogError` so
that callers can abort a registration call with a single ``except``.
Exceptions raised by an external introspection collaborator are *not*
wrapped; they propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog_engine.models.identifiers import Identifier


class CatalogError(Exception):
    """Base exception for all catalog engine errors."""


class SchemaIntrospectionError(CatalogError):
    """The introspection source could not describe a requested entity."""


class TypeConsistencyError(CatalogError):
    """A column identifier was declared with two different types in one batch.

    Attributes
    ----------
    column:
        The column identifier that recurs.
    previous_type:
        The type seen first for the identifier.
    new_type:
        The conflicting type seen later.
    """

    def __init__(self, column: Identifier, previous_type: str, new_type: str) -> None:
        self.column = column
        self.previous_type = previous_type
        self.new_type = new_type
        super().__init__(
            f"Type mismatch. Column '{column}' is already defined as \"{previous_type}\" "
            f'and now trying to define it as "{new_type}". Check that two entities '
            f"don't declare the same column with different types in the same scope."
        )


class NameCollisionError(CatalogError):
    """An entity identifier is also used as a column identifier."""

    def __init__(self, identifier: Identifier) -> None:
        self.identifier = identifier
        super().__init__(f"Entity/column name clash. Entity '{identifier}' is also defined as a column.")


class CyclicTypeReferenceError(CatalogError):
    """Composite or enum types reference each other in a loop.

    Attributes
    ----------
    cycles:
        Each cycle as a list of entity identifiers in string form, e.g.
        ``[["app/a", "app/b"]]`` means a -> b -> a.
    """

    def __init__(self, cycles: list[list[str]]) -> None:
        self.cycles = cycles
        formatted = "; ".join(" -> ".join(c + [c[0]]) for c in cycles)
        super().__init__(f"Cyclic type references detected: {formatted}")


class UnknownValidatorError(CatalogError):
    """A validator referenced a declaration or base type that does not exist."""


class DuplicateEntityError(CatalogError):
    """The same entity identifier was declared twice in one registration call."""

    def __init__(self, identifier: Identifier) -> None:
        self.identifier = identifier
        super().__init__(f"Entity '{identifier}' is declared more than once in the same registration call.")
