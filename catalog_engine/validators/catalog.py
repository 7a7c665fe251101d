"""Ordered collection of emitted validator declarations."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from catalog_engine.models.identifiers import Identifier
from catalog_engine.validators.conformance import explain
from catalog_engine.validators.expressions import Validator, describe


class ValidatorCatalog(Mapping[Identifier, Validator]):
    """Identifier -> validator declarations, in emission order.

    A catalog is itself a valid *declarations* mapping for
    :func:`~catalog_engine.validators.conformance.explain`, so entity
    references between declarations resolve against it.  Catalogs from
    successive registration calls are combined with :meth:`update`.
    """

    def __init__(self, declarations: Mapping[Identifier, Validator] | None = None) -> None:
        self._declarations: dict[Identifier, Validator] = dict(declarations or {})

    def declare(self, identifier: Identifier, validator: Validator) -> None:
        """Add or replace the declaration for *identifier*."""
        self._declarations[identifier] = validator

    def update(self, other: Mapping[Identifier, Validator]) -> None:
        """Overlay every declaration of *other* onto this catalog."""
        self._declarations.update(other)

    def __getitem__(self, identifier: Identifier) -> Validator:
        return self._declarations[identifier]

    def __iter__(self) -> Iterator[Identifier]:
        return iter(self._declarations)

    def __len__(self) -> int:
        return len(self._declarations)

    def explain(self, identifier: Identifier, value: Any) -> list[str]:
        """Return the reasons *value* fails the declaration for *identifier*."""
        return explain(self[identifier], value, self, path=str(identifier))

    def is_valid(self, identifier: Identifier, value: Any) -> bool:
        return not self.explain(identifier, value)

    def describe(self) -> dict[str, dict[str, Any]]:
        """JSON-compatible descriptions keyed by identifier string."""
        return {str(ident): describe(v) for ident, v in self._declarations.items()}
