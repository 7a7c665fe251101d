"""Validator expressions.

A validator is a small immutable expression tree describing the legal
values of a column or entity.  Nodes are frozen dataclasses, so two
derivations from the same inputs produce equal (and equally hashed) trees.

The engine only *builds* these trees.  A query layer either evaluates them
directly (see :mod:`catalog_engine.validators.conformance`) or translates
the JSON-compatible output of :func:`describe` into whatever structural
validation mechanism its runtime offers.

Node summary
------------
* :class:`BaseType` -- values of a database base type, keyed by raw name.
* :class:`EntityRef` -- defer to the declaration registered under an entity
  identifier (composite row, enum value set).
* :class:`ValueSet` -- one of a fixed set of labels.
* :class:`MaxLength` -- ``len(value) <= limit``.
* :class:`AllOf` -- every part must hold.
* :class:`Transformed` -- the inner validator applied to the value's
  storage projection.
* :class:`Nullable` -- ``None`` or the inner validator.
* :class:`CollectionOf` -- an ordered sequence whose elements all satisfy
  the inner validator.
* :class:`Keys` -- a mapping with required and optional column keys, each
  present key validated by its own declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from catalog_engine.models.identifiers import Identifier
from catalog_engine.transforms import Transform


@dataclass(frozen=True, slots=True)
class BaseType:
    type_name: str


@dataclass(frozen=True, slots=True)
class EntityRef:
    identifier: Identifier


@dataclass(frozen=True, slots=True)
class ValueSet:
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MaxLength:
    limit: int


@dataclass(frozen=True, slots=True)
class AllOf:
    parts: tuple[Validator, ...]


@dataclass(frozen=True, slots=True)
class Transformed:
    inner: Validator
    transform: Transform


@dataclass(frozen=True, slots=True)
class Nullable:
    inner: Validator


@dataclass(frozen=True, slots=True)
class CollectionOf:
    inner: Validator


@dataclass(frozen=True, slots=True)
class Keys:
    required: tuple[Identifier, ...] = ()
    optional: tuple[Identifier, ...] = ()

    @property
    def all_keys(self) -> tuple[Identifier, ...]:
        return self.required + self.optional


Validator = Union[BaseType, EntityRef, ValueSet, MaxLength, AllOf, Transformed, Nullable, CollectionOf, Keys]


def references(validator: Validator) -> set[Identifier]:
    """Return every entity identifier *validator* defers to."""
    if isinstance(validator, EntityRef):
        return {validator.identifier}
    if isinstance(validator, AllOf):
        found: set[Identifier] = set()
        for part in validator.parts:
            found |= references(part)
        return found
    if isinstance(validator, (Transformed, Nullable, CollectionOf)):
        return references(validator.inner)
    return set()


def describe(validator: Validator) -> dict[str, Any]:
    """Render *validator* as a JSON-compatible description."""
    if isinstance(validator, BaseType):
        return {"type": "base", "name": validator.type_name}
    if isinstance(validator, EntityRef):
        return {"type": "ref", "identifier": str(validator.identifier)}
    if isinstance(validator, ValueSet):
        return {"type": "one_of", "values": list(validator.values)}
    if isinstance(validator, MaxLength):
        return {"type": "max_length", "limit": validator.limit}
    if isinstance(validator, AllOf):
        return {"type": "all_of", "parts": [describe(p) for p in validator.parts]}
    if isinstance(validator, Transformed):
        return {"type": "transformed", **validator.transform.describe(), "inner": describe(validator.inner)}
    if isinstance(validator, Nullable):
        return {"type": "nullable", "inner": describe(validator.inner)}
    if isinstance(validator, CollectionOf):
        return {"type": "collection", "inner": describe(validator.inner)}
    if isinstance(validator, Keys):
        return {
            "type": "keys",
            "required": [str(k) for k in validator.required],
            "optional": [str(k) for k in validator.optional],
        }
    raise TypeError(f"Not a validator expression: {validator!r}")
