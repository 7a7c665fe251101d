"""Evaluate validator expressions against concrete values.

:func:`explain` walks a validator and returns a list of problem strings
(empty = valid); :func:`conforms` is the boolean shorthand.  Entity
references are resolved through *declarations*, the mapping emitted by the
registry builder.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from catalog_engine.errors import UnknownValidatorError
from catalog_engine.models.identifiers import Identifier
from catalog_engine.validators.data_types import base_type_predicate
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
)

_MISSING = object()


def _lookup(row: Mapping[Any, Any], key: Identifier) -> Any:
    """Find *key* in *row*, accepting either the identifier or its string form."""
    if key in row:
        return row[key]
    return row.get(str(key), _MISSING)


def explain(
    validator: Validator,
    value: Any,
    declarations: Mapping[Identifier, Validator],
    path: str = "value",
) -> list[str]:
    """Return the reasons *value* does not satisfy *validator*.

    Raises
    ------
    UnknownValidatorError
        If the validator refers to an undeclared entity or an unknown base
        type.
    """
    if isinstance(validator, BaseType):
        predicate = base_type_predicate(validator.type_name)
        if predicate is None:
            raise UnknownValidatorError(f"No predicate for base type '{validator.type_name}'")
        if not predicate(value):
            return [f"{path}: {value!r} is not a valid {validator.type_name}"]
        return []

    if isinstance(validator, EntityRef):
        target = declarations.get(validator.identifier)
        if target is None:
            raise UnknownValidatorError(f"No declaration registered for '{validator.identifier}'")
        return explain(target, value, declarations, path)

    if isinstance(validator, ValueSet):
        if value not in validator.values:
            return [f"{path}: {value!r} not in allowed values {list(validator.values)}"]
        return []

    if isinstance(validator, MaxLength):
        if not isinstance(value, str):
            return [f"{path}: {value!r} has no length"]
        if len(value) > validator.limit:
            return [f"{path}: length {len(value)} > max length {validator.limit}"]
        return []

    if isinstance(validator, AllOf):
        # Short-circuit so later parts never see a value of the wrong type.
        for part in validator.parts:
            problems = explain(part, value, declarations, path)
            if problems:
                return problems
        return []

    if isinstance(validator, Transformed):
        try:
            stored = validator.transform.to_storage(value)
        except (ValueError, TypeError, KeyError) as exc:
            return [f"{path}: transform {validator.transform.name} rejected {value!r} ({exc})"]
        return explain(validator.inner, stored, declarations, path)

    if isinstance(validator, Nullable):
        if value is None:
            return []
        return explain(validator.inner, value, declarations, path)

    if isinstance(validator, CollectionOf):
        if not isinstance(value, (list, tuple)):
            return [f"{path}: {value!r} is not an ordered collection"]
        problems: list[str] = []
        for idx, item in enumerate(value):
            problems.extend(explain(validator.inner, item, declarations, f"{path}[{idx}]"))
        return problems

    if isinstance(validator, Keys):
        if not isinstance(value, Mapping):
            return [f"{path}: {value!r} is not a mapping"]
        problems = []
        for key in validator.required:
            if _lookup(value, key) is _MISSING:
                problems.append(f"{path}: missing required key {key}")
        for key in validator.all_keys:
            item = _lookup(value, key)
            if item is _MISSING:
                continue
            # Keys without a declaration (underivable columns) only need to be present.
            key_validator = declarations.get(key)
            if key_validator is not None:
                problems.extend(explain(key_validator, item, declarations, f"{path}.{key}"))
        return problems

    raise TypeError(f"Not a validator expression: {validator!r}")


def conforms(validator: Validator, value: Any, declarations: Mapping[Identifier, Validator]) -> bool:
    """Return True if *value* satisfies *validator*."""
    return not explain(validator, value, declarations)
