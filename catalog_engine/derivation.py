"""Derive validator expressions for columns.

Resolution order for a column's base validator (first match wins):

1. **Array** -- the element type: a reference to the registered composite
   or enum entity, or the raw scalar element type.
2. **Composite** -- the type names a registered composite entity.
3. **Enum** -- a reference to the registered enum entity, otherwise the
   value set reported by the introspection source.
4. **Bounded text** -- ``varchar``/``text`` with a positive type modifier
   gets a maximum length of ``modifier - margin`` (PostgreSQL stores the
   4-byte varlena header in ``atttypmod``).
5. **Scalar** -- the raw type name.

The base validator is then wrapped, innermost first: in the column's
transform, in a nullable validator when the column allows NULL, and in a
collection validator for arrays.  For a nullable array the nullable wrapper
therefore applies to each element: ``[None]`` is accepted, a bare ``None``
is not.

The transform wrapper is skipped when the base validator references an enum
declaration that already applies the same transform, so the transform runs
once.  ``describe()`` output for such a column shows a plain reference.  A
column for which no base validator can be found is excluded (``None``)
rather than failing the registration.

This module also builds the type dependency graph between entities, used to
reject self-referencing composite types and to order emitted declarations.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable, Mapping

import networkx as nx

from catalog_engine.errors import CyclicTypeReferenceError
from catalog_engine.introspection import SchemaIntrospector
from catalog_engine.models.descriptors import ColumnDescriptor, EntityDescriptor, EntityKind
from catalog_engine.models.identifiers import Identifier
from catalog_engine.registry import find_entity_by_db_name
from catalog_engine.transforms import Transform
from catalog_engine.validators.expressions import (
    AllOf,
    BaseType,
    CollectionOf,
    EntityRef,
    MaxLength,
    Nullable,
    Transformed,
    Validator,
    ValueSet,
)

logger = logging.getLogger(__name__)

DEFAULT_TEXT_LENGTH_MARGIN = 4
DEFAULT_BOUNDED_TEXT_TYPES: tuple[str, ...] = ("varchar", "text")


# ---------------------------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------------------------


def resolve_reference(column: ColumnDescriptor, registry: Mapping[Identifier, EntityDescriptor]) -> Identifier | None:
    """Return the registered entity *column*'s type refers to, if any."""
    if column.is_array:
        return column.element_type if isinstance(column.element_type, Identifier) else None
    composite = find_entity_by_db_name(registry, column.type_name, EntityKind.COMPOSITE)
    if composite is not None:
        return composite
    if column.enum:
        return find_entity_by_db_name(registry, column.type_name, EntityKind.ENUM)
    return None


# ---------------------------------------------------------------------------
# Validator derivation
# ---------------------------------------------------------------------------


def _base_validator(
    column: ColumnDescriptor,
    registry: Mapping[Identifier, EntityDescriptor],
    introspector: SchemaIntrospector,
    text_length_margin: int,
    bounded_text_types: Iterable[str],
) -> Validator | None:
    if column.is_array:
        if column.element_type is None:
            return None
        if isinstance(column.element_type, Identifier):
            return EntityRef(column.element_type)
        return BaseType(column.element_type)

    reference = resolve_reference(column, registry)
    if reference is not None:
        return EntityRef(reference)

    if column.enum:
        values = introspector.enum_values(column.type_name)
        return ValueSet(tuple(values)) if values else None

    if column.type_name in bounded_text_types and column.type_specific_data > 0:
        return AllOf((BaseType(column.type_name), MaxLength(column.type_specific_data - text_length_margin)))

    return BaseType(column.type_name)


def _transform_applied_by(
    base: Validator,
    transform: Transform,
    registry: Mapping[Identifier, EntityDescriptor],
) -> bool:
    """True if *base* references an enum entity whose declaration already applies *transform*.

    Wrapping the column as well would run the transform twice on the way to
    the value set, so the caller leaves the column unwrapped.
    """
    if not isinstance(base, EntityRef):
        return False
    target = registry.get(base.identifier)
    return target is not None and target.is_enum and target.transform == transform


def derive_validator(
    column: ColumnDescriptor,
    registry: Mapping[Identifier, EntityDescriptor],
    introspector: SchemaIntrospector,
    *,
    text_length_margin: int = DEFAULT_TEXT_LENGTH_MARGIN,
    bounded_text_types: Iterable[str] = DEFAULT_BOUNDED_TEXT_TYPES,
) -> Validator | None:
    """Derive the validator for *column* against the effective *registry*.

    Parameters
    ----------
    column:
        A normalized column whose array element type is already resolved.
    registry:
        The effective registry: prior registrations overlaid by the batch
        being registered.
    introspector:
        Consulted only for enum columns whose type is not a registered
        entity.
    text_length_margin:
        Subtracted from the declared length of bounded text columns.
    bounded_text_types:
        Raw type names that receive a maximum-length check.

    Returns
    -------
    Validator | None
        The validator, or ``None`` if the column's type cannot be derived.

    Notes
    -----
    A column whose transform is inherited from the enum entity it references
    is not wrapped in ``Transformed``; the referenced enum declaration applies
    the transform.  Its description is therefore a bare ``ref``.
    """
    base = _base_validator(column, registry, introspector, text_length_margin, tuple(bounded_text_types))
    if base is None:
        logger.debug("No validator derivable for column %s (type %s)", column.identifier, column.type_name)
        return None

    validator: Validator = base
    if column.transform is not None and not _transform_applied_by(base, column.transform, registry):
        validator = Transformed(validator, column.transform)
    if not column.not_null:
        validator = Nullable(validator)
    if column.is_array:
        validator = CollectionOf(validator)
    return validator


def enum_validator(entity: EntityDescriptor) -> Validator:
    """Value-set validator for an enum entity, wrapped in its transform."""
    validator: Validator = ValueSet(tuple(entity.values))
    if entity.transform is not None:
        validator = Transformed(validator, entity.transform)
    return validator


# ---------------------------------------------------------------------------
# Type dependency graph
# ---------------------------------------------------------------------------


def build_type_graph(
    entities: Mapping[Identifier, EntityDescriptor],
    registry: Mapping[Identifier, EntityDescriptor],
) -> nx.DiGraph:
    """Build a graph with an edge from each entity to every entity its columns reference.

    Every entity in *entities* becomes a node; referenced entities that
    only exist in *registry* are added as nodes too.
    """
    graph = nx.DiGraph()
    for ident in entities:
        graph.add_node(ident)
    for ident, entity in entities.items():
        for column in entity.columns.values():
            target = resolve_reference(column, registry)
            if target is not None:
                graph.add_edge(ident, target)
    return graph


def type_dependency_order(graph: nx.DiGraph) -> list[Identifier]:
    """Return entities with every referenced entity before its referrers.

    Ties are broken by identifier order so the result is reproducible.

    Raises
    ------
    CyclicTypeReferenceError
        If entity types reference each other in a loop (including an
        entity referencing itself).
    """
    # Edges point referrer -> referenced, so walk the reversed graph.
    reversed_graph = graph.reverse(copy=False)
    in_degree = dict(reversed_graph.in_degree())
    heap = [n for n, d in in_degree.items() if d == 0]
    heapq.heapify(heap)
    result: list[Identifier] = []
    while heap:
        node = heapq.heappop(heap)
        result.append(node)
        for successor in sorted(reversed_graph.successors(node)):
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(heap, successor)
    if len(result) != len(graph):
        cycles = [[str(n) for n in cycle] for cycle in nx.simple_cycles(graph)]
        raise CyclicTypeReferenceError(sorted(cycles))
    return result
