"""Registry builder: one registration call from declarations to validators.

:func:`define_entities` sequences the engine's components:

1. Describe and normalize every declared entity.
2. Resolve array element types against the batch and the prior registry.
3. Overlay the batch on the prior registry to form the effective registry.
4. Propagate enum transforms onto enum columns.
5. Check the batch for type conflicts, name collisions and cyclic type
   references.
6. Derive the validator declarations.
7. Merge the batch into the registry, unless the caller runs without a
   materialized runtime registry.

Every check, and every call to the introspection source, happens before the
merge, so a failing call leaves the registry exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from catalog_engine.config import Settings, load_settings
from catalog_engine.consistency import validate_batch
from catalog_engine.derivation import build_type_graph, derive_validator, enum_validator, type_dependency_order
from catalog_engine.errors import DuplicateEntityError
from catalog_engine.introspection import MemoizingIntrospector, SchemaIntrospector
from catalog_engine.models.descriptors import EntityDeclaration, EntityDescriptor
from catalog_engine.models.identifiers import Identifier
from catalog_engine.normalizer import normalize_entity, resolve_array_element_types
from catalog_engine.propagation import propagate_enum_transforms
from catalog_engine.registry import CatalogRegistry
from catalog_engine.telemetry.profiling import profile_operation
from catalog_engine.validators.catalog import ValidatorCatalog
from catalog_engine.validators.expressions import Keys

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    """Outcome of one registration call.

    Attributes
    ----------
    entities:
        The normalized batch, as merged (or as it would have been merged).
    catalog:
        Validator declarations for the batch, dependencies first.
    excluded_columns:
        Columns with no derivable validator, in emission order.
    committed:
        Whether the batch was merged into the registry.
    """

    entities: dict[Identifier, EntityDescriptor]
    catalog: ValidatorCatalog
    excluded_columns: list[Identifier] = field(default_factory=list)
    committed: bool = False


@profile_operation("registry.normalize")
def _normalize_batch(
    declarations: Sequence[EntityDeclaration],
    introspector: SchemaIntrospector,
) -> dict[Identifier, EntityDescriptor]:
    batch: dict[Identifier, EntityDescriptor] = {}
    for declaration in declarations:
        if declaration.identifier in batch:
            raise DuplicateEntityError(declaration.identifier)
        raw = introspector.describe_entity(declaration.table_name, declaration.scope, declaration.options)
        batch[declaration.identifier] = normalize_entity(raw, declaration)
    return batch


@profile_operation("registry.emit")
def _emit_declarations(
    batch: Mapping[Identifier, EntityDescriptor],
    order: Sequence[Identifier],
    effective: Mapping[Identifier, EntityDescriptor],
    introspector: SchemaIntrospector,
    settings: Settings,
) -> tuple[ValidatorCatalog, list[Identifier]]:
    catalog = ValidatorCatalog()
    excluded: list[Identifier] = []

    for ident in order:
        entity = batch.get(ident)
        if entity is None:
            # Referenced entity registered by an earlier call.
            continue

        if entity.is_enum:
            catalog.declare(ident, enum_validator(entity))
            continue

        catalog.declare(ident, Keys(optional=tuple(entity.columns)))
        catalog.declare(
            entity.insert_identifier,
            Keys(
                required=tuple(entity.required_insert_columns()),
                optional=tuple(entity.optional_insert_columns()),
            ),
        )

        for column_id, column in entity.columns.items():
            validator = derive_validator(
                column,
                effective,
                introspector,
                text_length_margin=settings.text_length_margin,
                bounded_text_types=settings.bounded_text_types,
            )
            if validator is None:
                excluded.append(column_id)
                continue
            catalog.declare(column_id, validator)

    return catalog, excluded


def define_entities(
    registry: CatalogRegistry,
    introspector: SchemaIntrospector,
    declarations: Sequence[EntityDeclaration],
    *,
    commit: bool | None = None,
    settings: Settings | None = None,
) -> RegistrationResult:
    """Register *declarations* and derive their validators.

    Parameters
    ----------
    registry:
        The registry to read prior registrations from and merge into.
    introspector:
        Source of entity descriptions; called at most once per distinct
        entity and enum type during this call.  Its exceptions propagate
        unchanged.
    declarations:
        Entities to register, in declaration order.
    commit:
        Whether to merge the batch into *registry*.  Defaults to
        ``settings.commit_registry``.
    settings:
        Engine settings; loaded from the environment when omitted.

    Returns
    -------
    RegistrationResult
        The normalized batch and its validator declarations.

    Raises
    ------
    TypeConsistencyError, NameCollisionError, CyclicTypeReferenceError, DuplicateEntityError
        If the batch is inconsistent.  Nothing is merged.
    """
    settings = settings or load_settings()
    if commit is None:
        commit = settings.commit_registry

    memo = MemoizingIntrospector(introspector)
    prior = registry.snapshot()

    batch = _normalize_batch(declarations, memo)
    batch = resolve_array_element_types(batch, prior)

    effective = {**prior, **batch}
    batch = propagate_enum_transforms(effective, batch)
    effective.update(batch)

    validate_batch(batch)
    order = type_dependency_order(build_type_graph(batch, effective))

    catalog, excluded = _emit_declarations(batch, order, effective, memo, settings)

    if commit:
        registry.merge(batch)
    else:
        logger.info("Registry commit disabled; %d entities not merged", len(batch))

    logger.info(
        "Registered %d entities with %d validator declarations (%d columns excluded)",
        len(batch),
        len(catalog),
        len(excluded),
        extra={
            "registration": {
                "entities": sorted(str(i) for i in batch),
                "excluded_columns": [str(c) for c in excluded],
                "committed": commit,
            }
        },
    )

    return RegistrationResult(entities=batch, catalog=catalog, excluded_columns=excluded, committed=commit)
