"""Unit tests for catalog_engine.validators (expressions, conformance, catalog)."""

from __future__ import annotations

import datetime
import decimal
import uuid

import pytest

from catalog_engine.errors import UnknownValidatorError
from catalog_engine.models.identifiers import Identifier
from catalog_engine.transforms import FunctionTransform
from catalog_engine.validators import (
    AllOf,
    BaseType,
    CollectionOf,
    EntityRef,
    Keys,
    MaxLength,
    Nullable,
    Transformed,
    ValidatorCatalog,
    ValueSet,
    conforms,
    describe,
    explain,
    references,
)
from catalog_engine.validators.data_types import base_type_predicate, is_known_base_type

A_ID = Identifier("t", "id")
A_NAME = Identifier("t", "name")
ROW = Identifier("t", "row")

# ---------------------------------------------------------------------------
# Base types
# ---------------------------------------------------------------------------


class TestBaseTypes:
    @pytest.mark.parametrize(
        ("type_name", "good", "bad"),
        [
            ("int4", 42, "42"),
            ("int4", -(2**31), 2**31),
            ("int2", 32767, 32768),
            ("int8", 2**63 - 1, 1.5),
            ("bool", True, 1),
            ("numeric", decimal.Decimal("1.5"), "1.5"),
            ("float8", 1.5, True),
            ("text", "hello", b"hello"),
            ("uuid", uuid.UUID(int=1), "00000000-0000-0000-0000-000000000001"),
            ("date", datetime.date(2024, 1, 1), "2024-01-01"),
            ("timestamptz", datetime.datetime(2024, 1, 1, tzinfo=datetime.UTC), datetime.date(2024, 1, 1)),
            ("interval", datetime.timedelta(hours=1), 3600),
            ("bytea", b"\x00", "\x00"),
            ("jsonb", {"a": [1, 2]}, object()),
        ],
    )
    def test_predicates(self, type_name, good, bad):
        assert conforms(BaseType(type_name), good, {})
        assert not conforms(BaseType(type_name), bad, {})

    def test_bool_is_not_an_int(self):
        assert not conforms(BaseType("int4"), True, {})

    def test_known_types(self):
        assert is_known_base_type("varchar")
        assert not is_known_base_type("geometry")
        assert base_type_predicate("geometry") is None

    def test_unknown_base_type_raises(self):
        with pytest.raises(UnknownValidatorError, match="geometry"):
            conforms(BaseType("geometry"), "POINT(0 0)", {})


# ---------------------------------------------------------------------------
# Composite expressions
# ---------------------------------------------------------------------------


class TestExpressions:
    def test_value_set(self):
        v = ValueSet(("a", "b"))
        assert conforms(v, "a", {})
        assert not conforms(v, "c", {})

    def test_max_length_requires_string(self):
        assert explain(MaxLength(3), 12, {}) == ["value: 12 has no length"]

    def test_all_of_short_circuits(self):
        v = AllOf((BaseType("text"), MaxLength(3)))
        assert explain(v, 12345, {}) == ["value: 12345 is not a valid text"]
        assert explain(v, "abcd", {}) == ["value: length 4 > max length 3"]

    def test_nullable(self):
        v = Nullable(BaseType("int4"))
        assert conforms(v, None, {})
        assert not conforms(BaseType("int4"), None, {})

    def test_collection_rejects_non_sequences(self):
        v = CollectionOf(BaseType("int4"))
        assert conforms(v, [1, 2, 3], {})
        assert conforms(v, (), {})
        assert not conforms(v, "123", {})
        assert not conforms(v, {1, 2}, {})

    def test_collection_reports_element_path(self):
        problems = explain(CollectionOf(BaseType("int4")), [1, "x", 3], {})
        assert problems == ["value[1]: 'x' is not a valid int4"]

    def test_transformed_checks_storage_projection(self):
        v = Transformed(ValueSet(("A", "B")), FunctionTransform("upper", str.upper, str.lower))
        assert conforms(v, "a", {})
        assert not conforms(v, "c", {})

    def test_transform_failure_is_a_problem(self):
        v = Transformed(BaseType("text"), FunctionTransform("upper", str.upper, str.lower))
        assert not conforms(v, 5, {})

    def test_entity_ref_resolves(self):
        declarations = {ROW: ValueSet(("x",))}
        assert conforms(EntityRef(ROW), "x", declarations)

    def test_unknown_entity_ref_raises(self):
        with pytest.raises(UnknownValidatorError, match="t/row"):
            conforms(EntityRef(ROW), "x", {})


class TestKeys:
    declarations = {A_ID: BaseType("int4"), A_NAME: BaseType("text")}

    def test_required_and_optional(self):
        v = Keys(required=(A_ID,), optional=(A_NAME,))
        assert conforms(v, {A_ID: 1}, self.declarations)
        assert conforms(v, {A_ID: 1, A_NAME: "n"}, self.declarations)
        assert not conforms(v, {A_NAME: "n"}, self.declarations)

    def test_present_keys_validated(self):
        v = Keys(optional=(A_ID, A_NAME))
        assert explain(v, {A_ID: "one"}, self.declarations) == ["value.t/id: 'one' is not a valid int4"]

    def test_string_keys_accepted(self):
        v = Keys(required=(A_ID,))
        assert conforms(v, {"t/id": 1}, self.declarations)

    def test_undeclared_key_only_needs_presence(self):
        v = Keys(required=(Identifier("t", "blob"),))
        assert conforms(v, {Identifier("t", "blob"): object()}, self.declarations)

    def test_non_mapping_rejected(self):
        assert not conforms(Keys(), [1], {})


# ---------------------------------------------------------------------------
# describe / references
# ---------------------------------------------------------------------------


class TestDescribe:
    def test_nested_description(self):
        v = Nullable(AllOf((BaseType("varchar"), MaxLength(20))))
        assert describe(v) == {
            "type": "nullable",
            "inner": {
                "type": "all_of",
                "parts": [{"type": "base", "name": "varchar"}, {"type": "max_length", "limit": 20}],
            },
        }

    def test_transform_named(self):
        v = Transformed(ValueSet(("A",)), FunctionTransform("upper", str.upper, str.lower))
        assert describe(v) == {"type": "transformed", "transform": "upper", "inner": {"type": "one_of", "values": ["A"]}}

    def test_keys(self):
        assert describe(Keys(required=(A_ID,), optional=(A_NAME,))) == {
            "type": "keys",
            "required": ["t/id"],
            "optional": ["t/name"],
        }

    def test_not_a_validator(self):
        with pytest.raises(TypeError):
            describe("int4")  # type: ignore[arg-type]

    def test_references(self):
        other = Identifier("t", "other")
        v = Nullable(CollectionOf(AllOf((EntityRef(ROW), EntityRef(other)))))
        assert references(v) == {ROW, other}
        assert references(BaseType("int4")) == set()


# ---------------------------------------------------------------------------
# ValidatorCatalog
# ---------------------------------------------------------------------------


class TestValidatorCatalog:
    def test_mapping_interface(self):
        catalog = ValidatorCatalog()
        catalog.declare(A_ID, BaseType("int4"))
        assert catalog[A_ID] == BaseType("int4")
        assert A_ID in catalog
        assert len(catalog) == 1
        assert list(catalog) == [A_ID]

    def test_declare_replaces(self):
        catalog = ValidatorCatalog({A_ID: BaseType("int4")})
        catalog.declare(A_ID, BaseType("int8"))
        assert catalog[A_ID] == BaseType("int8")

    def test_update_combines_calls(self):
        first = ValidatorCatalog({ROW: Keys(required=(A_ID,))})
        second = ValidatorCatalog({A_ID: BaseType("int4")})
        first.update(second)
        assert first.is_valid(ROW, {A_ID: 1})
        assert not first.is_valid(ROW, {A_ID: "1"})

    def test_explain_uses_identifier_path(self):
        catalog = ValidatorCatalog({A_ID: BaseType("int4")})
        assert catalog.explain(A_ID, "x") == ["t/id: 'x' is not a valid int4"]

    def test_describe_keyed_by_string(self):
        catalog = ValidatorCatalog({A_ID: BaseType("int4")})
        assert catalog.describe() == {"t/id": {"type": "base", "name": "int4"}}
