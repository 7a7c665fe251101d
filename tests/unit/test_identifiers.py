"""Unit tests for catalog_engine.models.identifiers."""

from __future__ import annotations

import dataclasses

import pytest

from catalog_engine.models.identifiers import Identifier


class TestIdentifier:
    def test_str_form(self):
        assert str(Identifier("shop", "customer")) == "shop/customer"

    def test_parse_round_trip(self):
        assert Identifier.parse("shop/customer") == Identifier("shop", "customer")

    def test_parse_keeps_later_separators_in_name(self):
        ident = Identifier.parse("shop/a/b")
        assert ident.scope == "shop"
        assert ident.name == "a/b"

    def test_parse_requires_scope(self):
        with pytest.raises(ValueError, match="missing a scope"):
            Identifier.parse("customer")

    def test_empty_parts_rejected(self):
        with pytest.raises(ValueError):
            Identifier("", "customer")
        with pytest.raises(ValueError):
            Identifier("shop", "")

    def test_hashable_and_equal(self):
        assert {Identifier("a", "x"): 1}[Identifier("a", "x")] == 1

    def test_immutable(self):
        ident = Identifier("a", "x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            ident.name = "y"  # type: ignore[misc]

    def test_ordering_scope_first(self):
        idents = [Identifier("b", "a"), Identifier("a", "z"), Identifier("a", "b")]
        assert sorted(idents) == [Identifier("a", "b"), Identifier("a", "z"), Identifier("b", "a")]

    def test_insert_identifier(self):
        assert Identifier("shop", "customer").insert_identifier() == Identifier("shop", "customer-insert")

    def test_child_same_scope(self):
        assert Identifier("shop", "customer").child("id") == Identifier("shop", "id")
