"""Shared fixtures for catalog engine tests."""

from __future__ import annotations

import pytest

from catalog_engine.config import Settings
from catalog_engine.introspection import InMemoryIntrospector
from catalog_engine.registry import CatalogRegistry
from catalog_engine.telemetry.profiling import ProfileCollector


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Ensure fresh process-wide singletons for each test."""
    CatalogRegistry.reset()
    ProfileCollector.reset()
    yield
    CatalogRegistry.reset()
    ProfileCollector.reset()


@pytest.fixture
def registry() -> CatalogRegistry:
    """Empty registry, independent of the process singleton."""
    return CatalogRegistry()


@pytest.fixture
def settings() -> Settings:
    """Default settings, unaffected by CATALOG_* environment variables."""
    return Settings(_env_file=None, commit_registry=True, text_length_margin=4, bounded_text_types=["varchar", "text"])


@pytest.fixture
def shop_introspector() -> InMemoryIntrospector:
    """A small schema: an enum, a composite type and two tables using them."""
    return InMemoryIntrospector(
        {
            "order_status": {"kind": "enum", "values": ["new", "shipped", "delivered"]},
            "address": {
                "kind": "composite",
                "columns": [
                    {"name": "street", "type_name": "varchar", "type_specific_data": 104},
                    {"name": "city", "type_name": "text", "not_null": True},
                    {"name": "zip", "type_name": "varchar", "type_specific_data": 14},
                ],
            },
            "customer": {
                "kind": "table",
                "columns": [
                    {"name": "id", "type_name": "int4", "not_null": True, "has_default": True},
                    {"name": "name", "type_name": "varchar", "not_null": True, "type_specific_data": 24},
                    {"name": "note", "type_name": "text"},
                    {"name": "addresses", "type_name": "_address", "category": "A", "not_null": True},
                ],
            },
            "order": {
                "kind": "table",
                "columns": [
                    {"name": "id", "type_name": "int4", "not_null": True, "has_default": True},
                    {"name": "customer_id", "type_name": "int4", "not_null": True},
                    {
                        "name": "status",
                        "type_name": "order_status",
                        "enum": True,
                        "category": "E",
                        "not_null": True,
                    },
                    {"name": "tags", "type_name": "_text", "category": "A"},
                ],
            },
        }
    )
