"""Predicates for PostgreSQL base types, keyed by raw type name.

Raw names are the ones reported by ``pg_type.typname`` (``int4``,
``varchar``, ``timestamptz``...), which is what :class:`BaseType`
validators carry.
"""

from __future__ import annotations

import datetime
import decimal
import uuid
from collections.abc import Callable
from typing import Any

Predicate = Callable[[Any], bool]


def _int_in_range(bits: int) -> Predicate:
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1

    def check(value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high

    return check


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, decimal.Decimal)) and not isinstance(value, bool)


def _is_float(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_json(value: Any) -> bool:
    return isinstance(value, (dict, list, str, int, float, bool))


BASE_TYPES: dict[str, Predicate] = {
    "bool": lambda v: isinstance(v, bool),
    "int2": _int_in_range(16),
    "int4": _int_in_range(32),
    "int8": _int_in_range(64),
    "oid": lambda v: isinstance(v, int) and not isinstance(v, bool) and 0 <= v < 2**32,
    "float4": _is_float,
    "float8": _is_float,
    "numeric": _is_number,
    "text": _is_str,
    "varchar": _is_str,
    "bpchar": _is_str,
    "char": _is_str,
    "name": _is_str,
    "citext": _is_str,
    "uuid": lambda v: isinstance(v, uuid.UUID),
    "date": lambda v: isinstance(v, datetime.date),
    "time": lambda v: isinstance(v, datetime.time),
    "timetz": lambda v: isinstance(v, datetime.time),
    "timestamp": lambda v: isinstance(v, datetime.datetime),
    "timestamptz": lambda v: isinstance(v, datetime.datetime),
    "interval": lambda v: isinstance(v, datetime.timedelta),
    "json": _is_json,
    "jsonb": _is_json,
    "bytea": lambda v: isinstance(v, (bytes, bytearray, memoryview)),
}


def base_type_predicate(type_name: str) -> Predicate | None:
    """Return the predicate for *type_name*, or ``None`` if it is not known."""
    return BASE_TYPES.get(type_name)


def is_known_base_type(type_name: str) -> bool:
    return type_name in BASE_TYPES
