"""Bidirectional value transforms attached to enum types and columns.

A transform converts between the value an application works with and the
value stored in the database.  Validators wrapped in a transform check the
*storage* projection of a value: ``inner(transform.to_storage(value))``.

Two implementations ship with the engine:

* :class:`EnumMemberTransform` -- maps members of a Python :class:`enum.Enum`
  to their ``value`` (the database label) and back.
* :class:`FunctionTransform` -- wraps a pair of plain callables.
"""

from __future__ import annotations

import abc
import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


class Transform(abc.ABC):
    """Abstract base for value transforms.

    Implementations must be deterministic and should define structural
    equality so that two registrations of the same transform compare equal.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Stable name used in validator descriptions."""

    @abc.abstractmethod
    def to_storage(self, value: Any) -> Any:
        """Project an application value onto its stored representation.

        Raises
        ------
        ValueError
            If *value* cannot be represented.
        """

    @abc.abstractmethod
    def from_storage(self, value: Any) -> Any:
        """Convert a stored value back into the application representation."""

    def describe(self) -> dict[str, Any]:
        return {"transform": self.name}


@dataclass(frozen=True)
class EnumMemberTransform(Transform):
    """Map members of *enum_cls* to their values and back.

    Only members of *enum_cls* are accepted on the way in; a bare label is
    rejected so that application code cannot bypass the enum.
    """

    enum_cls: type[enum.Enum]

    @property
    def name(self) -> str:
        return f"enum:{self.enum_cls.__module__}.{self.enum_cls.__qualname__}"

    def to_storage(self, value: Any) -> Any:
        if not isinstance(value, self.enum_cls):
            raise ValueError(f"{value!r} is not a member of {self.enum_cls.__name__}")
        return value.value

    def from_storage(self, value: Any) -> Any:
        return self.enum_cls(value)


@dataclass(frozen=True)
class FunctionTransform(Transform):
    """Transform backed by two callables."""

    label: str
    to_storage_fn: Callable[[Any], Any]
    from_storage_fn: Callable[[Any], Any]

    @property
    def name(self) -> str:
        return self.label

    def to_storage(self, value: Any) -> Any:
        return self.to_storage_fn(value)

    def from_storage(self, value: Any) -> Any:
        return self.from_storage_fn(value)
