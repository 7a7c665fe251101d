"""Two-part identifiers for entities and columns."""

from __future__ import annotations

from dataclasses import dataclass

_SEPARATOR = "/"


@dataclass(frozen=True, slots=True, order=True)
class Identifier:
    """A globally unique ``scope/name`` pair.

    Immutable.  Deterministic ``__hash__``, ``__eq__`` and ordering via
    *frozen=True, order=True*, so identifiers can key dicts and be sorted
    for reproducible output.
    """

    scope: str
    name: str

    def __post_init__(self) -> None:
        if not self.scope or not self.name:
            raise ValueError(f"Identifier requires a scope and a name, got {self.scope!r}/{self.name!r}")
        if _SEPARATOR in self.scope:
            raise ValueError(f"Identifier scope may not contain '{_SEPARATOR}': {self.scope!r}")

    @classmethod
    def parse(cls, text: str) -> Identifier:
        """Parse ``"scope/name"`` into an :class:`Identifier`.

        Only the first separator splits, so names may themselves contain
        ``/``.
        """
        scope, sep, name = text.partition(_SEPARATOR)
        if not sep:
            raise ValueError(f"Identifier {text!r} is missing a scope (expected 'scope/name')")
        return cls(scope=scope, name=name)

    def child(self, name: str) -> Identifier:
        """Return a sibling identifier in the same scope."""
        return Identifier(scope=self.scope, name=name)

    def insert_identifier(self) -> Identifier:
        """Identifier of the "all required fields present" declaration."""
        return self.child(f"{self.name}-insert")

    def __str__(self) -> str:
        return f"{self.scope}{_SEPARATOR}{self.name}"
