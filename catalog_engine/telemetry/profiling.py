"""Timing of registration phases.

``@profile_operation(name)`` measures a function with
``time.perf_counter_ns()``, logs the duration at DEBUG level and records it
in the :class:`ProfileCollector` singleton::

    @profile_operation("registry.normalize")
    def normalize_batch(...):
        ...

Registration runs once per process during setup, so the collector simply
keeps every sample; :meth:`ProfileCollector.summary` aggregates them.
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class ProfileResult:
    """Immutable record of one timed call."""

    operation: str
    duration_ms: float


class ProfileCollector:
    """Thread-safe store of profile results, grouped by operation name."""

    _instance: ProfileCollector | None = None
    _lock_cls = threading.Lock()

    def __init__(self) -> None:
        self._data: dict[str, list[ProfileResult]] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> ProfileCollector:
        """Return the module-level singleton, creating it if needed."""
        if cls._instance is None:
            with cls._lock_cls:
                if cls._instance is None:
                    cls._instance = ProfileCollector()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._lock_cls:
            cls._instance = None

    def record(self, result: ProfileResult) -> None:
        with self._lock:
            self._data.setdefault(result.operation, []).append(result)

    def results(self, operation: str) -> list[ProfileResult]:
        with self._lock:
            return list(self._data.get(operation, []))

    def summary(self) -> dict[str, dict[str, float]]:
        """Return ``{operation: {"count", "total_ms", "max_ms"}}`` sorted by operation."""
        with self._lock:
            snapshot = {op: list(results) for op, results in self._data.items()}
        return {
            op: {
                "count": len(results),
                "total_ms": round(sum(r.duration_ms for r in results), 3),
                "max_ms": max(r.duration_ms for r in results),
            }
            for op, results in sorted(snapshot.items())
            if results
        }


def profile_operation(name: str) -> Callable[[F], F]:
    """Decorator that times a synchronous function under *name*."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_ns = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            finally:
                duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
                ProfileCollector.get_instance().record(ProfileResult(operation=name, duration_ms=round(duration_ms, 3)))
                logger.debug("PROFILE %s: %.3f ms", name, duration_ms)

        return wrapper  # type: ignore[return-value]

    return decorator
