"""Simplifier factory: selects the line simplification routine by name.

Usage::

    from course_map.simplify.factory import get_simplifier

    simplifier = get_simplifier("douglas_peucker")

The name is read from ``COURSEMAP_SIMPLIFIER`` via
``ImporterConfig.simplifier``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from course_map.core.config import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from course_map.simplify.base import LineSimplifier

logger = logging.getLogger(__name__)

DOUGLAS_PEUCKER = "douglas_peucker"
DECIMATE = "decimate"

# Lazy loaders so shapely/pyproj are only imported when the routine is used.
_SIMPLIFIER_REGISTRY: dict[str, Callable[[], type[LineSimplifier]]] = {}


def _register_builtin_simplifiers() -> None:
    def _douglas_peucker() -> type[LineSimplifier]:
        from course_map.simplify.douglas_peucker import DouglasPeuckerSimplifier

        return DouglasPeuckerSimplifier

    def _decimate() -> type[LineSimplifier]:
        from course_map.simplify.decimate import DecimateSimplifier

        return DecimateSimplifier

    _SIMPLIFIER_REGISTRY[DOUGLAS_PEUCKER] = _douglas_peucker
    _SIMPLIFIER_REGISTRY[DECIMATE] = _decimate


def _ensure_registry() -> None:
    """Initialise the registry once (idempotent)."""
    if not _SIMPLIFIER_REGISTRY:
        _register_builtin_simplifiers()


def register_simplifier(name: str, loader: Callable[[], type[LineSimplifier]]) -> None:
    """Register a custom simplifier (e.g. an out-of-process service client).

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Simplifier name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _SIMPLIFIER_REGISTRY[name] = loader
    logger.debug("Registered simplifier: %s", name)


def get_simplifier(name: str) -> LineSimplifier:
    """Create the named simplifier.

    Raises:
        ConfigValidationError: If the name is not registered.
    """
    _ensure_registry()

    loader = _SIMPLIFIER_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_SIMPLIFIER_REGISTRY))
        raise ConfigValidationError("COURSEMAP_SIMPLIFIER", name, f"must be one of {available}")

    return loader()()


def list_simplifiers() -> list[str]:
    """Return the names of all registered simplifiers."""
    _ensure_registry()
    return sorted(_SIMPLIFIER_REGISTRY)
