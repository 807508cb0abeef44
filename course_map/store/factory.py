"""Store factory: builds the configured spatial store adapter.

Usage::

    from course_map.store.factory import get_store

    store = get_store(ImporterConfig.from_env())

The adapter is chosen by ``ImporterConfig.store_backend``
(``COURSEMAP_STORE``).  Adapters are imported lazily so psycopg is only
loaded when the PostGIS store is selected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from course_map.core.config import MEMORY_BACKEND, POSTGIS_BACKEND, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from course_map.core.config import ImporterConfig
    from course_map.store.base import SpatialStore

logger = logging.getLogger(__name__)


def _postgis(config: ImporterConfig) -> SpatialStore:
    from course_map.store.postgis import PostgisStore

    return PostgisStore(
        config.connection_string,
        schema_name=config.schema_name,
        table_name=config.table_name,
    )


def _memory(config: ImporterConfig) -> SpatialStore:  # noqa: ARG001
    from course_map.store.memory import MemoryStore

    return MemoryStore()


_STORE_BUILDERS: dict[str, Callable[[ImporterConfig], SpatialStore]] = {
    POSTGIS_BACKEND: _postgis,
    MEMORY_BACKEND: _memory,
}


def get_store(config: ImporterConfig) -> SpatialStore:
    """Create the spatial store selected by *config*.

    Raises:
        ConfigValidationError: If the backend name is unknown.
        StoreError: If the PostGIS store has no connection string.
    """
    builder = _STORE_BUILDERS.get(config.store_backend)
    if builder is None:
        available = ", ".join(sorted(_STORE_BUILDERS))
        raise ConfigValidationError(
            "COURSEMAP_STORE", config.store_backend, f"must be one of {available}"
        )

    logger.info("Creating spatial store: %s", config.store_backend)
    return builder(config)


def list_stores() -> list[str]:
    """Return the names of the available store adapters."""
    return sorted(_STORE_BUILDERS)
