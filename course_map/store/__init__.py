"""Spatial store adapters.

- base: SpatialStore / StoreTransaction ABCs
- memory: shapely-backed in-process store
- postgis: PostgreSQL + PostGIS store (psycopg)
- factory: config-driven adapter selection
"""

from course_map.store.base import SpatialStore, StoreTransaction
from course_map.store.factory import get_store, list_stores

__all__ = ["SpatialStore", "StoreTransaction", "get_store", "list_stores"]
