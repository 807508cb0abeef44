"""PostgreSQL + PostGIS spatial store.

Stores features in a ``geography(Geometry, 4326)`` column and leaves every
spatial predicate to PostGIS:

- ``ST_GeogFromText``          parses the importer's WKT
- ``ST_Contains`` (geometry)   strict boundary containment
- ``ST_Distance`` / ``ST_DWithin`` (geography)  metre distances

Connection strategy: every transaction and every read opens a new
connection and closes it afterwards.  There is no pooling and no
process-wide connection.

All statements use ``psycopg.sql`` composition for identifiers and bound
parameters for values.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from course_map.core.constants import BOUNDARY_FEATURE_TYPE, WGS84_SRID
from course_map.core.exceptions import StoreConnectionError, StoreError
from course_map.models.feature import FeatureMatch, FeatureRow, StoredFeature
from course_map.store.base import SpatialStore, StoreTransaction

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("course_map.store.postgis")


_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
    id BIGSERIAL PRIMARY KEY,
    course_id TEXT NOT NULL,
    feature_type TEXT NOT NULL,
    name TEXT NULL,
    geog GEOGRAPHY(GEOMETRY, 4326) NOT NULL,
    properties JSONB NOT NULL DEFAULT '{{}}'::jsonb
)
"""

_CREATE_COURSE_INDEX = """
CREATE INDEX IF NOT EXISTS {index} ON {table} (course_id, feature_type)
"""

_CREATE_GEOG_INDEX = """
CREATE INDEX IF NOT EXISTS {index} ON {table} USING GIST (geog)
"""


def _match(row: dict[str, Any], *, with_distance: bool = False) -> FeatureMatch:
    return FeatureMatch(
        feature_type=row["feature_type"],
        name=row["name"],
        distance_m=float(row["distance_m"]) if with_distance else None,
    )


def _optional_filters(
    course_id: str | None,
    feature_type: str | None,
) -> tuple[sql.Composable, list[object]]:
    """Build ``AND ...`` clauses for the optional course / type filters."""
    clauses: list[sql.Composable] = []
    params: list[object] = []
    if course_id is not None:
        clauses.append(sql.SQL(" AND course_id = %s"))
        params.append(course_id)
    if feature_type is not None:
        clauses.append(sql.SQL(" AND feature_type = %s"))
        params.append(feature_type)
    return sql.Composed(clauses), params


class _PostgisTransaction(StoreTransaction):
    def __init__(self, conn: psycopg.Connection[Any], table: sql.Composable) -> None:
        self._conn = conn
        self._table = table

    def delete_course(self, course_id: str) -> int:
        query = sql.SQL("DELETE FROM {table} WHERE course_id = %s").format(table=self._table)
        with self._conn.cursor() as cur:
            cur.execute(query, (course_id,))
            return cur.rowcount

    def insert_feature(self, row: FeatureRow) -> None:
        query = sql.SQL(
            "INSERT INTO {table} (course_id, feature_type, name, geog, properties) "
            "VALUES (%s, %s, %s, ST_GeogFromText(%s), %s::jsonb)"
        ).format(table=self._table)
        with self._conn.cursor() as cur:
            cur.execute(
                query,
                (
                    row.course_id,
                    row.feature_type,
                    row.name,
                    f"SRID={WGS84_SRID};{row.wkt}",
                    row.properties_json,
                ),
            )


class PostgisStore(SpatialStore):
    """PostGIS-backed spatial store.

    Args:
        connection_string: libpq DSN or ``postgresql://`` URI.
        schema_name: Schema holding the features table.
        table_name: Features table name.
    """

    name = "postgis"

    def __init__(
        self,
        connection_string: str,
        *,
        schema_name: str = "public",
        table_name: str = "course_features",
    ) -> None:
        if not connection_string:
            msg = "PostGIS store requires a connection string"
            raise StoreError(msg, code="STORE_NOT_CONFIGURED")
        self._conn_string = connection_string
        self._schema_name = schema_name
        self._table_name = table_name
        self._table = sql.Identifier(schema_name, table_name)

    @contextmanager
    def _connect(self) -> Iterator[psycopg.Connection[Any]]:
        """Open a connection; commit on clean exit, roll back on error, always close."""
        try:
            conn = psycopg.connect(self._conn_string, row_factory=dict_row)
        except psycopg.OperationalError as exc:
            msg = f"Cannot connect to PostgreSQL: {exc}"
            raise StoreConnectionError(msg) from exc

        try:
            with conn:
                yield conn
        except psycopg.Error as exc:
            logger.error("PostgreSQL error | type=%s | error=%s", type(exc).__name__, exc)
            msg = f"PostgreSQL operation failed: {exc}"
            raise StoreError(msg) from exc

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        with self._connect() as conn:
            yield _PostgisTransaction(conn, self._table)

    def ensure_schema(self) -> None:
        index_prefix = self._table_name
        statements = [
            sql.SQL(_CREATE_TABLE).format(table=self._table),
            sql.SQL(_CREATE_COURSE_INDEX).format(
                index=sql.Identifier(f"ix_{index_prefix}_course"), table=self._table
            ),
            sql.SQL(_CREATE_GEOG_INDEX).format(
                index=sql.Identifier(f"ix_{index_prefix}_geog"), table=self._table
            ),
        ]
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute("CREATE EXTENSION IF NOT EXISTS postgis")
            for statement in statements:
                cur.execute(statement)
        logger.info("PostGIS schema ensured | table=%s.%s", self._schema_name, self._table_name)

    def _fetch(self, query: sql.Composable, params: list[object]) -> list[dict[str, Any]]:
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute(query, params)
            return list(cur.fetchall())

    # ------------------------------------------------------------------
    # Validation reads
    # ------------------------------------------------------------------

    def fetch_boundaries(self, course_id: str) -> list[StoredFeature]:
        query = sql.SQL(
            "SELECT feature_type, name, ST_AsText(geog) AS wkt FROM {table} "
            "WHERE course_id = %s AND feature_type = %s ORDER BY id"
        ).format(table=self._table)
        rows = self._fetch(query, [course_id, BOUNDARY_FEATURE_TYPE])
        return [StoredFeature(r["feature_type"], r["name"], r["wkt"]) for r in rows]

    def find_uncontained(self, course_id: str) -> list[StoredFeature]:
        # Empty boundary CTE -> the join yields nothing, so no containment check runs.
        query = sql.SQL(
            "WITH boundary AS ("
            " SELECT geog FROM {table} WHERE course_id = %s AND feature_type = %s"
            " ORDER BY id LIMIT 1) "
            "SELECT f.feature_type, f.name, ST_AsText(f.geog) AS wkt "
            "FROM {table} f CROSS JOIN boundary b "
            "WHERE f.course_id = %s AND f.feature_type <> %s "
            "AND NOT ST_Contains(b.geog::geometry, f.geog::geometry) "
            "ORDER BY f.id"
        ).format(table=self._table)
        rows = self._fetch(
            query, [course_id, BOUNDARY_FEATURE_TYPE, course_id, BOUNDARY_FEATURE_TYPE]
        )
        return [StoredFeature(r["feature_type"], r["name"], r["wkt"]) for r in rows]

    def count_features(self, course_id: str) -> int:
        query = sql.SQL("SELECT COUNT(*) AS total FROM {table} WHERE course_id = %s").format(
            table=self._table
        )
        rows = self._fetch(query, [course_id])
        return int(rows[0]["total"]) if rows else 0

    # ------------------------------------------------------------------
    # Point lookups
    # ------------------------------------------------------------------

    def features_containing(
        self,
        lon: float,
        lat: float,
        *,
        course_id: str | None = None,
        limit: int = 50,
    ) -> list[FeatureMatch]:
        filters, filter_params = _optional_filters(course_id, None)
        query = sql.SQL(
            "SELECT feature_type, name FROM {table} "
            "WHERE ST_Contains(geog::geometry, ST_SetSRID(ST_MakePoint(%s, %s), 4326))"
            "{filters} ORDER BY id LIMIT %s"
        ).format(table=self._table, filters=filters)
        rows = self._fetch(query, [lon, lat, *filter_params, limit])
        return [_match(r) for r in rows]

    def features_within(
        self,
        lon: float,
        lat: float,
        radius_m: float,
        *,
        feature_type: str | None = None,
        course_id: str | None = None,
        limit: int = 200,
    ) -> list[FeatureMatch]:
        filters, filter_params = _optional_filters(course_id, feature_type)
        query = sql.SQL(
            "WITH p AS (SELECT ST_SetSRID(ST_MakePoint(%s, %s), 4326)::geography AS g) "
            "SELECT feature_type, name, ST_Distance(geog, p.g) AS distance_m "
            "FROM {table}, p WHERE ST_DWithin(geog, p.g, %s){filters} "
            "ORDER BY distance_m ASC LIMIT %s"
        ).format(table=self._table, filters=filters)
        rows = self._fetch(query, [lon, lat, radius_m, *filter_params, limit])
        return [_match(r, with_distance=True) for r in rows]

    def nearest_feature(
        self,
        lon: float,
        lat: float,
        *,
        feature_type: str | None = None,
        course_id: str | None = None,
    ) -> FeatureMatch | None:
        filters, filter_params = _optional_filters(course_id, feature_type)
        query = sql.SQL(
            "WITH p AS (SELECT ST_SetSRID(ST_MakePoint(%s, %s), 4326)::geography AS g) "
            "SELECT feature_type, name, ST_Distance(geog, p.g) AS distance_m "
            "FROM {table}, p WHERE TRUE{filters} "
            "ORDER BY distance_m ASC LIMIT 1"
        ).format(table=self._table, filters=filters)
        rows = self._fetch(query, [lon, lat, *filter_params])
        return _match(rows[0], with_distance=True) if rows else None
