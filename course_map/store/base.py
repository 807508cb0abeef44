"""SpatialStore abstract base class.

The pipeline never computes geometric predicates itself.  Containment and
distance are delegated to a store adapter through this interface:

- ``transaction()``       - one atomic unit of deletes and inserts.
- ``fetch_boundaries``    - the course's ``boundary`` rows.
- ``find_uncontained``    - non-boundary rows not strictly inside the boundary.
- ``count_features``      - number of rows for a course.
- ``features_containing`` / ``features_within`` / ``nearest_feature``
  - the point lookups behind the query endpoints.

Concrete adapters: ``MemoryStore`` (shapely, in-process) and
``PostgisStore`` (PostgreSQL + PostGIS via psycopg).
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from course_map.models.feature import FeatureMatch, FeatureRow, StoredFeature


class StoreTransaction(abc.ABC):
    """Write operations available inside ``SpatialStore.transaction()``."""

    @abc.abstractmethod
    def delete_course(self, course_id: str) -> int:
        """Delete every row for *course_id*; return the number deleted."""

    @abc.abstractmethod
    def insert_feature(self, row: FeatureRow) -> None:
        """Stage one row for insertion.

        Raises:
            StoreError: If the store rejects the row (e.g. unparseable WKT).
        """


class SpatialStore(abc.ABC):
    """Abstract base class for spatial store adapters.

    Example usage::

        store = get_store(config)
        with store.transaction() as tx:
            tx.delete_course("demo-course")
            tx.insert_feature(row)
        report_rows = store.fetch_boundaries("demo-course")
    """

    #: Registry name of the adapter.
    name: str = ""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def transaction(self) -> AbstractContextManager[StoreTransaction]:
        """Open an atomic unit of work.

        Commits when the block exits cleanly.  Any exception (including
        ``KeyboardInterrupt``) rolls back every delete and insert made in
        the block and is re-raised.
        """

    def ensure_schema(self) -> None:  # noqa: B027
        """Create the backing table and indexes if the adapter needs them."""

    # ------------------------------------------------------------------
    # Validation reads
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def fetch_boundaries(self, course_id: str) -> list[StoredFeature]:
        """Return the course's ``boundary`` rows in store order."""

    @abc.abstractmethod
    def find_uncontained(self, course_id: str) -> list[StoredFeature]:
        """Return non-boundary rows not strictly contained by the first boundary.

        Returns an empty list when the course has no boundary.
        """

    @abc.abstractmethod
    def count_features(self, course_id: str) -> int:
        """Return the number of rows stored for *course_id*."""

    # ------------------------------------------------------------------
    # Point lookups
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def features_containing(
        self,
        lon: float,
        lat: float,
        *,
        course_id: str | None = None,
        limit: int = 50,
    ) -> list[FeatureMatch]:
        """Return features whose geometry contains the point."""

    @abc.abstractmethod
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
        """Return features within *radius_m* metres, nearest first."""

    @abc.abstractmethod
    def nearest_feature(
        self,
        lon: float,
        lat: float,
        *,
        feature_type: str | None = None,
        course_id: str | None = None,
    ) -> FeatureMatch | None:
        """Return the single nearest feature, or ``None`` if there is none."""
