"""In-process spatial store backed by shapely.

Keeps rows in a list in insertion order and evaluates predicates with
shapely (planar, on lon/lat) and distances with pyproj on the WGS 84
ellipsoid.  Used by the test suite and for local dry runs
(``COURSEMAP_STORE=memory``): nothing survives the process.

Transactions work on a copy of the row list that replaces the live list
only on a clean exit.  A lock held for the whole transaction serialises
concurrent writers.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from course_map.core.constants import BOUNDARY_FEATURE_TYPE
from course_map.core.exceptions import StoreError
from course_map.geometry.projection import geodesic_distance_m
from course_map.models.feature import FeatureMatch, FeatureRow, StoredFeature
from course_map.store.base import SpatialStore, StoreTransaction

if TYPE_CHECKING:
    from collections.abc import Iterator

    from shapely.geometry.base import BaseGeometry

logger = logging.getLogger("course_map.store.memory")


@dataclass(frozen=True, slots=True)
class _Record:
    row: FeatureRow
    shape: BaseGeometry


def _load_shape(wkt: str) -> BaseGeometry:
    from shapely import wkt as shapely_wkt
    from shapely.errors import ShapelyError

    try:
        return shapely_wkt.loads(wkt)
    except (ShapelyError, ValueError) as exc:
        msg = f"Store rejected WKT {wkt[:60]!r}: {exc}"
        raise StoreError(msg, code="STORE_INVALID_GEOMETRY") from exc


class _MemoryTransaction(StoreTransaction):
    def __init__(self, records: list[_Record]) -> None:
        self._records = records

    def delete_course(self, course_id: str) -> int:
        before = len(self._records)
        self._records[:] = [r for r in self._records if r.row.course_id != course_id]
        return before - len(self._records)

    def insert_feature(self, row: FeatureRow) -> None:
        self._records.append(_Record(row=row, shape=_load_shape(row.wkt)))


class MemoryStore(SpatialStore):
    """Shapely-backed store living in process memory."""

    name = "memory"

    def __init__(self) -> None:
        self._records: list[_Record] = []
        self._write_lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        with self._write_lock:
            working = list(self._records)
            yield _MemoryTransaction(working)
            self._records = working
            logger.debug("Memory store committed | rows=%d", len(working))

    def rows(self, course_id: str | None = None) -> list[FeatureRow]:
        """Return the committed rows, optionally for one course."""
        return [
            r.row for r in self._records if course_id is None or r.row.course_id == course_id
        ]

    # ------------------------------------------------------------------
    # Validation reads
    # ------------------------------------------------------------------

    def _course_records(self, course_id: str) -> list[_Record]:
        return [r for r in self._records if r.row.course_id == course_id]

    def fetch_boundaries(self, course_id: str) -> list[StoredFeature]:
        return [
            StoredFeature(feature_type=r.row.feature_type, name=r.row.name, wkt=r.row.wkt)
            for r in self._course_records(course_id)
            if r.row.feature_type == BOUNDARY_FEATURE_TYPE
        ]

    def find_uncontained(self, course_id: str) -> list[StoredFeature]:
        records = self._course_records(course_id)
        boundary = next(
            (r for r in records if r.row.feature_type == BOUNDARY_FEATURE_TYPE), None
        )
        if boundary is None:
            return []

        return [
            StoredFeature(feature_type=r.row.feature_type, name=r.row.name, wkt=r.row.wkt)
            for r in records
            if r.row.feature_type != BOUNDARY_FEATURE_TYPE and not boundary.shape.contains(r.shape)
        ]

    def count_features(self, course_id: str) -> int:
        return len(self._course_records(course_id))

    # ------------------------------------------------------------------
    # Point lookups
    # ------------------------------------------------------------------

    def _candidates(self, course_id: str | None, feature_type: str | None) -> list[_Record]:
        return [
            r
            for r in self._records
            if (course_id is None or r.row.course_id == course_id)
            and (feature_type is None or r.row.feature_type == feature_type)
        ]

    def features_containing(
        self,
        lon: float,
        lat: float,
        *,
        course_id: str | None = None,
        limit: int = 50,
    ) -> list[FeatureMatch]:
        from shapely.geometry import Point

        point = Point(lon, lat)
        hits = [
            FeatureMatch(feature_type=r.row.feature_type, name=r.row.name)
            for r in self._candidates(course_id, None)
            if r.shape.contains(point)
        ]
        return hits[:limit]

    def _ranked(
        self,
        lon: float,
        lat: float,
        course_id: str | None,
        feature_type: str | None,
    ) -> list[FeatureMatch]:
        matches = [
            FeatureMatch(
                feature_type=r.row.feature_type,
                name=r.row.name,
                distance_m=_distance_m(r.shape, lon, lat),
            )
            for r in self._candidates(course_id, feature_type)
        ]
        matches.sort(key=lambda m: m.distance_m or 0.0)
        return matches

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
        ranked = self._ranked(lon, lat, course_id, feature_type)
        return [m for m in ranked if (m.distance_m or 0.0) <= radius_m][:limit]

    def nearest_feature(
        self,
        lon: float,
        lat: float,
        *,
        feature_type: str | None = None,
        course_id: str | None = None,
    ) -> FeatureMatch | None:
        ranked = self._ranked(lon, lat, course_id, feature_type)
        return ranked[0] if ranked else None


def _distance_m(shape: BaseGeometry, lon: float, lat: float) -> float:
    """Geodesic distance from the point to the closest part of *shape* (0 if touching)."""
    from shapely.geometry import Point
    from shapely.ops import nearest_points

    point = Point(lon, lat)
    if shape.intersects(point):
        return 0.0
    closest, _ = nearest_points(shape, point)
    return geodesic_distance_m(lon, lat, closest.x, closest.y)
