"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- Geometry: Decoded coordinate model (Point, LineString, Polygon, MultiPolygon)
- FeatureRow: A feature staged for insertion into the spatial store
- StoredFeature / FeatureMatch: Rows read back by the validator and queries
- ValidationReport: Post-import structural validation report
"""

from course_map.models.feature import FeatureMatch, FeatureRow, StoredFeature
from course_map.models.geometry import (
    Coordinate,
    Geometry,
    LineStringGeometry,
    MultiPolygonGeometry,
    PointGeometry,
    PolygonGeometry,
)
from course_map.models.report import ValidationReport, Violation

__all__ = [
    "Coordinate",
    "FeatureMatch",
    "FeatureRow",
    "Geometry",
    "LineStringGeometry",
    "MultiPolygonGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "StoredFeature",
    "ValidationReport",
    "Violation",
]
