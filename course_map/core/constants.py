"""Shared pipeline constants.

Reserved feature types, geometry limits, violation codes, and the exit
statuses used by the command-line importer.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Feature types
# ---------------------------------------------------------------------------

BOUNDARY_FEATURE_TYPE: str = "boundary"
"""Reserved feature type for a course's outer perimeter."""

UNKNOWN_FEATURE_TYPE: str = "unknown"
"""Feature type stamped on features whose properties carry none."""

DEFAULT_COURSE_ID: str = "demo-course"

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

WGS84_SRID: int = 4326
WGS84_CRS: str = "EPSG:4326"

MIN_LINESTRING_POINTS: int = 2
MIN_RING_POINTS: int = 4
"""Minimum ring size after closure (triangle + closing vertex)."""

DEFAULT_SIMPLIFY_EPSILON_M: float = 2.0

# ---------------------------------------------------------------------------
# Documents and artifacts
# ---------------------------------------------------------------------------

FEATURE_COLLECTION: str = "FeatureCollection"

DEFAULT_ARTIFACTS_DIR: str = "artifacts"
REPORT_FILENAME: str = "validation_report.json"

# ---------------------------------------------------------------------------
# Validation report codes
# ---------------------------------------------------------------------------

VIOLATION_BOUNDARY_COUNT: str = "BOUNDARY_COUNT"
VIOLATION_OUTSIDE_BOUNDARY: str = "OUTSIDE_BOUNDARY"

# ---------------------------------------------------------------------------
# Query limits
# ---------------------------------------------------------------------------

CONTAINS_RESULT_LIMIT: int = 50
WITHIN_RESULT_LIMIT: int = 200

# ---------------------------------------------------------------------------
# Process exit statuses
# ---------------------------------------------------------------------------

EXIT_OK: int = 0
EXIT_FAILURE: int = 1
EXIT_VIOLATIONS: int = 2
