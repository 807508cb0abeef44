"""Course feature lookups behind the HTTP query endpoints.

Pure pass-through to the spatial store: this module only checks request
parameters and shapes results into JSON-ready dicts.

Endpoints served:
- contains: features whose geometry contains a point
- within:   features within a radius of a point, nearest first
- nearest:  the single nearest feature, or not found
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING

from course_map.core.constants import CONTAINS_RESULT_LIMIT, WITHIN_RESULT_LIMIT
from course_map.core.exceptions import ValidationError

if TYPE_CHECKING:
    from course_map.store.base import SpatialStore

logger = logging.getLogger("course_map.query.service")


class QueryParameterError(ValidationError):
    """Raised when a query parameter is missing or out of range."""

    default_stage = "query"
    default_code = "QUERY_PARAMETER_INVALID"


# ---------------------------------------------------------------------------
# Parameter parsing
# ---------------------------------------------------------------------------


def _float_param(params: Mapping[str, str], key: str) -> float:
    raw = params.get(key)
    if raw is None or raw == "":
        msg = f"Missing required query parameter '{key}'"
        raise QueryParameterError(msg)
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"Query parameter '{key}' must be a number, got {raw!r}"
        raise QueryParameterError(msg) from exc
    if not math.isfinite(value):
        msg = f"Query parameter '{key}' must be finite, got {raw!r}"
        raise QueryParameterError(msg)
    return value


def parse_point(params: Mapping[str, str]) -> tuple[float, float]:
    """Read ``lon`` / ``lat`` from request parameters.

    Returns:
        ``(lon, lat)``.

    Raises:
        QueryParameterError: Missing, non-numeric, or outside WGS 84 bounds.
    """
    lon = _float_param(params, "lon")
    lat = _float_param(params, "lat")
    if not -180.0 <= lon <= 180.0:
        msg = f"lon {lon} outside [-180, 180]"
        raise QueryParameterError(msg)
    if not -90.0 <= lat <= 90.0:
        msg = f"lat {lat} outside [-90, 90]"
        raise QueryParameterError(msg)
    return lon, lat


def parse_radius(params: Mapping[str, str]) -> float:
    """Read ``radiusMeters`` (>= 0) from request parameters."""
    radius = _float_param(params, "radiusMeters")
    if radius < 0:
        msg = f"radiusMeters must be >= 0, got {radius}"
        raise QueryParameterError(msg)
    return radius


def optional_param(params: Mapping[str, str], key: str) -> str | None:
    """Return a non-empty string parameter or ``None``."""
    value = params.get(key)
    return value if value else None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CourseQueryService:
    """Point, radius, and nearest-feature lookups over a spatial store."""

    def __init__(self, store: SpatialStore) -> None:
        self._store = store

    def contains(
        self,
        lon: float,
        lat: float,
        *,
        course_id: str | None = None,
    ) -> list[dict[str, object]]:
        matches = self._store.features_containing(
            lon, lat, course_id=course_id, limit=CONTAINS_RESULT_LIMIT
        )
        logger.debug("contains | lon=%s | lat=%s | hits=%d", lon, lat, len(matches))
        return [m.to_dict() for m in matches]

    def within(
        self,
        lon: float,
        lat: float,
        radius_m: float,
        *,
        feature_type: str | None = None,
        course_id: str | None = None,
    ) -> list[dict[str, object]]:
        matches = self._store.features_within(
            lon,
            lat,
            radius_m,
            feature_type=feature_type,
            course_id=course_id,
            limit=WITHIN_RESULT_LIMIT,
        )
        logger.debug(
            "within | lon=%s | lat=%s | radius_m=%s | hits=%d", lon, lat, radius_m, len(matches)
        )
        return [m.to_dict() for m in matches]

    def nearest(
        self,
        lon: float,
        lat: float,
        *,
        feature_type: str | None = None,
        course_id: str | None = None,
    ) -> dict[str, object] | None:
        match = self._store.nearest_feature(
            lon, lat, feature_type=feature_type, course_id=course_id
        )
        return match.to_dict() if match is not None else None
