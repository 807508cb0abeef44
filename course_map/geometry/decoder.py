"""GeoJSON geometry decoder.

Turns a GeoJSON ``geometry`` node (``{"type": ..., "coordinates": ...}``)
into the coordinate model in ``course_map.models.geometry``.

Responsibilities:
- Coordinate checks (array of >= 2 finite numbers, altitude ignored)
- Point-count checks per geometry kind
- Polygon ring closure (idempotent)

Any failure aborts the whole import: there is no per-feature skip.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping

from course_map.core.constants import MIN_LINESTRING_POINTS, MIN_RING_POINTS
from course_map.core.exceptions import ValidationError
from course_map.models.geometry import (
    Coordinate,
    Geometry,
    LineStringGeometry,
    MultiPolygonGeometry,
    PointGeometry,
    PolygonGeometry,
    Ring,
)

logger = logging.getLogger("course_map.geometry.decoder")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GeometryDecodeError(ValidationError):
    """Raised when a GeoJSON geometry node cannot be decoded."""

    default_stage = "decode_geometry"
    default_code = "GEOMETRY_DECODE_FAILED"


class UnsupportedGeometryTypeError(GeometryDecodeError):
    """Raised when the geometry type tag is missing or not supported."""

    default_code = "GEOMETRY_UNSUPPORTED_TYPE"


class MalformedCoordinateError(GeometryDecodeError):
    """Raised when a coordinate is not an array of >= 2 finite numbers."""

    default_code = "GEOMETRY_MALFORMED_COORDINATE"


class InsufficientPointsError(GeometryDecodeError):
    """Raised when a line or ring has too few points."""

    default_code = "GEOMETRY_INSUFFICIENT_POINTS"


class EmptyGeometryError(GeometryDecodeError):
    """Raised when a polygon has no rings or a multipolygon has no polygons."""

    default_code = "GEOMETRY_EMPTY"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

SUPPORTED_GEOMETRY_TYPES = ("Point", "LineString", "Polygon", "MultiPolygon")


def decode_geometry(node: object, *, context: str = "geometry") -> Geometry:
    """Decode a GeoJSON geometry node.

    Args:
        node: The ``geometry`` member of a GeoJSON feature.
        context: Label used in error messages (e.g. ``"feature #3 'Green 1'"``).

    Returns:
        The decoded coordinate model.

    Raises:
        UnsupportedGeometryTypeError: Missing or unknown ``type``.
        MalformedCoordinateError: Bad coordinate structure.
        InsufficientPointsError: Too few points for the geometry kind.
        EmptyGeometryError: Polygon without rings / MultiPolygon without polygons.
    """
    if not isinstance(node, Mapping):
        msg = f"Geometry is missing or not an object in {context}"
        raise UnsupportedGeometryTypeError(msg)

    geom_type = node.get("type")
    decoder = _DECODERS.get(geom_type) if isinstance(geom_type, str) else None
    if decoder is None:
        msg = (
            f"Unsupported geometry type {geom_type!r} in {context}; "
            f"expected one of {', '.join(SUPPORTED_GEOMETRY_TYPES)}"
        )
        raise UnsupportedGeometryTypeError(msg)

    return decoder(node.get("coordinates"), context)


def read_lon_lat(coord: object, context: str = "geometry") -> Coordinate:
    """Read a GeoJSON position as a ``(lon, lat)`` tuple.

    Positions may carry extra ordinates (altitude); only the first two are kept.

    Raises:
        MalformedCoordinateError: If *coord* is not an array of >= 2 finite numbers.
    """
    if not isinstance(coord, list | tuple) or len(coord) < 2:
        msg = f"Invalid coordinate {coord!r} (expected [lon, lat]) in {context}"
        raise MalformedCoordinateError(msg)

    ordinates: list[float] = []
    for value in (coord[0], coord[1]):
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"Invalid coordinate {coord!r} (non-numeric ordinate) in {context}"
            raise MalformedCoordinateError(msg)
        try:
            number = float(value)
        except OverflowError as exc:
            msg = f"Invalid coordinate in {context} (ordinate out of float range)"
            raise MalformedCoordinateError(msg) from exc
        if not math.isfinite(number):
            msg = f"Invalid coordinate {coord!r} (non-finite ordinate) in {context}"
            raise MalformedCoordinateError(msg)
        ordinates.append(number)

    return (ordinates[0], ordinates[1])


def close_ring(coords: list[Coordinate]) -> list[Coordinate]:
    """Return *coords* with the first position appended if the ring is open.

    Idempotent: an already-closed ring is returned unchanged.
    """
    if coords and coords[0] != coords[-1]:
        return [*coords, coords[0]]
    return list(coords)


# ---------------------------------------------------------------------------
# Per-type decoders
# ---------------------------------------------------------------------------


def _require_list(value: object, what: str, context: str) -> list[object]:
    if not isinstance(value, list | tuple):
        msg = f"{what} must be an array, got {type(value).__name__} in {context}"
        raise MalformedCoordinateError(msg)
    return list(value)


def _decode_point(coordinates: object, context: str) -> PointGeometry:
    return PointGeometry(coordinate=read_lon_lat(coordinates, context))


def _decode_linestring(coordinates: object, context: str) -> LineStringGeometry:
    positions = _require_list(coordinates, "LineString coordinates", context)
    points = [read_lon_lat(c, context) for c in positions]
    if len(points) < MIN_LINESTRING_POINTS:
        msg = (
            f"LineString has {len(points)} point(s), needs at least "
            f"{MIN_LINESTRING_POINTS} in {context}"
        )
        raise InsufficientPointsError(msg)
    return LineStringGeometry(coordinates=points)


def _decode_ring(raw_ring: object, context: str) -> Ring:
    positions = _require_list(raw_ring, "Polygon ring", context)
    points = [read_lon_lat(c, context) for c in positions]

    closed = close_ring(points)
    if len(closed) != len(points):
        logger.debug("Auto-closing unclosed ring in %s", context)

    if len(closed) < MIN_RING_POINTS:
        msg = (
            f"Polygon ring has {len(closed)} point(s) after closure, needs at least "
            f"{MIN_RING_POINTS} in {context}"
        )
        raise InsufficientPointsError(msg)
    return closed


def _decode_polygon(coordinates: object, context: str) -> PolygonGeometry:
    raw_rings = _require_list(coordinates, "Polygon coordinates", context)
    if not raw_rings:
        msg = f"Polygon requires at least one ring in {context}"
        raise EmptyGeometryError(msg)
    return PolygonGeometry(rings=[_decode_ring(r, context) for r in raw_rings])


def _decode_multipolygon(coordinates: object, context: str) -> MultiPolygonGeometry:
    raw_polygons = _require_list(coordinates, "MultiPolygon coordinates", context)
    if not raw_polygons:
        msg = f"MultiPolygon requires at least one polygon in {context}"
        raise EmptyGeometryError(msg)
    return MultiPolygonGeometry(polygons=[_decode_polygon(p, context) for p in raw_polygons])


_DECODERS: dict[str, Callable[[object, str], Geometry]] = {
    "Point": _decode_point,
    "LineString": _decode_linestring,
    "Polygon": _decode_polygon,
    "MultiPolygon": _decode_multipolygon,
}
