"""WKT encoding and decoding for the coordinate model.

The encoder output is parsed verbatim by the spatial store, so numbers are
written in a fixed, locale-independent decimal form: no exponent, no
grouping separators, ``.`` as the decimal point, and the shortest digits
that round-trip the float exactly.

Ring and polygon order mirror the input.  No winding correction is done.
"""

from __future__ import annotations

from decimal import Decimal

from course_map.core.exceptions import ValidationError
from course_map.models.geometry import (
    Coordinate,
    Geometry,
    LineStringGeometry,
    MultiPolygonGeometry,
    PointGeometry,
    PolygonGeometry,
)


class WktParseError(ValidationError):
    """Raised when WKT text cannot be read back into the coordinate model."""

    default_stage = "wkt"
    default_code = "WKT_PARSE_FAILED"


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def format_number(value: float) -> str:
    """Format a float as fixed-point decimal text.

    >>> format_number(-94.5772)
    '-94.5772'
    >>> format_number(1e-05)
    '0.00001'
    """
    return format(Decimal(repr(float(value))), "f")


def _position(coord: Coordinate) -> str:
    return f"{format_number(coord[0])} {format_number(coord[1])}"


def _sequence(coords: list[Coordinate]) -> str:
    return "(" + ", ".join(_position(c) for c in coords) + ")"


def _polygon_body(polygon: PolygonGeometry) -> str:
    return "(" + ", ".join(_sequence(ring) for ring in polygon.rings) + ")"


def encode_wkt(geometry: Geometry) -> str:
    """Render a decoded geometry as WKT.

    Raises:
        TypeError: If *geometry* is not one of the model geometry types.
    """
    if isinstance(geometry, PointGeometry):
        return f"POINT({_position(geometry.coordinate)})"
    if isinstance(geometry, LineStringGeometry):
        return f"LINESTRING{_sequence(geometry.coordinates)}"
    if isinstance(geometry, PolygonGeometry):
        return f"POLYGON{_polygon_body(geometry)}"
    if isinstance(geometry, MultiPolygonGeometry):
        return "MULTIPOLYGON(" + ", ".join(_polygon_body(p) for p in geometry.polygons) + ")"

    msg = f"Cannot encode {type(geometry).__name__} as WKT"
    raise TypeError(msg)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _xy(coords: object) -> list[Coordinate]:
    return [(float(c[0]), float(c[1])) for c in coords]  # type: ignore[attr-defined]


def _from_shapely_polygon(poly: object) -> PolygonGeometry:
    rings = [_xy(poly.exterior.coords)]  # type: ignore[attr-defined]
    rings.extend(_xy(interior.coords) for interior in poly.interiors)  # type: ignore[attr-defined]
    return PolygonGeometry(rings=rings)


def parse_wkt(text: str) -> Geometry:
    """Parse WKT text back into the coordinate model.

    Supports the same four types the encoder produces.

    Raises:
        WktParseError: If the text is not valid WKT or holds another type.
    """
    from shapely import wkt as shapely_wkt
    from shapely.errors import ShapelyError

    try:
        shape = shapely_wkt.loads(text)
    except (ShapelyError, ValueError, TypeError) as exc:
        msg = f"Not valid WKT: {exc}"
        raise WktParseError(msg) from exc

    if shape.is_empty:
        msg = f"WKT geometry is empty: {text[:60]!r}"
        raise WktParseError(msg)

    geom_type = shape.geom_type
    if geom_type == "Point":
        return PointGeometry(coordinate=(float(shape.x), float(shape.y)))
    if geom_type == "LineString":
        return LineStringGeometry(coordinates=_xy(shape.coords))
    if geom_type == "Polygon":
        return _from_shapely_polygon(shape)
    if geom_type == "MultiPolygon":
        return MultiPolygonGeometry(polygons=[_from_shapely_polygon(p) for p in shape.geoms])

    msg = f"Unsupported WKT geometry type: {geom_type}"
    raise WktParseError(msg)
