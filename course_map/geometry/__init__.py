"""Geometry decoding, WKT encoding, and projection helpers.

- decoder: GeoJSON geometry node -> coordinate model (ring closure, point counts)
- wkt: coordinate model <-> WKT text
- projection: UTM zone selection and geodesic distance
"""

from course_map.geometry.decoder import (
    EmptyGeometryError,
    GeometryDecodeError,
    InsufficientPointsError,
    MalformedCoordinateError,
    UnsupportedGeometryTypeError,
    close_ring,
    decode_geometry,
    read_lon_lat,
)
from course_map.geometry.wkt import WktParseError, encode_wkt, format_number, parse_wkt

__all__ = [
    "EmptyGeometryError",
    "GeometryDecodeError",
    "InsufficientPointsError",
    "MalformedCoordinateError",
    "UnsupportedGeometryTypeError",
    "WktParseError",
    "close_ring",
    "decode_geometry",
    "encode_wkt",
    "format_number",
    "parse_wkt",
    "read_lon_lat",
]
