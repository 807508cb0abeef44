"""Tests for the GeoJSON geometry decoder.

Covers each supported geometry type, ring auto-closure, altitude
stripping, and every decode failure class.
"""

from __future__ import annotations

import json
import math

import pytest

from course_map.geometry.decoder import (
    EmptyGeometryError,
    InsufficientPointsError,
    MalformedCoordinateError,
    UnsupportedGeometryTypeError,
    close_ring,
    decode_geometry,
    read_lon_lat,
)
from course_map.models.geometry import (
    LineStringGeometry,
    MultiPolygonGeometry,
    PointGeometry,
    PolygonGeometry,
)

OPEN_SQUARE = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]


class TestReadLonLat:
    def test_plain_pair(self) -> None:
        assert read_lon_lat([-94.5772, 39.1007]) == (-94.5772, 39.1007)

    def test_altitude_ignored(self) -> None:
        assert read_lon_lat([-94.5, 39.1, 280.0]) == (-94.5, 39.1)

    def test_ints_become_floats(self) -> None:
        lon, lat = read_lon_lat([1, 2])
        assert isinstance(lon, float)
        assert isinstance(lat, float)

    @pytest.mark.parametrize(
        "coord",
        [
            [1.0],
            [],
            "1,2",
            None,
            ["1", 2.0],
            [True, 2.0],
            [math.nan, 2.0],
            [1.0, math.inf],
            [10**400, 0],
            [0, -(10**400)],
        ],
    )
    def test_malformed(self, coord: object) -> None:
        with pytest.raises(MalformedCoordinateError):
            read_lon_lat(coord, "feature #0")


class TestCloseRing:
    def test_appends_first_position(self) -> None:
        ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        assert close_ring(ring) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)]

    def test_idempotent(self) -> None:
        ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        once = close_ring(ring)
        assert close_ring(once) == once

    def test_empty(self) -> None:
        assert close_ring([]) == []


class TestDecodePoint:
    def test_point(self) -> None:
        geom = decode_geometry({"type": "Point", "coordinates": [-94.5772, 39.1007]})
        assert geom == PointGeometry(coordinate=(-94.5772, 39.1007))

    def test_integer_too_large_for_float(self) -> None:
        node = json.loads('{"type": "Point", "coordinates": [1' + "0" * 400 + ", 0]}")
        with pytest.raises(MalformedCoordinateError, match="out of float range"):
            decode_geometry(node)

    def test_point_with_bad_coordinate(self) -> None:
        with pytest.raises(MalformedCoordinateError):
            decode_geometry({"type": "Point", "coordinates": [-94.5]})


class TestDecodeLineString:
    def test_linestring(self) -> None:
        geom = decode_geometry({"type": "LineString", "coordinates": [[0, 0], [1, 1], [2, 0]]})
        assert isinstance(geom, LineStringGeometry)
        assert geom.coordinates == [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)]
        assert geom.longitudes == [0.0, 1.0, 2.0]
        assert geom.latitudes == [0.0, 1.0, 0.0]

    def test_single_point_rejected(self) -> None:
        with pytest.raises(InsufficientPointsError):
            decode_geometry({"type": "LineString", "coordinates": [[0, 0]]})

    def test_coordinates_not_array(self) -> None:
        with pytest.raises(MalformedCoordinateError):
            decode_geometry({"type": "LineString", "coordinates": {"x": 1}})


class TestDecodePolygon:
    def test_open_ring_is_closed(self) -> None:
        geom = decode_geometry({"type": "Polygon", "coordinates": [OPEN_SQUARE]})
        assert isinstance(geom, PolygonGeometry)
        assert len(geom.exterior) == 5
        assert geom.exterior[0] == geom.exterior[-1]

    def test_closed_ring_unchanged(self) -> None:
        closed = [*OPEN_SQUARE, OPEN_SQUARE[0]]
        geom = decode_geometry({"type": "Polygon", "coordinates": [closed]})
        assert len(geom.exterior) == 5  # type: ignore[union-attr]

    def test_holes_keep_order(self) -> None:
        hole = [[0.2, 0.2], [0.4, 0.2], [0.4, 0.4], [0.2, 0.2]]
        geom = decode_geometry({"type": "Polygon", "coordinates": [OPEN_SQUARE, hole]})
        assert isinstance(geom, PolygonGeometry)
        assert len(geom.interiors) == 1
        assert geom.interiors[0][0] == (0.2, 0.2)

    def test_no_rings(self) -> None:
        with pytest.raises(EmptyGeometryError):
            decode_geometry({"type": "Polygon", "coordinates": []})

    def test_triangle_after_closure_is_enough(self) -> None:
        geom = decode_geometry({"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1]]]})
        assert len(geom.exterior) == 4  # type: ignore[union-attr]

    def test_too_few_points(self) -> None:
        with pytest.raises(InsufficientPointsError):
            decode_geometry({"type": "Polygon", "coordinates": [[[0, 0], [1, 0]]]})


class TestDecodeMultiPolygon:
    def test_multipolygon(self) -> None:
        second = [[[5, 5], [6, 5], [6, 6], [5, 5]]]
        geom = decode_geometry({"type": "MultiPolygon", "coordinates": [[OPEN_SQUARE], second]})
        assert isinstance(geom, MultiPolygonGeometry)
        assert len(geom.polygons) == 2
        assert geom.polygons[0].exterior[-1] == (0.0, 0.0)
        assert geom.polygons[1].exterior[0] == (5.0, 5.0)

    def test_no_polygons(self) -> None:
        with pytest.raises(EmptyGeometryError):
            decode_geometry({"type": "MultiPolygon", "coordinates": []})

    def test_empty_member_polygon(self) -> None:
        with pytest.raises(EmptyGeometryError):
            decode_geometry({"type": "MultiPolygon", "coordinates": [[]]})


class TestUnsupported:
    @pytest.mark.parametrize(
        "node",
        [
            None,
            [],
            {"coordinates": [0, 0]},
            {"type": "GeometryCollection", "geometries": []},
            {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]]]},
            {"type": 7, "coordinates": [0, 0]},
        ],
    )
    def test_unsupported(self, node: object) -> None:
        with pytest.raises(UnsupportedGeometryTypeError):
            decode_geometry(node)

    def test_context_in_message(self) -> None:
        with pytest.raises(UnsupportedGeometryTypeError, match="feature #3 'Green 1'"):
            decode_geometry({"type": "Circle"}, context="feature #3 'Green 1'")
