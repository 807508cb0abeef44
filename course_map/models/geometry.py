"""In-memory coordinate model for decoded GeoJSON geometry.

Every coordinate is a ``(lon, lat)`` tuple of floats in WGS 84.  The
decoder guarantees the structural invariants (minimum point counts, closed
polygon rings) before instances reach the simplifier or the WKT encoder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

Coordinate = tuple[float, float]
Ring = list[Coordinate]


@dataclass(frozen=True, slots=True)
class PointGeometry:
    """A single ``(lon, lat)`` position."""

    geom_type: ClassVar[str] = "Point"

    coordinate: Coordinate


@dataclass(frozen=True, slots=True)
class LineStringGeometry:
    """An ordered sequence of at least two positions."""

    geom_type: ClassVar[str] = "LineString"

    coordinates: list[Coordinate] = field(default_factory=list)

    @property
    def longitudes(self) -> list[float]:
        return [c[0] for c in self.coordinates]

    @property
    def latitudes(self) -> list[float]:
        return [c[1] for c in self.coordinates]


@dataclass(frozen=True, slots=True)
class PolygonGeometry:
    """Ordered rings; the first is the exterior, the rest are holes.

    Every ring is closed (first position equals last) and holds at least
    four positions.
    """

    geom_type: ClassVar[str] = "Polygon"

    rings: list[Ring] = field(default_factory=list)

    @property
    def exterior(self) -> Ring:
        return self.rings[0]

    @property
    def interiors(self) -> list[Ring]:
        return self.rings[1:]


@dataclass(frozen=True, slots=True)
class MultiPolygonGeometry:
    """An ordered, non-empty sequence of polygons."""

    geom_type: ClassVar[str] = "MultiPolygon"

    polygons: list[PolygonGeometry] = field(default_factory=list)


Geometry = Union[PointGeometry, LineStringGeometry, PolygonGeometry, MultiPolygonGeometry]
