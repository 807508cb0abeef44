"""Projection and geodesic helpers shared by the simplifier and the memory store."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from course_map.core.constants import WGS84_CRS

if TYPE_CHECKING:
    from pyproj import Geod, Transformer


def utm_crs_for(lon: float, lat: float) -> str:
    """Determine the UTM CRS for a given WGS 84 coordinate.

    Returns an EPSG code like ``"EPSG:32615"`` (UTM zone 15N) or
    ``"EPSG:32715"`` (UTM zone 15S).
    """
    # UTM zone number: 1-based, 6° wide, starting at -180°
    zone_number = int((lon + 180) / 6) + 1
    zone_number = max(1, min(60, zone_number))

    if lat >= 0:
        return f"EPSG:{32600 + zone_number}"
    return f"EPSG:{32700 + zone_number}"


@lru_cache(maxsize=32)
def utm_transformers(utm_crs: str) -> tuple[Transformer, Transformer]:
    """Return ``(to_utm, to_wgs84)`` transformers for *utm_crs*, both ``always_xy``."""
    from pyproj import Transformer

    to_utm = Transformer.from_crs(WGS84_CRS, utm_crs, always_xy=True)
    to_wgs = Transformer.from_crs(utm_crs, WGS84_CRS, always_xy=True)
    return to_utm, to_wgs


@lru_cache(maxsize=1)
def _wgs84_geod() -> Geod:
    from pyproj import Geod

    return Geod(ellps="WGS84")


def geodesic_distance_m(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Geodesic distance in metres between two WGS 84 positions."""
    _az12, _az21, distance = _wgs84_geod().inv(lon1, lat1, lon2, lat2)
    return float(distance)
