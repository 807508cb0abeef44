"""Polyline simplifier bridge.

Calls a ``LineSimplifier`` on LineString coordinates and applies the
fallback policy: when the routine cannot produce a usable line, the
original coordinates are kept.  That fallback is normal behaviour and is
never raised as an error.

The bridge holds no state, so independent features may be simplified
concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from course_map.core.constants import MIN_LINESTRING_POINTS
from course_map.core.exceptions import ContractError
from course_map.models.geometry import Geometry, LineStringGeometry

if TYPE_CHECKING:
    from course_map.simplify.base import LineSimplifier

logger = logging.getLogger("course_map.simplify.bridge")


class CoordinateArityMismatchError(ContractError):
    """Raised when parallel lon/lat arrays differ in length."""

    default_stage = "simplify"
    default_code = "SIMPLIFY_ARITY_MISMATCH"


def simplify_line(
    lon: Sequence[float],
    lat: Sequence[float],
    epsilon_m: float,
    simplifier: LineSimplifier,
) -> tuple[list[float], list[float]]:
    """Simplify parallel lon/lat arrays, falling back to the input when degenerate.

    Args:
        lon: Longitudes.
        lat: Latitudes, same length as *lon*.
        epsilon_m: Tolerance in metres.
        simplifier: The routine to call.

    Returns:
        ``(lon', lat')``.  Inputs with fewer than two points are returned
        unchanged without calling the routine.  If the routine returns fewer
        than two distinct points (e.g. a small closed loop collapsed onto its
        start), the input is returned unchanged.

    Raises:
        CoordinateArityMismatchError: If input or output arrays differ in length.
    """
    if len(lon) != len(lat):
        msg = f"lon/lat length mismatch: {len(lon)} != {len(lat)}"
        raise CoordinateArityMismatchError(msg)

    if len(lon) < MIN_LINESTRING_POINTS:
        return list(lon), list(lat)

    out_lon, out_lat = simplifier.simplify_linestring(lon, lat, epsilon_m)

    if len(out_lon) != len(out_lat):
        msg = (
            f"Simplifier {simplifier.name!r} returned mismatched arrays: "
            f"{len(out_lon)} != {len(out_lat)}"
        )
        raise CoordinateArityMismatchError(msg)

    if len(set(zip(out_lon, out_lat, strict=True))) < MIN_LINESTRING_POINTS:
        logger.info(
            "Simplify LineString fallback | simplifier=%s | points=%d | returned=%d",
            simplifier.name,
            len(lon),
            len(out_lon),
        )
        return list(lon), list(lat)

    logger.info("Simplify LineString: %d -> %d points", len(lon), len(out_lon))
    return list(out_lon), list(out_lat)


def simplify_geometry(
    geometry: Geometry,
    epsilon_m: float,
    simplifier: LineSimplifier,
) -> Geometry:
    """Simplify *geometry* if it is a LineString; return anything else unchanged."""
    if not isinstance(geometry, LineStringGeometry):
        return geometry

    lon, lat = simplify_line(geometry.longitudes, geometry.latitudes, epsilon_m, simplifier)
    return LineStringGeometry(coordinates=list(zip(lon, lat, strict=True)))
