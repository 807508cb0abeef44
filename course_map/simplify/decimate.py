"""Decimating simplifier: keep every second vertex plus the last one.

Ignores the tolerance.  Selected with ``COURSEMAP_SIMPLIFIER=decimate``.
"""

from __future__ import annotations

from collections.abc import Sequence

from course_map.simplify.base import LineSimplifier


class DecimateSimplifier(LineSimplifier):
    """Keeps vertices ``0, 2, 4, ...`` and always the final vertex."""

    name = "decimate"

    def simplify_linestring(
        self,
        lon: Sequence[float],
        lat: Sequence[float],
        epsilon_m: float,  # noqa: ARG002
    ) -> tuple[list[float], list[float]]:
        n = len(lon)
        if n == 0:
            return [], []

        out_lon = list(lon[::2])
        out_lat = list(lat[::2])

        if (out_lon[-1], out_lat[-1]) != (lon[-1], lat[-1]):
            out_lon.append(lon[-1])
            out_lat.append(lat[-1])

        return out_lon, out_lat
