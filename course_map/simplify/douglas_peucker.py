"""Geodesic Douglas-Peucker line simplification.

Projects the line into its local UTM zone so the tolerance is applied in
metres, runs shapely's Douglas-Peucker ``simplify``, then maps the kept
vertices back to their original ``(lon, lat)`` values.  Kept vertices are
therefore bit-identical to the input; no reprojection error is introduced.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from course_map.geometry.projection import utm_crs_for, utm_transformers
from course_map.simplify.base import LineSimplifier

logger = logging.getLogger("course_map.simplify.douglas_peucker")


class DouglasPeuckerSimplifier(LineSimplifier):
    """Douglas-Peucker simplification with a tolerance in metres."""

    name = "douglas_peucker"

    def simplify_linestring(
        self,
        lon: Sequence[float],
        lat: Sequence[float],
        epsilon_m: float,
    ) -> tuple[list[float], list[float]]:
        if not lon:
            return [], []
        if epsilon_m <= 0:
            return list(lon), list(lat)

        from shapely.geometry import LineString

        centre_lon = (min(lon) + max(lon)) / 2
        centre_lat = (min(lat) + max(lat)) / 2
        to_utm, _to_wgs = utm_transformers(utm_crs_for(centre_lon, centre_lat))

        xs, ys = to_utm.transform(list(lon), list(lat))
        projected = list(zip(xs, ys, strict=True))

        simplified = LineString(projected).simplify(epsilon_m, preserve_topology=False)
        if simplified.is_empty:
            return [], []

        # Douglas-Peucker keeps a subset of the input vertices unchanged.
        index_of: dict[tuple[float, float], int] = {}
        for i, xy in enumerate(projected):
            index_of.setdefault(xy, i)

        out_lon: list[float] = []
        out_lat: list[float] = []
        for x, y, *_ in simplified.coords:
            i = index_of.get((x, y))
            if i is None:
                logger.warning("Simplified vertex (%s, %s) not found in input line", x, y)
                return [], []
            out_lon.append(lon[i])
            out_lat.append(lat[i])

        return out_lon, out_lat
