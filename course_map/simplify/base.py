"""LineSimplifier abstract base class.

Defines the capability the simplifier bridge calls for every LineString.
The importer never knows which concrete routine is behind it.

Contract:
    ``simplify_linestring(lon, lat, epsilon_m)`` receives parallel
    longitude/latitude sequences of equal length plus a tolerance in
    metres, and returns simplified parallel lists.  Returning empty lists
    means "could not simplify meaningfully"; the bridge then keeps the
    original coordinates.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence


class LineSimplifier(abc.ABC):
    """Abstract base class for line simplification routines.

    Implementations must be stateless between calls so the bridge can be
    used concurrently for independent features.
    """

    #: Registry name of the routine.
    name: str = ""

    @abc.abstractmethod
    def simplify_linestring(
        self,
        lon: Sequence[float],
        lat: Sequence[float],
        epsilon_m: float,
    ) -> tuple[list[float], list[float]]:
        """Simplify a line given as parallel coordinate arrays.

        Args:
            lon: Longitudes, same length as *lat*.
            lat: Latitudes.
            epsilon_m: Maximum allowed deviation in metres.

        Returns:
            ``(lon', lat')``.  Empty lists signal a degenerate result.
        """
