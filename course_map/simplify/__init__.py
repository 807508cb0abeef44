"""Line simplification capability and the bridge the importer calls.

- base: LineSimplifier ABC
- douglas_peucker: metre-tolerance Douglas-Peucker (pyproj + shapely)
- decimate: keep every second vertex plus the last
- factory: name-based selection
- bridge: arity checks and degenerate-output fallback
"""

from course_map.simplify.base import LineSimplifier
from course_map.simplify.bridge import (
    CoordinateArityMismatchError,
    simplify_geometry,
    simplify_line,
)
from course_map.simplify.factory import get_simplifier, list_simplifiers, register_simplifier

__all__ = [
    "CoordinateArityMismatchError",
    "LineSimplifier",
    "get_simplifier",
    "list_simplifiers",
    "register_simplifier",
    "simplify_geometry",
    "simplify_line",
]
