"""Query surface: contains / within / nearest lookups over the spatial store."""

from course_map.query.service import (
    CourseQueryService,
    QueryParameterError,
    optional_param,
    parse_point,
    parse_radius,
)

__all__ = [
    "CourseQueryService",
    "QueryParameterError",
    "optional_param",
    "parse_point",
    "parse_radius",
]
