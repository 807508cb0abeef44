"""Azure Functions entry point: Course Map query service.

Registers the HTTP query endpoints using the Python v2 programming model.
Every endpoint is a pass-through to the configured spatial store; all
logic lives in the ``course_map`` package.

Endpoints:
    GET /api/health
    GET /api/contains?lat=39.1007&lon=-94.5772[&course=...]
    GET /api/within?lat=...&lon=...&radiusMeters=200[&type=bunker][&course=...]
    GET /api/nearest?lat=...&lon=...[&type=bunker][&course=...]
"""

from __future__ import annotations

import json
import logging

import azure.functions as func

from course_map.core.config import ConfigValidationError, ImporterConfig
from course_map.core.exceptions import PipelineError, ValidationError
from course_map.query.service import (
    CourseQueryService,
    optional_param,
    parse_point,
    parse_radius,
)
from course_map.store.factory import get_store

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("course_map.function_app")


def get_query_service() -> CourseQueryService:
    """Build a query service over the configured store for one request.

    Raises:
        ConfigValidationError: If the environment configuration is invalid.
    """
    try:
        config = ImporterConfig.from_env()
    except ValueError as exc:
        raise ConfigValidationError("COURSEMAP_SIMPLIFY_EPSILON_M", "", str(exc)) from exc
    return CourseQueryService(get_store(config))


def _json_response(body: object, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status_code,
        mimetype="application/json",
    )


def _error_response(exc: PipelineError) -> func.HttpResponse:
    status_code = 400 if isinstance(exc, ValidationError) else 500
    if status_code == 500:
        logger.error("Query failed | %s", exc.to_error_dict())
    return _json_response({"error": exc.to_error_dict()}, status_code=status_code)


# ---------------------------------------------------------------------------
# HTTP: health
# ---------------------------------------------------------------------------


@app.function_name("health")
@app.route(route="health", methods=["GET"])
def health(req: func.HttpRequest) -> func.HttpResponse:  # noqa: ARG001
    return _json_response({"ok": True})


# ---------------------------------------------------------------------------
# HTTP: query endpoints
# ---------------------------------------------------------------------------


@app.function_name("contains")
@app.route(route="contains", methods=["GET"])
def contains(req: func.HttpRequest) -> func.HttpResponse:
    """Features whose geometry contains the point."""
    try:
        lon, lat = parse_point(req.params)
        items = get_query_service().contains(
            lon, lat, course_id=optional_param(req.params, "course")
        )
    except PipelineError as exc:
        return _error_response(exc)
    return _json_response(items)


@app.function_name("within")
@app.route(route="within", methods=["GET"])
def within(req: func.HttpRequest) -> func.HttpResponse:
    """Features within ``radiusMeters`` of the point, nearest first."""
    try:
        lon, lat = parse_point(req.params)
        radius_m = parse_radius(req.params)
        items = get_query_service().within(
            lon,
            lat,
            radius_m,
            feature_type=optional_param(req.params, "type"),
            course_id=optional_param(req.params, "course"),
        )
    except PipelineError as exc:
        return _error_response(exc)
    return _json_response(items)


@app.function_name("nearest")
@app.route(route="nearest", methods=["GET"])
def nearest(req: func.HttpRequest) -> func.HttpResponse:
    """The single nearest feature, or 404 when there is none."""
    try:
        lon, lat = parse_point(req.params)
        item = get_query_service().nearest(
            lon,
            lat,
            feature_type=optional_param(req.params, "type"),
            course_id=optional_param(req.params, "course"),
        )
    except PipelineError as exc:
        return _error_response(exc)

    if item is None:
        return _json_response({"error": "No matching feature"}, status_code=404)
    return _json_response(item)
