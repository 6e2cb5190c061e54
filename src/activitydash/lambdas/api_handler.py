"""
API Gateway Lambda handler for the ActivityDash application.

This Lambda function provides the REST API behind the dashboard: logging
entries, listing them, statistics panels for a time range, latest-entry
summaries, saved locations and route overviews.

Functions:
    lambda_handler: Main entry point for API Gateway events
    _handle_get_logs: Handle GET /activities/{kind}/logs
    _handle_create_log: Handle POST /activities/{kind}/logs
    _handle_get_stats: Handle GET /activities/{kind}/stats
    _handle_get_latest: Handle GET /activities/{kind}/latest
    _handle_get_locations: Handle GET /activities/{kind}/locations
    _handle_create_location: Handle POST /activities/{kind}/locations
    _handle_get_routes: Handle GET /activities/{kind}/routes
    _handle_health_check: Handle GET /health
"""

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from ..models.activity_data import ActivityKind
from ..models.time_range import TimeRange
from ..services.activity_service import ActivityLogService
from ..utils.logging import log_error, log_event

ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:  # noqa: ARG001
    """
    Main Lambda handler for API Gateway events.

    Routes incoming HTTP requests to the handler functions based on the
    HTTP method and resource template.

    Args:
        event: API Gateway event containing HTTP request data
        context: AWS Lambda runtime context (unused)

    Returns:
        HTTP response dictionary with statusCode, headers and body

    Event Structure:
        {
            "httpMethod": "GET|POST|OPTIONS",
            "resource": "/activities/{kind}/stats",
            "pathParameters": {"kind": "running"},
            "queryStringParameters": {"range": "1y"},
            "requestContext": {"authorizer": {"claims": {"sub": "user-id"}}},
            "body": "{\"key\": \"value\"}"
        }
    """
    try:
        _log_api_request(event)

        http_method = event.get("httpMethod", "").upper()
        resource = event.get("resource", "")
        path_params = event.get("pathParameters") or {}
        query_params = event.get("queryStringParameters") or {}

        if http_method == "OPTIONS":
            return _handle_cors_preflight()

        try:
            activity_service = ActivityLogService()
        except Exception as e:
            log_error("SERVICE_INIT_ERROR", str(e))
            return _create_error_response(500, "Service initialization failed", str(e))

        if resource == "/health" and http_method == "GET":
            return _handle_health_check(activity_service)

        if not resource.startswith("/activities/{kind}"):
            return _not_found(resource, http_method)

        user_id = _get_user_id(event)
        if not user_id:
            return _create_error_response(401, "Unauthorized", "Missing user identity")

        try:
            kind = ActivityKind(str(path_params.get("kind", "")).lower())
        except ValueError:
            valid = ", ".join(k.value for k in ActivityKind)
            return _create_error_response(
                400, "Invalid Activity", f"Activity must be one of: {valid}"
            )

        if resource == "/activities/{kind}/logs" and http_method == "GET":
            return _handle_get_logs(activity_service, user_id, kind, query_params)

        elif resource == "/activities/{kind}/logs" and http_method == "POST":
            return _handle_create_log(activity_service, user_id, kind, event.get("body"))

        elif resource == "/activities/{kind}/stats" and http_method == "GET":
            return _handle_get_stats(activity_service, user_id, kind, query_params)

        elif resource == "/activities/{kind}/latest" and http_method == "GET":
            return _handle_get_latest(activity_service, user_id, kind)

        elif resource == "/activities/{kind}/locations" and http_method == "GET":
            return _handle_get_locations(activity_service, user_id, kind)

        elif resource == "/activities/{kind}/locations" and http_method == "POST":
            return _handle_create_location(activity_service, user_id, kind, event.get("body"))

        elif resource == "/activities/{kind}/routes" and http_method == "GET":
            return _handle_get_routes(activity_service, user_id, kind)

        return _not_found(resource, http_method)

    except Exception as e:
        log_error("UNEXPECTED_ERROR", str(e), {"resource": event.get("resource")})
        return _create_error_response(500, "Internal Server Error", "Unexpected error occurred")


def _handle_health_check(activity_service: ActivityLogService) -> Dict[str, Any]:
    """
    Handle GET /health.

    Response Body:
        {
            "status": "healthy|degraded|unhealthy",
            "services": {"database": {...}},
            "environment": "dev|staging|prod"
        }
    """
    health_result = activity_service.health_check()
    response_data = {**health_result, "environment": ENVIRONMENT, "version": "1.0.0"}

    status_code = 503 if health_result["status"] == "unhealthy" else 200
    return _create_response(status_code, response_data)


def _parse_range(query_params: Dict[str, str], default: TimeRange) -> TimeRange:
    label = query_params.get("range")
    return TimeRange.from_label(label) if label else default


def _handle_get_logs(
    activity_service: ActivityLogService,
    user_id: str,
    kind: ActivityKind,
    query_params: Dict[str, str],
) -> Dict[str, Any]:
    """
    Handle GET /activities/{kind}/logs.

    Query Parameters:
        - range: TimeRange label (default: Max)
        - order: "asc" (default) or "desc"
    """
    try:
        time_range = _parse_range(query_params, TimeRange.MAX)
    except ValueError as e:
        return _create_error_response(400, "Invalid Range", str(e))

    logs = activity_service.get_logs(user_id, kind, time_range)
    if query_params.get("order", "asc").lower() == "desc":
        logs = list(reversed(logs))

    return _create_response(
        200,
        {
            "logs": [log.model_dump(mode="json") for log in logs],
            "total_count": len(logs),
            "filters": {"activity": kind.value, "range": time_range.value},
            "timestamp": _now_iso(),
        },
    )


def _handle_create_log(
    activity_service: ActivityLogService,
    user_id: str,
    kind: ActivityKind,
    body: Optional[str],
) -> Dict[str, Any]:
    """
    Handle POST /activities/{kind}/logs.

    Request Body:
        {
            "datetime": "2025-01-05T07:30",
            "data": {"weight": 181.2},
            "location": "Malibu"
        }
    """
    data, error_response = _parse_body(body)
    if error_response:
        return error_response

    if not data.get("datetime"):
        return _create_error_response(400, "Missing Required Field", "Field 'datetime' is required")
    if not isinstance(data.get("data"), dict):
        return _create_error_response(400, "Missing Required Field", "Field 'data' must be an object")

    result = activity_service.log_activity(
        user_id=user_id,
        kind=kind,
        when=data["datetime"],
        data=data["data"],
        location_name=data.get("location"),
    )

    if not result["success"]:
        status = 500 if result["error"] == "Failed to save log to database" else 400
        return _create_error_response(status, "Failed to Save Log", result["error"])

    return _create_response(
        201,
        {
            "log": result["log"].model_dump(mode="json"),
            "message": "Log saved successfully",
            "timestamp": _now_iso(),
        },
    )


def _handle_get_stats(
    activity_service: ActivityLogService,
    user_id: str,
    kind: ActivityKind,
    query_params: Dict[str, str],
) -> Dict[str, Any]:
    """
    Handle GET /activities/{kind}/stats.

    Query Parameters:
        - range: TimeRange label (default: Max)

    Response Body:
        {
            "statistics": {
                "range": "1y",
                "options": [{"range": "1d", "label": "1d", "active": false}, ...],
                "items": [{"label": "Total Runs", "value": 42}, ...]
            }
        }

    ``statistics`` is null when the user has never logged the activity.
    """
    try:
        time_range = _parse_range(query_params, TimeRange.MAX)
    except ValueError as e:
        return _create_error_response(400, "Invalid Range", str(e))

    panel = activity_service.get_statistics(user_id, kind, time_range)

    return _create_response(
        200,
        {
            "statistics": panel.model_dump(mode="json") if panel else None,
            "filters": {"activity": kind.value, "range": time_range.value},
            "timestamp": _now_iso(),
        },
    )


def _handle_get_latest(
    activity_service: ActivityLogService, user_id: str, kind: ActivityKind
) -> Dict[str, Any]:
    """Handle GET /activities/{kind}/latest."""
    summary = activity_service.get_latest_summary(user_id, kind)
    if summary is None:
        return _create_response(200, {"latest": None, "timestamp": _now_iso()})

    location = summary["location"]
    return _create_response(
        200,
        {
            "latest": {
                "log": summary["log"].model_dump(mode="json"),
                "location": location.model_dump(mode="json") if location else None,
                "date": summary["date"],
                "relative": summary["relative"],
            },
            "timestamp": _now_iso(),
        },
    )


def _handle_get_locations(
    activity_service: ActivityLogService, user_id: str, kind: ActivityKind
) -> Dict[str, Any]:
    """Handle GET /activities/{kind}/locations."""
    locations = activity_service.get_locations(user_id, kind)
    return _create_response(
        200,
        {
            "locations": [loc.model_dump(mode="json") for loc in locations],
            "total_count": len(locations),
            "timestamp": _now_iso(),
        },
    )


def _handle_create_location(
    activity_service: ActivityLogService,
    user_id: str,
    kind: ActivityKind,
    body: Optional[str],
) -> Dict[str, Any]:
    """
    Handle POST /activities/{kind}/locations.

    Request Body:
        {"name": "Malibu", "lat": 34.03, "lon": -118.68}
    """
    data, error_response = _parse_body(body)
    if error_response:
        return error_response

    for field in ("name", "lat", "lon"):
        if data.get(field) in (None, ""):
            return _create_error_response(400, "Missing Required Field", f"Field '{field}' is required")

    result = activity_service.add_location(user_id, kind, data["name"], data["lat"], data["lon"])
    if not result["success"]:
        return _create_error_response(400, "Failed to Save Location", result["error"])

    return _create_response(
        201,
        {
            "location": result["location"].model_dump(mode="json"),
            "message": "Location saved successfully",
            "timestamp": _now_iso(),
        },
    )


def _handle_get_routes(
    activity_service: ActivityLogService, user_id: str, kind: ActivityKind
) -> Dict[str, Any]:
    """Handle GET /activities/{kind}/routes."""
    try:
        overview = activity_service.get_route_overview(user_id, kind)
    except ValueError as e:
        return _create_error_response(400, "Routes Not Available", str(e))

    return _create_response(200, {**overview, "timestamp": _now_iso()})


def _get_user_id(event: Dict[str, Any]) -> Optional[str]:
    """Extract the caller's user id from the authorizer claims."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    return claims.get("sub") or authorizer.get("principalId")


def _parse_body(body: Optional[str]) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """Parse a JSON request body into (data, error_response)."""
    if not body or not body.strip():
        return {}, _create_error_response(400, "Missing Request Body", "Request body is required")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        return {}, _create_error_response(400, "Invalid JSON", f"Request body is not valid JSON: {e}")
    if not isinstance(data, dict):
        return {}, _create_error_response(400, "Invalid JSON", "Request body must be a JSON object")
    return data, None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _not_found(resource: str, http_method: str) -> Dict[str, Any]:
    return _create_error_response(
        404, "Not Found", f"Resource {resource} with method {http_method} not found"
    )


def _handle_cors_preflight() -> Dict[str, Any]:
    return {"statusCode": 200, "headers": _get_cors_headers(), "body": ""}


def _create_response(status_code: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a standardized HTTP response with CORS headers and a JSON body.
    """
    return {
        "statusCode": status_code,
        "headers": {**_get_cors_headers(), "Content-Type": "application/json"},
        "body": json.dumps(data, default=str),
    }


def _create_error_response(status_code: int, error: str, details: str = "") -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        status_code: HTTP status code
        error: High-level error message
        details: Detailed error information
    """
    return _create_response(
        status_code,
        {
            "error": error,
            "details": details,
            "timestamp": _now_iso(),
            "status_code": status_code,
        },
    )


def _get_cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": os.getenv("CORS_ORIGIN", "*"),
        "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
        "Access-Control-Max-Age": "86400",
    }


def _log_api_request(event: Dict[str, Any]) -> None:
    """Log the request without identity or body."""
    request_context = event.get("requestContext") or {}
    log_event(
        "API_REQUEST",
        httpMethod=event.get("httpMethod"),
        resource=event.get("resource"),
        pathParameters=event.get("pathParameters"),
        queryParams=event.get("queryStringParameters"),
        requestId=request_context.get("requestId"),
    )
