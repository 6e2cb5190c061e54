"""
Unit tests for the API Gateway Lambda handler.

Events are built the way API Gateway delivers them for a Cognito
authorizer; DynamoDB is mocked by moto.
"""

import json

import pytest

from src.activitydash.lambdas.api_handler import lambda_handler
from tests.conftest import TEST_USER_ID

ENCODED = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def api_event(method, resource, kind=None, body=None, query=None, user_id=TEST_USER_ID):
    event = {
        "httpMethod": method,
        "resource": resource,
        "pathParameters": {"kind": kind} if kind else None,
        "queryStringParameters": query,
        "requestContext": {"requestId": "req-1"},
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
    }
    if user_id:
        event["requestContext"]["authorizer"] = {"claims": {"sub": user_id}}
    return event


def call(*args, **kwargs):
    response = lambda_handler(api_event(*args, **kwargs), None)
    return response["statusCode"], json.loads(response["body"]) if response["body"] else None


@pytest.mark.aws
class TestRouting:
    """Test cases for request routing and error envelopes."""

    def test_cors_preflight(self, mock_tables):
        response = lambda_handler(api_event("OPTIONS", "/activities/{kind}/logs", "weight"), None)

        assert response["statusCode"] == 200
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"

    def test_cors_origin_from_environment(self, mock_tables, monkeypatch):
        monkeypatch.setenv("CORS_ORIGIN", "https://dash.example.com")
        response = lambda_handler(api_event("GET", "/health"), None)

        assert response["headers"]["Access-Control-Allow-Origin"] == "https://dash.example.com"

    def test_health(self, mock_tables):
        status, body = call("GET", "/health")

        assert status == 200
        assert body["status"] == "healthy"
        assert "environment" in body

    def test_unknown_resource(self, mock_tables):
        status, body = call("GET", "/nowhere")

        assert status == 404
        assert body["error"] == "Not Found"
        assert body["status_code"] == 404

    def test_unknown_method(self, mock_tables):
        status, _ = call("DELETE", "/activities/{kind}/stats", "running")
        assert status == 404

    def test_missing_identity(self, mock_tables):
        status, body = call("GET", "/activities/{kind}/logs", "weight", user_id=None)

        assert status == 401
        assert body["error"] == "Unauthorized"

    def test_unknown_activity(self, mock_tables):
        status, body = call("GET", "/activities/{kind}/logs", "kayaking")

        assert status == 400
        assert body["error"] == "Invalid Activity"

    def test_service_init_failure(self, mock_tables, monkeypatch):
        monkeypatch.delenv("LOGS_TABLE")
        status, body = call("GET", "/health")

        assert status == 500
        assert body["error"] == "Service initialization failed"


@pytest.mark.aws
class TestLogEndpoints:
    """Test cases for /activities/{kind}/logs."""

    def test_create_and_list(self, mock_tables):
        status, body = call(
            "POST",
            "/activities/{kind}/logs",
            "weight",
            body={"datetime": "2025-01-05T07:30:00Z", "data": {"weight": 182.4}},
        )

        assert status == 201
        assert body["log"]["data"] == {"weight": 182.4}
        assert body["log"]["activity"] == "weight"

        status, body = call("GET", "/activities/{kind}/logs", "weight")

        assert status == 200
        assert body["total_count"] == 1
        assert body["filters"] == {"activity": "weight", "range": "Max"}

    def test_list_descending(self, mock_tables):
        for day in ("2025-01-02", "2025-01-04"):
            call(
                "POST",
                "/activities/{kind}/logs",
                "weight",
                body={"datetime": f"{day}T07:00:00Z", "data": {"weight": 180}},
            )

        _, body = call("GET", "/activities/{kind}/logs", "weight", query={"order": "desc"})

        assert [log["datetime"][:10] for log in body["logs"]] == ["2025-01-04", "2025-01-02"]

    @pytest.mark.parametrize("body,error", [
        (None, "Missing Request Body"),
        ("{not json", "Invalid JSON"),
        ([1, 2], "Invalid JSON"),
        ({"data": {"weight": 180}}, "Missing Required Field"),
        ({"datetime": "2025-01-05T07:30:00Z", "data": 180}, "Missing Required Field"),
        ({"datetime": "2025-01-05T07:30:00Z", "data": {"weight": -4}}, "Failed to Save Log"),
    ])
    def test_create_rejects_bad_requests(self, mock_tables, body, error):
        status, response = call("POST", "/activities/{kind}/logs", "weight", body=body)

        assert status == 400
        assert response["error"] == error

    def test_invalid_range(self, mock_tables):
        status, body = call("GET", "/activities/{kind}/logs", "weight", query={"range": "2w"})

        assert status == 400
        assert body["error"] == "Invalid Range"


@pytest.mark.aws
class TestStatsEndpoint:
    """Test cases for /activities/{kind}/stats."""

    def test_never_logged(self, mock_tables):
        status, body = call("GET", "/activities/{kind}/stats", "skiing", query={"range": "1y"})

        assert status == 200
        assert body["statistics"] is None
        assert body["filters"]["range"] == "1y"

    def test_panel(self, mock_tables):
        call(
            "POST",
            "/activities/{kind}/logs",
            "surfing",
            body={"datetime": "2024-07-04T16:00:00Z", "data": {"duration": 120, "waves": 14}},
        )

        status, body = call("GET", "/activities/{kind}/stats", "surfing", query={"range": "max"})

        assert status == 200
        panel = body["statistics"]
        assert panel["range"] == "Max"
        assert panel["items"] == [
            {"label": "Total sessions", "value": 1},
            {"label": "Waves caught", "value": 14},
            {"label": "Total hours", "value": "2.0"},
        ]
        assert [o["label"] for o in panel["options"] if o["active"]] == ["Max"]

    def test_invalid_range(self, mock_tables):
        status, _ = call("GET", "/activities/{kind}/stats", "surfing", query={"range": "forever"})
        assert status == 400


@pytest.mark.aws
class TestOtherEndpoints:
    """Test cases for latest, locations and routes."""

    def test_latest_empty(self, mock_tables):
        status, body = call("GET", "/activities/{kind}/latest", "skiing")

        assert status == 200
        assert body["latest"] is None

    def test_latest_with_location(self, mock_tables):
        call(
            "POST",
            "/activities/{kind}/locations",
            "skiing",
            body={"name": "Alta", "lat": 40.59, "lon": -111.64},
        )
        call(
            "POST",
            "/activities/{kind}/logs",
            "skiing",
            body={"datetime": "2025-01-05T15:00:00Z", "data": {"runs": 11}, "location": "Alta"},
        )

        status, body = call("GET", "/activities/{kind}/latest", "skiing")

        assert status == 200
        assert body["latest"]["location"]["name"] == "Alta"
        assert body["latest"]["log"]["data"] == {"runs": 11}
        assert body["latest"]["relative"].endswith("ago")

    def test_locations(self, mock_tables):
        status, body = call(
            "POST",
            "/activities/{kind}/locations",
            "surfing",
            body={"name": "Ocean Beach", "lat": 37.76, "lon": -122.51},
        )
        assert status == 201
        assert body["location"]["name"] == "Ocean Beach"

        status, body = call(
            "POST",
            "/activities/{kind}/locations",
            "surfing",
            body={"name": "Ocean Beach", "lat": 37.76, "lon": -122.51},
        )
        assert status == 400
        assert body["error"] == "Failed to Save Location"

        status, body = call("GET", "/activities/{kind}/locations", "surfing")
        assert body["total_count"] == 1

    def test_location_requires_coordinates(self, mock_tables):
        status, body = call(
            "POST", "/activities/{kind}/locations", "surfing", body={"name": "Ocean Beach"}
        )

        assert status == 400
        assert "lat" in body["details"]

    def test_routes(self, mock_tables):
        call(
            "POST",
            "/activities/{kind}/logs",
            "running",
            body={
                "datetime": "2025-01-05T15:00:00Z",
                "data": {"distance": 5000, "map": {"summary_polyline": ENCODED}},
            },
        )

        status, body = call("GET", "/activities/{kind}/routes", "running")

        assert status == 200
        assert body["starts"] == [[38.5, -120.2]]
        assert body["bounds"] == [[38.5, -120.2], [38.5, -120.2]]

    def test_routes_unavailable(self, mock_tables):
        status, body = call("GET", "/activities/{kind}/routes", "weight")

        assert status == 400
        assert body["error"] == "Routes Not Available"
