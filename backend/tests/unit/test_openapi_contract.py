"""
OpenAPI Contract Tests

These tests ensure the API contract the web client depends on is stable
and that changes are intentional.

Run with: pytest tests/unit/test_openapi_contract.py -v
"""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    """Test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def openapi_schema(client) -> dict[str, Any]:
    """Get the current OpenAPI schema."""
    response = client.get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPIStructure:
    """Verify the OpenAPI schema structure is correct."""

    def test_schema_has_info(self, openapi_schema):
        assert openapi_schema["info"]["title"] == "LinguaLearn API"
        assert "version" in openapi_schema["info"]

    def test_schema_has_components(self, openapi_schema):
        assert "schemas" in openapi_schema["components"]


class TestCriticalEndpoints:
    """Verify critical endpoints exist in the schema."""

    CRITICAL_ENDPOINTS = [
        # Health
        ("GET", "/api/health"),
        ("GET", "/api/health/ready"),
        # Catalog
        ("GET", "/api/courses"),
        ("GET", "/api/courses/{course_id}"),
        ("GET", "/api/courses/{course_id}/lessons"),
        ("GET", "/api/lessons/{lesson_id}/items"),
        ("GET", "/api/lessons/{lesson_id}/speech-locale"),
        # Practice
        ("POST", "/api/practice/attempts"),
        ("POST", "/api/practice/lessons/{lesson_id}/complete"),
        ("POST", "/api/practice/feedback"),
        # Review
        ("GET", "/api/review/due"),
        ("GET", "/api/review/stats"),
        ("GET", "/api/review/items/{item_id}"),
        # Profile
        ("GET", "/api/profile"),
        ("POST", "/api/profile/daily-goal/refresh"),
        ("GET", "/api/profile/analytics"),
        # Playlists
        ("GET", "/api/playlists"),
        ("POST", "/api/playlists"),
        ("GET", "/api/playlists/{playlist_id}"),
        ("DELETE", "/api/playlists/{playlist_id}"),
        # Admin
        ("POST", "/api/admin/courses"),
        ("PATCH", "/api/admin/courses/{course_id}"),
        ("DELETE", "/api/admin/courses/{course_id}"),
        ("POST", "/api/admin/lessons"),
        ("PATCH", "/api/admin/lessons/{lesson_id}"),
        ("POST", "/api/admin/items"),
        ("PATCH", "/api/admin/items/{item_id}"),
        ("DELETE", "/api/admin/items/{item_id}"),
    ]

    @pytest.mark.parametrize("method,path", CRITICAL_ENDPOINTS)
    def test_endpoint_exists(self, openapi_schema, method, path):
        paths = openapi_schema.get("paths", {})
        assert path in paths, f"Missing endpoint: {path}"
        assert method.lower() in paths[path], f"Missing method {method} on {path}"


class TestParameterTypes:
    """Verify important request and response bodies."""

    def test_attempt_request_body(self, openapi_schema):
        schema = openapi_schema["components"]["schemas"].get("AttemptSubmitRequest")
        assert schema is not None, "AttemptSubmitRequest schema missing"

        properties = schema["properties"]
        assert properties["item_id"]["type"] == "string"
        assert properties["answer"]["type"] == "string"
        assert schema.get("required") == ["item_id"]

    def test_player_item_has_no_answer(self, openapi_schema):
        schema = openapi_schema["components"]["schemas"].get("PlayerItem")
        assert schema is not None, "PlayerItem schema missing"

        assert "correct_answer" not in schema["properties"]
        assert "explanation" not in schema["properties"]

    def test_attempt_result_reveals_answer(self, openapi_schema):
        properties = openapi_schema["components"]["schemas"]["AttemptResult"]["properties"]

        assert "correct_answer" in properties
        assert "review" in properties


class TestResponseModels:
    """Test that endpoints declare JSON response schemas."""

    @pytest.mark.parametrize(
        "path,method",
        [
            ("/api/practice/attempts", "post"),
            ("/api/review/due", "get"),
            ("/api/profile/analytics", "get"),
            ("/api/courses/{course_id}/lessons", "get"),
        ],
    )
    def test_endpoint_has_response_model(self, openapi_schema, path, method):
        responses = openapi_schema["paths"][path][method]["responses"]

        assert "200" in responses, f"{method.upper()} {path} missing 200 response"
        assert "application/json" in responses["200"]["content"]
