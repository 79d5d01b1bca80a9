"""Tests for the FastAPI API endpoints."""

import pytest
from fastapi.testclient import TestClient

from agent_lint.api.app import create_app
from agent_lint.config import LinterConfig
from agent_lint.linter.engine import ResponseLinter


@pytest.fixture
def client():
    """Create a test client with a fresh linter."""
    app = create_app(linter=ResponseLinter(LinterConfig()))
    return TestClient(app)


def _make_error_response() -> dict:
    return {
        "status": "error",
        "error": {
            "code": "RATE_LIMITED",
            "message": "Too many requests",
            "remediation": {"retryAfterSeconds": 30},
        },
    }


class TestVocabularyEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "principles": 10}

    def test_list_principles(self, client):
        response = client.get("/principles")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 10
        assert data[0]["principle"] == "intent_signaling"

    def test_get_principle(self, client):
        response = client.get("/principles/uncertainty")
        assert response.status_code == 200
        names = [f["name"] for f in response.json()["fields"]]
        assert names == ["confidence", "alternatives", "requiresHumanReview"]

    def test_get_unknown_principle(self, client):
        response = client.get("/principles/telepathy")
        assert response.status_code == 404

    def test_list_profiles(self, client):
        response = client.get("/profiles")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["minimal", "decision", "full"]


class TestLintEndpoint:
    def test_lint_with_principles(self, client):
        response = client.post("/lint", json={
            "response": _make_error_response(),
            "principles": ["error_remediation"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["passed"] is True
        assert data["profile"] == "custom"
        assert data["results"][0]["findings"][0]["path"] == "$.error.code"

    def test_lint_with_named_profile(self, client):
        response = client.post("/lint", json={
            "response": _make_error_response(),
            "profile": "minimal",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["profile"] == "minimal"
        # status is present but no recommendedNextAction
        assert data["passed"] is False
        assert data["error_count"] == 1

    def test_lint_with_inline_profile(self, client):
        response = client.post("/lint", json={
            "response": {"confidence": 0.9},
            "profile": {
                "name": "team",
                "principles": ["uncertainty"],
                "required_fields": ["alternatives"],
            },
        })
        assert response.status_code == 200
        data = response.json()
        assert data["profile"] == "team"
        assert data["passed"] is False

    def test_lint_strict_override(self, client):
        response = client.post("/lint", json={
            "response": {"confidence": 0.9},
            "principles": ["uncertainty"],
            "strict": True,
        })
        data = response.json()
        assert data["error_count"] == 2

    def test_lint_defaults_to_configured_profile(self, client):
        response = client.post("/lint", json={"response": {"status": "ok"}})
        assert response.status_code == 200
        assert response.json()["profile"] == "full"

    def test_unknown_profile(self, client):
        response = client.post("/lint", json={
            "response": {},
            "profile": "maximal",
        })
        assert response.status_code == 404

    def test_unknown_principle(self, client):
        response = client.post("/lint", json={
            "response": {},
            "principles": ["telepathy"],
        })
        assert response.status_code == 422

    def test_missing_root(self, client):
        response = client.post("/lint", json={
            "response": {"data": {}},
            "principles": ["uncertainty"],
            "root": "result",
        })
        assert response.status_code == 422

    def test_invalid_json_text(self, client):
        response = client.post("/lint", json={
            "response": "{broken",
            "principles": ["uncertainty"],
        })
        assert response.status_code == 422


class TestDocumentEndpoint:
    def test_check_document(self, client):
        markdown = (
            "## Uncertainty\n"
            "```json\n"
            '{"confidence": 0.8}\n'
            "```\n"
            "## Error Remediation\n"
        )
        response = client.post("/docs/check", json={"markdown": markdown, "lint_examples": True})
        assert response.status_code == 200
        data = response.json()
        assert data["passed"] is False
        assert data["missing_examples"] == ["Error Remediation"]
        assert data["blocks"][0]["report"]["passed"] is True
