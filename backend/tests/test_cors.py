from __future__ import annotations

import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from api.index import StripPrefix, app as api_app
from rubricscore.main import app


def test_cors_headers_present_on_health() -> None:
    with TestClient(app) as client:
        response = client.get("/health", headers={"Origin": "https://example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("client_app,path", [(app, "/grade"), (api_app, "/api/grade")])
def test_preflight_options_grade_allows_cors(client_app, path: str) -> None:
    with TestClient(client_app) as client:
        response = client.options(
            path,
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "x-api-key,content-type",
            },
        )

    assert response.status_code in (200, 204)
    assert response.headers["access-control-allow-origin"] in {"*", "https://example.com"}
    assert "access-control-allow-methods" in response.headers
    assert "access-control-allow-headers" in response.headers


def test_grade_still_available_after_preflight(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_MOCK", "1")

    with TestClient(api_app) as client:
        preflight = client.options(
            "/api/grade",
            headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
        )
        graded = client.post(
            "/api/grade",
            data={
                "rubric_text": "Thesis (10 points).\nEvidence (10 points).",
                "assignment_text": "Cities should plant more trees.",
            },
        )

    assert preflight.status_code in (200, 204)
    assert graded.status_code == 200
    assert len(graded.json()["criteria"]) == 3


def test_api_preflight_only_echoes_allowed_origins() -> None:
    restricted = StripPrefix(app, "/api", allowed_origins=["https://rubrics.example"])

    with TestClient(restricted) as client:
        allowed = client.options(
            "/api/grade",
            headers={"Origin": "https://rubrics.example", "Access-Control-Request-Method": "POST"},
        )
        denied = client.options(
            "/api/grade",
            headers={"Origin": "https://elsewhere.example", "Access-Control-Request-Method": "POST"},
        )

    assert allowed.status_code == 204
    assert allowed.headers["access-control-allow-origin"] == "https://rubrics.example"
    assert denied.status_code == 204
    assert "access-control-allow-origin" not in denied.headers
