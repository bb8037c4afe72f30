"""
Tests for the analysis API routes.
The crawler engine is replaced through FastAPI dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from linkanalyzer.api.v1.routes.analyze import get_crawler_engine, validation_message
from linkanalyzer.core.errors import InvalidURLError, UpstreamStatusError
from linkanalyzer.engines.base import AnalysisResult, SeoAnalysis, SocialMeta
from linkanalyzer.main import app


class FakeEngine:

    async def analyze(self, url: str) -> AnalysisResult:
        if url == "invalid-url":
            raise InvalidURLError(url=url)
        if url.endswith("/404"):
            raise UpstreamStatusError(404, "Not Found", url=url)
        return AnalysisResult(
            url=url,
            title="Example Domain",
            social_meta=SocialMeta(open_graph={"title": "Test OG Title"}),
            seo_analysis=SeoAnalysis(score=85, issues=["Title too short"]),
        )


@pytest.fixture
def client():
    app.dependency_overrides[get_crawler_engine] = FakeEngine
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAnalyzeRoute:

    def test_analyze_valid_url(self, client):
        response = client.post("/api/analyze", json={"url": "https://example.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["url"] == "https://example.com"
        assert body["title"] == "Example Domain"
        assert body["social_meta"]["openGraph"] == {"title": "Test OG Title"}
        assert body["seo_analysis"]["score"] == 85
        assert body["performance_metrics"]["status_code"] == 0

    def test_missing_url(self, client):
        response = client.post("/api/analyze", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}

    def test_invalid_url(self, client):
        response = client.post("/api/analyze", json={"url": "invalid-url"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL format"}

    def test_upstream_not_found(self, client):
        response = client.post("/api/analyze", json={"url": "https://example.com/404"})
        assert response.status_code == 400
        assert response.json() == {"error": "Page not found (404)"}


class TestBulkRoute:

    def test_bulk_analysis(self, client):
        response = client.post(
            "/api/analyze/bulk",
            json={"urls": ["https://example.com", "https://test.com/404"], "maxConcurrent": 2},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["summary"] == {"total": 2, "successful": 1, "failed": 1}
        assert body["results"][0]["index"] == 0
        assert body["results"][0]["data"]["url"] == "https://example.com"
        assert body["errors"] == [{"index": 1, "url": "https://test.com/404", "error": "Page not found (404)"}]

    def test_missing_urls(self, client):
        response = client.post("/api/analyze/bulk", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "URLs array is required"}

    def test_too_many_urls(self, client):
        response = client.post("/api/analyze/bulk", json={"urls": ["https://example.com"] * 51})
        assert response.status_code == 400
        assert response.json() == {"error": "Maximum 50 URLs allowed per bulk analysis"}


class TestExportRoute:

    def test_export(self, client):
        data = AnalysisResult(url="https://example.com").to_json_dict()
        response = client.post("/api/analyze/export", json={"data": [data]})

        assert response.status_code == 200
        assert "application/json" in response.headers["content-type"]
        assert "attachment" in response.headers["content-disposition"]
        assert "analysis-example_com-" in response.headers["content-disposition"]
        assert response.json()[0]["url"] == "https://example.com"

    def test_missing_data(self, client):
        response = client.post("/api/analyze/export", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Analysis data is required"}


def test_health_runs_with_lifespan():
    with TestClient(app) as client:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert client.get("/health/live").json() == {"alive": True}


class TestMalformedBodies:

    @pytest.mark.parametrize("path, body, message", [
        ("/api/analyze", {"url": 42}, "URL is required"),
        ("/api/analyze/bulk", {"urls": "https://example.com"}, "URLs array is required"),
        ("/api/analyze/bulk", {"urls": [1, {"a": 2}]}, "URLs array is required"),
        ("/api/analyze/bulk", {"urls": ["https://example.com"], "maxConcurrent": "fast"},
         "maxConcurrent must be an integer"),
        ("/api/analyze/export", {"data": "not an analysis"}, "Analysis data is required"),
    ])
    def test_wrong_field_types_answer_400_with_error(self, client, path, body, message):
        response = client.post(path, json=body)
        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_unparsable_json(self, client):
        response = client.post(
            "/api/analyze",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}


def test_validation_message_falls_back_for_unknown_fields():
    errors = [{"loc": ("query", "limit"), "msg": "bad"}, {"loc": ("body", "other"), "msg": "bad"}]
    assert validation_message(errors) == "Invalid request body"
    assert validation_message([{"loc": ("body", "urls", 0)}]) == "URLs array is required"
