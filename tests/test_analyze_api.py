"""Tests for the analysis API endpoints and error envelopes."""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from tests.fakes import FakeProvider
from workrules.analysis.pipeline import DocumentAnalyzer
from workrules.analysis.scoring import DerivedScorePolicy
from workrules.api.v1.analyze import get_document_analyzer
from workrules.core.exceptions import ProviderError
from workrules.core.rate_limit import limiter
from workrules.main import app

PROVIDER_TEXT = "취업규칙 제5조는 근로기준법 위반입니다. 제9조도 위반입니다. 휴가 규정 개선 필요. 수당 규정 개선 필요."


def _override(provider: FakeProvider, api_key: str | None = "test-key") -> None:
    analyzer = DocumentAnalyzer(
        api_key=api_key,
        provider=provider,
        score_policy=DerivedScorePolicy(),
        clock=lambda: datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )
    app.dependency_overrides[get_document_analyzer] = lambda: analyzer


class TestAnalyzeEndpoint:
    @pytest.mark.asyncio
    async def test_success(self, client: AsyncClient):
        provider = FakeProvider(text=PROVIDER_TEXT)
        _override(provider)

        resp = await client.post("/api/analyze", json={"content": "제1조 ...", "fileName": "규칙.txt"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["fileName"] == "규칙.txt"
        assert data["analysis"] == PROVIDER_TEXT
        assert data["summary"] == {"totalIssues": 4, "riskLevel": "MEDIUM", "complianceScore": 86}
        assert datetime.fromisoformat(data["analyzedAt"].replace("Z", "+00:00")) == datetime(
            2024, 5, 1, 9, 30, tzinfo=timezone.utc
        )
        assert len(provider.prompts) == 1

    @pytest.mark.asyncio
    async def test_versioned_path(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        resp = await client.post("/api/v1/analyze", json={"content": "제1조 ..."})
        assert resp.status_code == 200
        assert resp.json()["fileName"] == "업로드문서"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"content": ""}, {"content": "   "}, {"fileName": "a.txt"}])
    async def test_empty_content(self, client: AsyncClient, body):
        provider = FakeProvider(text=PROVIDER_TEXT)
        _override(provider)

        resp = await client.post("/api/analyze", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"error": "분석할 내용이 없습니다."}
        assert provider.prompts == []

    @pytest.mark.asyncio
    async def test_long_file_name_accepted(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        file_name = "가" * 300 + ".txt"

        resp = await client.post("/api/analyze", json={"content": "제1조 ...", "fileName": file_name})

        assert resp.status_code == 200
        assert resp.json()["fileName"] == file_name

    @pytest.mark.asyncio
    async def test_malformed_json(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        resp = await client.post(
            "/api/analyze",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "요청 형식이 올바르지 않습니다."
        assert "details" in resp.json()

    @pytest.mark.asyncio
    async def test_non_string_content(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        resp = await client.post("/api/analyze", json={"content": 123})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_credential(self, client: AsyncClient):
        provider = FakeProvider(text=PROVIDER_TEXT)
        _override(provider, api_key=None)

        resp = await client.post("/api/analyze", json={"content": "제1조 ...", "fileName": "규칙.txt"})

        assert resp.status_code == 500
        assert resp.json()["error"] == "API 키가 설정되지 않았습니다."
        assert provider.prompts == []

    @pytest.mark.asyncio
    async def test_missing_credential_from_environment(self, client: AsyncClient, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")

        resp = await client.post("/api/analyze", json={"content": "제1조 ..."})

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "API 키가 설정되지 않았습니다.",
            "details": "ANTHROPIC_API_KEY is not set",
        }

    @pytest.mark.asyncio
    async def test_invalid_score_mode_is_config_error(self, client: AsyncClient, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("COMPLIANCE_SCORE_MODE", "magic")

        resp = await client.post("/api/analyze", json={"content": "제1조 ..."})

        assert resp.status_code == 500
        assert resp.json()["error"] == "서버 설정이 올바르지 않습니다."
        assert "COMPLIANCE_SCORE_MODE" in resp.json()["details"]

    @pytest.mark.asyncio
    async def test_invalid_score_mode_still_validates_content_first(self, client: AsyncClient, monkeypatch):
        monkeypatch.setenv("COMPLIANCE_SCORE_MODE", "magic")

        resp = await client.post("/api/analyze", json={"content": ""})

        assert resp.status_code == 400
        assert resp.json() == {"error": "분석할 내용이 없습니다."}

    @pytest.mark.asyncio
    async def test_provider_error(self, client: AsyncClient):
        error = ProviderError("AI 분석 서비스에서 오류가 발생했습니다.", details="invalid x-api-key")
        _override(FakeProvider(error=error))

        resp = await client.post("/api/analyze", json={"content": "제1조 ..."})

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "AI 분석 서비스에서 오류가 발생했습니다.",
            "details": "invalid x-api-key",
        }

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        resp = await client.post(
            "/api/analyze",
            json={"content": "제1조 ..."},
            headers={"X-Request-ID": "req-123"},
        )
        assert resp.headers["X-Request-ID"] == "req-123"


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_limit_exceeded(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        limiter.reset()
        limiter.enabled = True
        try:
            headers = {"X-Forwarded-For": "203.0.113.7"}
            statuses = [
                (await client.post("/api/analyze", json={"content": "제1조 ..."}, headers=headers)).status_code
                for _ in range(21)
            ]
        finally:
            limiter.enabled = False
            limiter.reset()

        assert statuses[:20] == [200] * 20
        assert statuses[20] == 429


class TestServiceEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_metrics(self, client: AsyncClient):
        _override(FakeProvider(text=PROVIDER_TEXT))
        await client.post("/api/analyze", json={"content": "제1조 ..."})

        resp = await client.get("/metrics")

        assert resp.status_code == 200
        assert "analysis_requests_total" in resp.text
        assert "http_requests_total" in resp.text
