"""Analysis Pipeline — orchestrator for one document review.

Chains the steps in order:
  1. Validate the request content
  2. Check the provider credential
  3. Build the evaluation prompt
  4. Call the analysis provider (single request, no retry)
  5. Derive the summary from the provider's text

Input:  AnalysisRequest (document text + optional file name)
Output: AnalysisResult, or one of ValidationError / ConfigError / ProviderError

The analyzer only holds immutable configuration, so one instance can serve
concurrent requests.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from workrules.analysis.scoring import RandomScorePolicy, ScorePolicy, get_score_policy, summarize
from workrules.analysis.types import AnalysisRequest, AnalysisResult
from workrules.core.exceptions import AnalysisError, ConfigError, ProviderError, ValidationError
from workrules.core.metrics import ANALYSIS_REQUESTS
from workrules.gateway.provider import AnalysisProvider, AnthropicAnalysisProvider
from workrules.prompt_engine.builder import build_prompt

if TYPE_CHECKING:
    from workrules.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "업로드문서"

EMPTY_CONTENT_MESSAGE = "분석할 내용이 없습니다."
MISSING_API_KEY_MESSAGE = "API 키가 설정되지 않았습니다."
INVALID_CONFIG_MESSAGE = "서버 설정이 올바르지 않습니다."
PROVIDER_FAILURE_MESSAGE = "AI 분석 중 오류가 발생했습니다."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentAnalyzer:
    """Runs the analysis pipeline for uploaded workplace-rules documents."""

    def __init__(
        self,
        api_key: str | None,
        provider: AnalysisProvider | None = None,
        score_policy: ScorePolicy | None = None,
        default_file_name: str = DEFAULT_FILE_NAME,
        clock: Callable[[], datetime] = _utcnow,
        config_problem: str | None = None,
    ):
        self._api_key = api_key or ""
        if provider is None and self._api_key:
            provider = AnthropicAnalysisProvider(api_key=self._api_key)
        self._provider = provider
        self._score_policy = score_policy or RandomScorePolicy()
        self._default_file_name = default_file_name
        self._clock = clock
        self._config_problem = config_problem

    @classmethod
    def from_settings(cls, settings: Settings, provider: AnalysisProvider | None = None) -> DocumentAnalyzer:
        """Build an analyzer with the credential and provider options from settings."""
        api_key = settings.anthropic_api_key
        if provider is None and api_key:
            provider = AnthropicAnalysisProvider(
                api_key=api_key,
                model=settings.anthropic_model,
                max_tokens=settings.anthropic_max_tokens,
                timeout=settings.provider_timeout_seconds,
                api_url=settings.anthropic_api_url,
                api_version=settings.anthropic_version,
            )
        try:
            score_policy = get_score_policy(settings.compliance_score_mode)
        except ValueError as e:
            return cls.misconfigured(str(e))
        return cls(
            api_key=api_key,
            provider=provider,
            score_policy=score_policy,
            default_file_name=settings.default_file_name,
        )

    @classmethod
    def misconfigured(cls, details: str) -> DocumentAnalyzer:
        """An analyzer that rejects valid requests with a ConfigError.

        Content is still validated first, so an empty upload gets the same
        400 whatever the server configuration.
        """
        return cls(api_key=None, config_problem=details)

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Analyze one document.

        Raises:
            ValidationError: content is missing or blank. The provider is not called.
            ConfigError: no API key is configured or the settings are invalid.
                The provider is not called.
            ProviderError: the provider call failed or returned no usable text.
        """
        try:
            result = await self._run(request)
        except AnalysisError as e:
            ANALYSIS_REQUESTS.labels(outcome=e.kind).inc()
            logger.warning("Analysis failed (%s): %s%s", e.kind, e.message, f" [{e.details}]" if e.details else "")
            raise
        ANALYSIS_REQUESTS.labels(outcome="completed").inc()
        return result

    async def analyze_document(self, content: str | None, file_name: str | None = None) -> AnalysisResult:
        """Convenience wrapper taking the caller's ``(documentText, fileName)`` pair."""
        return await self.analyze(AnalysisRequest(content=content, file_name=file_name))

    async def _run(self, request: AnalysisRequest) -> AnalysisResult:
        # Step 1: validate content
        content = request.content
        if not isinstance(content, str) or not content.strip():
            raise ValidationError(EMPTY_CONTENT_MESSAGE)

        # Step 2: configuration and credential
        if self._config_problem:
            raise ConfigError(INVALID_CONFIG_MESSAGE, details=self._config_problem)
        if not self._api_key or self._provider is None:
            raise ConfigError(MISSING_API_KEY_MESSAGE, details="ANTHROPIC_API_KEY is not set")

        file_name = request.file_name or self._default_file_name
        logger.info("Analyzing document %r (%d chars)", file_name, len(content))

        # Step 3: prompt
        prompt = build_prompt(content, request.file_name)

        # Step 4: provider call
        start = time.monotonic()
        try:
            analysis = await self._provider.generate_analysis_text(prompt)
        except ProviderError:
            raise
        except Exception as e:
            logger.exception("Provider raised unexpectedly")
            raise ProviderError(PROVIDER_FAILURE_MESSAGE, details=f"{type(e).__name__}: {e}") from e
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if not isinstance(analysis, str) or not analysis.strip():
            raise ProviderError(PROVIDER_FAILURE_MESSAGE, details="Provider returned no analysis text")

        # Step 5: summary
        summary = summarize(analysis, self._score_policy)

        logger.info(
            "Analysis complete for %r: issues=%d risk=%s score=%d (%dms)",
            file_name,
            summary.total_issues,
            summary.risk_level.value,
            summary.compliance_score,
            elapsed_ms,
        )

        return AnalysisResult(
            file_name=file_name,
            analyzed_at=self._clock(),
            analysis=analysis,
            summary=summary,
        )
