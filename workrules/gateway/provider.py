"""Analysis provider capability.

The orchestrator only needs one thing from the outside world: turn a prompt
into analysis text. ``AnalysisProvider`` is that seam; the Anthropic
implementation sits on top of the vendor adapter and converts every
non-success outcome into a ProviderError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from workrules.core.exceptions import ProviderError
from workrules.core.metrics import PROVIDER_DURATION
from workrules.gateway.types import GatewayRequest, RequestStatus
from workrules.gateway.vendor_adapters import AnthropicAdapter

logger = logging.getLogger(__name__)

# User-facing messages per failure status
_FAILURE_MESSAGES: dict[RequestStatus, str] = {
    RequestStatus.RATE_LIMITED: "AI 분석 서비스 요청 한도를 초과했습니다. 잠시 후 다시 시도해주세요.",
    RequestStatus.VENDOR_ERROR: "AI 분석 서비스에서 오류가 발생했습니다.",
    RequestStatus.TIMEOUT: "AI 분석 서비스 응답 시간이 초과되었습니다.",
    RequestStatus.TRANSPORT_ERROR: "AI 분석 서비스에 연결할 수 없습니다.",
    RequestStatus.MALFORMED: "AI 분석 서비스의 응답 형식이 올바르지 않습니다.",
}
_GENERIC_FAILURE = "AI 분석 서비스 호출에 실패했습니다."
EMPTY_ANSWER_MESSAGE = "AI 분석 결과를 받지 못했습니다."


class AnalysisProvider(ABC):
    """Single-method capability: prompt in, analysis text out."""

    @abstractmethod
    async def generate_analysis_text(self, prompt: str) -> str:
        """Return the provider's free-text answer or raise ProviderError."""
        ...


class AnthropicAnalysisProvider(AnalysisProvider):
    """Analysis provider backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = AnthropicAdapter.default_model,
        max_tokens: int = 4000,
        timeout: float = 120.0,
        api_url: str | None = None,
        api_version: str | None = None,
    ):
        self.adapter = AnthropicAdapter(api_key=api_key, api_url=api_url, api_version=api_version)
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def generate_analysis_text(self, prompt: str) -> str:
        request = GatewayRequest(model=self.model, user_prompt=prompt, max_tokens=self.max_tokens)
        response = await self.adapter.send(request, timeout=self.timeout)
        PROVIDER_DURATION.observe(response.latency_ms / 1000)

        if not response.is_success:
            raise ProviderError(
                _FAILURE_MESSAGES.get(response.status, _GENERIC_FAILURE),
                details=response.error_message or None,
            )

        if not response.raw_response_text.strip():
            raise ProviderError(EMPTY_ANSWER_MESSAGE, details=f"stop_reason={response.stop_reason or 'unknown'}")

        logger.info(
            "Provider answered: request=%s model=%s latency=%dms tokens=%d",
            response.request_id,
            response.model_version,
            response.latency_ms,
            response.total_tokens,
        )
        return response.raw_response_text
