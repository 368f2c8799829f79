"""Vendor adapter — protocol-level handling for the Anthropic Messages API.

The adapter translates a GatewayRequest into the vendor's HTTP protocol,
sends it, and returns a GatewayResponse with normalized fields.

Anthropic specifics:
  - Auth via ``x-api-key`` plus a pinned ``anthropic-version`` header
  - Answer text lives in ``content[0].text``
  - Error bodies look like ``{"type": "error", "error": {"type": ..., "message": ...}}``
  - 529 means the API is overloaded; treated like 429 (rate limited)
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import httpx

from workrules.gateway.types import (
    GatewayRequest,
    GatewayResponse,
    RequestStatus,
    utcnow,
)

logger = logging.getLogger(__name__)


class BaseVendorAdapter(ABC):
    """Base class for vendor adapters."""

    def __init__(self, api_key: str, **kwargs):
        self.api_key = api_key

    @abstractmethod
    async def send(self, request: GatewayRequest, timeout: float = 60.0) -> GatewayResponse:
        """Send a request to the vendor and return a normalized response."""
        ...

    def _base_response(self, request: GatewayRequest) -> GatewayResponse:
        """Create a base response with context from the request."""
        return GatewayResponse(request_id=request.request_id, started_at=utcnow())


def _error_message(resp: httpx.Response) -> str:
    """Pull the provider's own error message out of an error body, if any."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:500]
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return resp.text[:500]


def _error_type(resp: httpx.Response) -> str:
    try:
        error = resp.json().get("error")
    except (ValueError, AttributeError):
        return ""
    return error.get("type", "") if isinstance(error, dict) else ""


class AnthropicAdapter(BaseVendorAdapter):
    """Anthropic Messages API adapter (single user message, no streaming)."""

    default_model = "claude-3-5-sonnet-20241022"
    api_url = "https://api.anthropic.com/v1/messages"
    api_version = "2023-06-01"

    def __init__(self, api_key: str, api_url: str | None = None, api_version: str | None = None, **kwargs):
        super().__init__(api_key, **kwargs)
        if api_url:
            self.api_url = api_url
        if api_version:
            self.api_version = api_version

    def build_payload(self, request: GatewayRequest) -> dict:
        return {
            "model": request.model or self.default_model,
            "max_tokens": request.max_tokens,
            "messages": [{"role": "user", "content": request.user_prompt}],
        }

    def build_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }

    async def send(self, request: GatewayRequest, timeout: float = 120.0) -> GatewayResponse:
        response = self._base_response(request)
        payload = self.build_payload(request)
        start = time.monotonic()

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.post(self.api_url, json=payload, headers=self.build_headers())

            response.latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code in (429, 529):
                response.status = RequestStatus.RATE_LIMITED
                response.error_code = str(resp.status_code)
                response.error_message = _error_message(resp)
                return response

            resp.raise_for_status()
            data = resp.json()

            text = data["content"][0]["text"]
            if not isinstance(text, str):
                raise TypeError(f"content[0].text is {type(text).__name__}, expected str")

            response.raw_response_text = text
            response.model_version = data.get("model", payload["model"])
            response.stop_reason = data.get("stop_reason") or ""

            usage = data.get("usage") or {}
            response.input_tokens = usage.get("input_tokens", 0)
            response.output_tokens = usage.get("output_tokens", 0)
            response.total_tokens = response.input_tokens + response.output_tokens

            response.status = RequestStatus.SUCCESS
            response.completed_at = utcnow()

        except httpx.TimeoutException:
            response.status = RequestStatus.TIMEOUT
            response.error_message = f"Anthropic timeout after {timeout}s"
            response.latency_ms = int((time.monotonic() - start) * 1000)
        except httpx.HTTPStatusError as e:
            response.status = RequestStatus.VENDOR_ERROR
            response.error_code = _error_type(e.response) or str(e.response.status_code)
            response.error_message = _error_message(e.response)
            response.latency_ms = int((time.monotonic() - start) * 1000)
        except httpx.TransportError as e:
            response.status = RequestStatus.TRANSPORT_ERROR
            response.error_message = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
            response.latency_ms = int((time.monotonic() - start) * 1000)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            response.status = RequestStatus.MALFORMED
            response.error_message = f"Malformed Anthropic response: {type(e).__name__}: {e}"
            response.latency_ms = int((time.monotonic() - start) * 1000)

        if not response.is_success:
            logger.warning("Anthropic request failed: %s", response.to_dict())
        return response
