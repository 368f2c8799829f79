"""Core types and DTOs for the provider gateway."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class RequestStatus(str, Enum):
    """Terminal status of a single provider call."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    VENDOR_ERROR = "vendor_error"  # Non-2xx answer from the provider
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"  # Connection refused, reset, dropped mid-request
    MALFORMED = "malformed"  # 2xx but no content[0].text in the envelope


@dataclass
class GatewayRequest:
    """A single prompt to send to the analysis provider."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])
    model: str = ""  # e.g. "claude-3-5-sonnet-20241022"
    user_prompt: str = ""
    max_tokens: int = 4000


@dataclass
class GatewayResponse:
    """Normalized outcome of a provider call.

    Adapters never raise for provider-side failures; they set ``status``
    and the error fields instead.
    """

    request_id: str = ""
    model_version: str = ""  # Actual model reported by the provider
    status: RequestStatus = RequestStatus.SUCCESS

    # Content
    raw_response_text: str = ""
    stop_reason: str = ""

    # Performance
    latency_ms: int = 0

    # Tokens
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    # Timestamps
    started_at: datetime | None = None
    completed_at: datetime | None = None

    # Error details (if status != SUCCESS)
    error_code: str = ""  # e.g. "429", "529", "overloaded_error"
    error_message: str = ""  # Provider's own message when it sent one

    @property
    def is_success(self) -> bool:
        return self.status == RequestStatus.SUCCESS

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for logging."""
        return {
            "request_id": self.request_id,
            "model_version": self.model_version,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
