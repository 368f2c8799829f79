"""Error taxonomy for the analysis pipeline.

Every failure surfaced to a caller is one of three kinds:
  - ValidationError: caller input malformed or empty (400)
  - ConfigError: deployment misconfiguration, e.g. missing API key (500)
  - ProviderError: the analysis provider failed or answered malformed (500)
"""

from __future__ import annotations

from typing import Any


class AnalysisError(Exception):
    """Base class for all errors returned by the analysis pipeline."""

    status_code: int = 500
    kind: str = "analysis_error"

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Error envelope returned to the presentation layer."""
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AnalysisError):
    status_code = 400
    kind = "validation_error"


class ConfigError(AnalysisError):
    status_code = 500
    kind = "config_error"


class ProviderError(AnalysisError):
    """Raised when the provider call fails or returns no usable text."""

    status_code = 500
    kind = "provider_error"

    @property
    def provider_details(self) -> str | None:
        return self.details
