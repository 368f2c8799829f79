"""Core types and DTOs for the document analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RiskLevel(str, Enum):
    """Coarse legal-compliance risk tier derived from the analysis text."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisRequest:
    """One uploaded document, already reduced to plain text by the caller."""

    content: str | None = None
    file_name: str | None = None


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Summary:
    """Headline metrics shown on the dashboard."""

    total_issues: int = 0
    risk_level: RiskLevel = RiskLevel.LOW
    compliance_score: int = 0  # 0–100


@dataclass(frozen=True)
class AnalysisResult:
    """Completed analysis of one document. Immutable once built."""

    file_name: str
    analyzed_at: datetime
    analysis: str  # Provider's free-text report
    summary: Summary
