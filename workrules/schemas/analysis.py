"""Pydantic schemas for the document analysis API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from workrules.analysis.types import AnalysisResult, RiskLevel


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class AnalyzeRequestBody(BaseModel):
    """Upload payload from the presentation layer.

    ``content`` is optional at the schema level so an empty or missing value
    reaches the pipeline and comes back as a ValidationError envelope.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: str | None = Field(None, description="Plain text extracted from the uploaded document")
    file_name: str | None = Field(None, alias="fileName", description="Original file name")


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class SummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_issues: int = Field(alias="totalIssues", ge=0)
    risk_level: RiskLevel = Field(alias="riskLevel")
    compliance_score: int = Field(alias="complianceScore", ge=0, le=100)


class AnalysisResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    analyzed_at: datetime = Field(alias="analyzedAt")
    analysis: str
    summary: SummaryResponse

    @classmethod
    def from_result(cls, result: AnalysisResult) -> AnalysisResultResponse:
        return cls(
            file_name=result.file_name,
            analyzed_at=result.analyzed_at,
            analysis=result.analysis,
            summary=SummaryResponse(
                total_issues=result.summary.total_issues,
                risk_level=result.summary.risk_level,
                compliance_score=result.summary.compliance_score,
            ),
        )


class ErrorResponse(BaseModel):
    """Error envelope for every failed request."""

    error: str
    details: str | None = None
