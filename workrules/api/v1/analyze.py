"""API endpoint for workplace-rules document analysis.

Provides:
  - POST /analyze — analyze one document's text and return the assessment
"""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as SettingsError

from workrules.analysis.pipeline import DocumentAnalyzer
from workrules.analysis.types import AnalysisRequest
from workrules.core.config import get_settings, settings
from workrules.core.rate_limit import limiter
from workrules.schemas.analysis import AnalysisResultResponse, AnalyzeRequestBody, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


def get_document_analyzer() -> DocumentAnalyzer:
    """Build an analyzer from the current environment, once per request.

    Invalid settings do not fail the dependency. They come back as a
    ConfigError from the analyzer, after the request content is validated.
    """
    try:
        current = get_settings()
    except SettingsError as e:
        details = "; ".join(f"{'.'.join(str(p) for p in err['loc']).upper()}: {err['msg']}" for err in e.errors())
        logger.error("Invalid settings: %s", details)
        return DocumentAnalyzer.misconfigured(details)
    return DocumentAnalyzer.from_settings(current)


@router.post(
    "/analyze",
    response_model=AnalysisResultResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.analyze_rate_limit)
async def analyze_document(
    request: Request,
    body: AnalyzeRequestBody,
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer),
):
    """Analyze an uploaded workplace-rules document.

    Failures are raised as AnalysisError subclasses and rendered into
    ``{error, details}`` envelopes by the application's exception handlers.
    """
    result = await analyzer.analyze(AnalysisRequest(content=body.content, file_name=body.file_name))
    return AnalysisResultResponse.from_result(result)
