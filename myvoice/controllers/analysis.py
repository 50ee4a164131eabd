"""Vocal analysis and voice report endpoints backed by the completion API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status

from myvoice.controllers.dependencies import AnalysisServiceDep
from myvoice.services import (
    CompletionConfigError,
    ReportRequestError,
    UpstreamCompletionError,
)
from myvoice.views import AnalyzeRequest, AnalyzeResponse, VoiceReportRequest

router = APIRouter(prefix="/api", tags=["analysis"])

logger = logging.getLogger(__name__)


def _completion_failure(exc: Exception) -> HTTPException:
    if isinstance(exc, UpstreamCompletionError):
        detail: Any = {"error": str(exc), "details": exc.body}
    else:
        detail = str(exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_demo(payload: AnalyzeRequest, service: AnalysisServiceDep) -> AnalyzeResponse:
    """Produce a markdown vocal analysis for one demo."""

    try:
        analysis = await service.analyze(payload.song_name, payload.audio_data)
    except (UpstreamCompletionError, CompletionConfigError) as exc:
        logger.error("Analysis failed song=%s: %s", payload.song_name, exc)
        raise _completion_failure(exc) from exc
    return AnalyzeResponse(analysis=analysis)


@router.post("/voice-report")
async def voice_report(payload: VoiceReportRequest, service: AnalysisServiceDep) -> dict[str, Any]:
    """Produce the eight-section voice report across at least three demos."""

    names = [demo.display_name for demo in payload.demos]
    try:
        report = await service.voice_report(names)
    except ReportRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (UpstreamCompletionError, CompletionConfigError) as exc:
        logger.error("Voice report failed demos=%s: %s", len(names), exc)
        raise _completion_failure(exc) from exc
    return report.to_payload()
