"""Python client for the MyVoice Studio API."""

from .placeholders import build_placeholder_analysis, build_placeholder_voice_report
from .studio import (
    AnalysisCache,
    NotEnoughDemosError,
    StudioClient,
    StudioRequestError,
    UploadError,
    VOICE_REPORT_CACHE_KEY,
    analysis_cache_key,
)

__all__ = [
    "AnalysisCache",
    "NotEnoughDemosError",
    "StudioClient",
    "StudioRequestError",
    "UploadError",
    "VOICE_REPORT_CACHE_KEY",
    "analysis_cache_key",
    "build_placeholder_analysis",
    "build_placeholder_voice_report",
]
