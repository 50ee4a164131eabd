"""Service layer for the demo catalogue, uploads and analysis."""

from .analysis import MIN_REPORT_DEMOS, ReportRequestError, VocalAnalysisService
from .llm_client import CompletionConfigError, OpenAiChatClient, UpstreamCompletionError
from .registry import DemoNotFoundError, DemoRegistry, audio_key, cover_key
from .response_contract import REPORT_PLACEHOLDER, VoiceReport, parse_voice_report
from .uploads import ChunkReassembler, CompletedUpload, InvalidChunkError, MissingChunkError

__all__ = [
    "ChunkReassembler",
    "CompletedUpload",
    "CompletionConfigError",
    "DemoNotFoundError",
    "DemoRegistry",
    "InvalidChunkError",
    "MIN_REPORT_DEMOS",
    "MissingChunkError",
    "OpenAiChatClient",
    "REPORT_PLACEHOLDER",
    "ReportRequestError",
    "UpstreamCompletionError",
    "VocalAnalysisService",
    "VoiceReport",
    "audio_key",
    "cover_key",
    "parse_voice_report",
]
