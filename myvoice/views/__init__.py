"""Pydantic schemas used as views in the MVC architecture."""

from .analysis import (
    AnalyzeRequest,
    AnalyzeResponse,
    ReportDemo,
    VoiceReportRequest,
)
from .auth import OwnerLoginRequest, OwnerSessionResponse, TokenResponse
from .common import ErrorResponse, SuccessResponse
from .demos import (
    DemoCreate,
    DemoCreateRequest,
    DemoListResponse,
    DemoPatch,
    DemoResponse,
    DemoUpdateRequest,
    UploadAbortResponse,
    UploadChunkResponse,
    UploadCompleteRequest,
    UploadCompleteResponse,
)

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "DemoCreate",
    "DemoCreateRequest",
    "DemoListResponse",
    "DemoPatch",
    "DemoResponse",
    "DemoUpdateRequest",
    "ErrorResponse",
    "OwnerLoginRequest",
    "OwnerSessionResponse",
    "ReportDemo",
    "SuccessResponse",
    "TokenResponse",
    "UploadAbortResponse",
    "UploadChunkResponse",
    "UploadCompleteRequest",
    "UploadCompleteResponse",
    "VoiceReportRequest",
]
