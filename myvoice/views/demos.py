"""Pydantic schemas for the demo catalogue endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from myvoice.domain.models import CoverType, Demo, normalize_demo_id


class DemoListResponse(BaseModel):
    demos: list[Demo]


class DemoResponse(BaseModel):
    demo: Demo


class DemoCreate(BaseModel):
    """Metadata accepted when registering a demo directly."""

    name: str = Field(min_length=1)
    audio_file: str = Field(default="", alias="audioFile")
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    cover_type: CoverType = Field(default=CoverType.RANDOM, alias="coverType")

    model_config = ConfigDict(populate_by_name=True)


class DemoCreateRequest(BaseModel):
    demo: DemoCreate


class DemoPatch(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    audio_file: Optional[str] = Field(default=None, alias="audioFile")
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    cover_type: Optional[CoverType] = Field(default=None, alias="coverType")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", "audio_file", "cover_type", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value


class DemoUpdateRequest(BaseModel):
    id: str
    updates: DemoPatch

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        return normalize_demo_id(value)


class UploadCompleteRequest(BaseModel):
    id: str
    total: int = Field(ge=1)
    content_type: str = Field(default="audio/mpeg", alias="contentType")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        return normalize_demo_id(value)


class UploadChunkResponse(BaseModel):
    id: str
    index: int
    total: int
    received: int


class UploadCompleteResponse(BaseModel):
    demo: Demo
    size: int
    chunks: int


class UploadAbortResponse(BaseModel):
    id: str
    removed: int


__all__ = [
    "DemoCreate",
    "DemoCreateRequest",
    "DemoListResponse",
    "DemoPatch",
    "DemoResponse",
    "DemoUpdateRequest",
    "UploadAbortResponse",
    "UploadChunkResponse",
    "UploadCompleteRequest",
    "UploadCompleteResponse",
]
