"""Schemas for the analysis and voice report endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    song_name: str = Field(alias="songName", min_length=1)
    audio_data: Optional[str] = Field(default=None, alias="audioData")
    demo_id: Optional[Any] = Field(default=None, alias="demoId")

    model_config = ConfigDict(populate_by_name=True)


class AnalyzeResponse(BaseModel):
    analysis: str


class ReportDemo(BaseModel):
    name: Optional[str] = None
    id: Optional[Any] = None

    @property
    def display_name(self) -> str:
        return (self.name or "").strip() or "Untitled"


class VoiceReportRequest(BaseModel):
    demos: list[ReportDemo] = Field(default_factory=list)
