"""Parsing of the voice report returned by the completion API.

The report is requested as strict JSON, but the model may wrap it in code
fences or answer in prose. Unparseable content is not an error: it degrades
to a report whose first section carries the raw text and whose other
sections hold ``REPORT_PLACEHOLDER``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from myvoice.services.prompt_builder import REPORT_KEYS

logger = logging.getLogger(__name__)

REPORT_PLACEHOLDER = "See above"


class VoiceReport(BaseModel):
    talent: Any = ""
    genre: Any = ""
    direction_go: Any = Field(default="", alias="directionGo")
    direction_avoid: Any = Field(default="", alias="directionAvoid")
    similar: Any = ""
    strengths: Any = ""
    weaknesses: Any = ""
    exercises: Any = ""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def fallback_report(raw_text: str) -> VoiceReport:
    """Place the raw model output first and mark every other section."""

    first, *rest = REPORT_KEYS
    values = {first: raw_text, **{key: REPORT_PLACEHOLDER for key in rest}}
    return VoiceReport.model_validate(values)


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code fences around a JSON document."""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_voice_report(raw_text: str) -> VoiceReport:
    cleaned = _clean_json_payload(raw_text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("Voice report was not valid JSON, using fallback: %s", exc)
        return fallback_report(raw_text)
    if not isinstance(data, dict):
        logger.warning("Voice report JSON was %s, not an object; using fallback", type(data).__name__)
        return fallback_report(raw_text)
    return VoiceReport.model_validate(data)


__all__ = [
    "REPORT_PLACEHOLDER",
    "VoiceReport",
    "fallback_report",
    "parse_voice_report",
]
