"""Vocal analysis and voice report generation over the completion API."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from myvoice.config.settings import OpenAIConfig
from myvoice.services.llm_client import OpenAiChatClient
from myvoice.services.prompt_builder import (
    NO_AUDIO_NOTE,
    build_analysis_prompts,
    build_report_prompts,
)
from myvoice.services.response_contract import VoiceReport, parse_voice_report

logger = logging.getLogger(__name__)

MIN_REPORT_DEMOS = 3
AUDIO_FORMAT = "mp3"


class ReportRequestError(ValueError):
    """Raised when a voice report is requested for too few demos."""


class VocalAnalysisService:
    def __init__(self, client: OpenAiChatClient, config: OpenAIConfig) -> None:
        self._client = client
        self._config = config

    async def analyze(self, song_name: str, audio_data: Optional[str] = None) -> str:
        """Analyze one demo; inline base64 audio switches to the audio model."""

        prompts = build_analysis_prompts(song_name)
        messages: list[dict[str, Any]] = [{"role": "system", "content": prompts.system_prompt}]
        if audio_data:
            model = self._config.audio_model
            messages.append(
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompts.user_prompt},
                        {
                            "type": "input_audio",
                            "input_audio": {"data": audio_data, "format": AUDIO_FORMAT},
                        },
                    ],
                }
            )
        else:
            model = self._config.model
            messages.append(
                {"role": "user", "content": f"{prompts.user_prompt}\n\n{NO_AUDIO_NOTE}"}
            )

        logger.info("Requesting analysis song=%s model=%s with_audio=%s", song_name, model, bool(audio_data))
        return await self._client.complete(
            model=model,
            messages=messages,
            max_tokens=self._config.analysis_max_tokens,
            operation="analyze",
        )

    async def voice_report(self, demo_names: Sequence[str]) -> VoiceReport:
        if len(demo_names) < MIN_REPORT_DEMOS:
            raise ReportRequestError(
                f"At least {MIN_REPORT_DEMOS} demos are required for a voice report"
            )

        prompts = build_report_prompts(demo_names)
        logger.info("Requesting voice report demos=%s model=%s", len(demo_names), self._config.model)
        content = await self._client.complete(
            model=self._config.model,
            messages=[
                {"role": "system", "content": prompts.system_prompt},
                {"role": "user", "content": prompts.user_prompt},
            ],
            max_tokens=self._config.report_max_tokens,
            operation="voice_report",
        )
        return parse_voice_report(content)


__all__ = ["MIN_REPORT_DEMOS", "ReportRequestError", "VocalAnalysisService"]
