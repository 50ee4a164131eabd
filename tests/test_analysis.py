"""Analysis and voice report endpoints against a mocked completion API."""

from __future__ import annotations

import json

import httpx
import pytest
from pydantic import SecretStr

from myvoice.config.settings import settings
from myvoice.controllers.dependencies import get_completion_client
from myvoice.main import app
from myvoice.services import OpenAiChatClient, REPORT_PLACEHOLDER, parse_voice_report
from myvoice.services.prompt_builder import NO_AUDIO_NOTE, REPORT_KEYS


class CompletionRecorder:
    """Answers chat completion calls with a canned reply and records requests."""

    def __init__(self, content: str = "ok", status_code: int = 200, body: str | None = None) -> None:
        self.content = content
        self.status_code = status_code
        self.body = body
        self.requests: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            {
                "path": request.url.path,
                "authorization": request.headers.get("authorization"),
                "json": json.loads(request.content),
            }
        )
        if self.status_code != 200:
            return httpx.Response(self.status_code, text=self.body or "")
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": self.content}}]},
        )


@pytest.fixture
def completion():
    recorder = CompletionRecorder()
    config = settings.openai.model_copy(update={"api_key": SecretStr("test-key")})
    app.dependency_overrides[get_completion_client] = lambda: OpenAiChatClient(
        config,
        transport=httpx.MockTransport(recorder),
    )
    yield recorder
    app.dependency_overrides.pop(get_completion_client, None)


def test_analyze_without_audio_uses_text_model(client, completion):
    completion.content = "## Breath control\n8/10"

    response = client.post("/api/analyze", json={"songName": "Skyline", "demoId": 12})

    assert response.status_code == 200
    assert response.json() == {"analysis": "## Breath control\n8/10"}
    sent = completion.requests[0]
    assert sent["path"].endswith("/chat/completions")
    assert sent["authorization"] == "Bearer test-key"
    assert sent["json"]["model"] == settings.openai.model
    user_message = sent["json"]["messages"][1]["content"]
    assert user_message.startswith("Song name: Skyline")
    assert user_message.endswith(NO_AUDIO_NOTE)


def test_analyze_with_audio_uses_audio_model(client, completion):
    response = client.post("/api/analyze", json={"songName": "Skyline", "audioData": "SUQz"})

    assert response.status_code == 200
    sent = completion.requests[0]["json"]
    assert sent["model"] == settings.openai.audio_model
    parts = sent["messages"][1]["content"]
    assert parts[1] == {"type": "input_audio", "input_audio": {"data": "SUQz", "format": "mp3"}}


def test_analyze_requires_song_name(client, completion):
    response = client.post("/api/analyze", json={"songName": ""})
    assert response.status_code == 400
    assert completion.requests == []


def test_upstream_error_is_reported_with_details(client, completion):
    completion.status_code = 429
    completion.body = '{"error": "rate limited"}'

    response = client.post("/api/analyze", json={"songName": "Skyline"})

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["error"] == "OpenAI error (429)"
    assert "rate limited" in detail["details"]


def test_missing_api_key_is_server_error(client):
    config = settings.openai.model_copy(update={"api_key": None})
    app.dependency_overrides[get_completion_client] = lambda: OpenAiChatClient(config)

    response = client.post("/api/analyze", json={"songName": "Skyline"})

    assert response.status_code == 500
    assert "OPENAI_API_KEY" in response.json()["detail"]


def test_voice_report_needs_three_demos(client, completion):
    response = client.post(
        "/api/voice-report",
        json={"demos": [{"name": "One"}, {"name": "Two"}]},
    )

    assert response.status_code == 400
    assert completion.requests == []


def test_voice_report_parses_fenced_json(client, completion):
    report = {key: f"{key} text" for key in REPORT_KEYS}
    completion.content = "```json\n" + json.dumps(report) + "\n```"

    response = client.post(
        "/api/voice-report",
        json={"demos": [{"name": "One"}, {"name": "Two"}, {"name": ""}]},
    )

    assert response.status_code == 200
    assert response.json() == report
    prompt = completion.requests[0]["json"]["messages"][1]["content"]
    assert "The songs are: One, Two, Untitled." in prompt


def test_voice_report_prose_falls_back(client, completion):
    completion.content = "Your voice is lovely but this is not JSON."

    response = client.post(
        "/api/voice-report",
        json={"demos": [{"name": "A"}, {"name": "B"}, {"name": "C"}]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["talent"] == "Your voice is lovely but this is not JSON."
    assert all(body[key] == REPORT_PLACEHOLDER for key in REPORT_KEYS[1:])


def test_non_object_json_falls_back():
    report = parse_voice_report("[1, 2, 3]")
    assert report.talent == "[1, 2, 3]"
    assert report.direction_go == REPORT_PLACEHOLDER
