"""StudioClient driven against the app through the test client."""

from __future__ import annotations

import httpx
import pytest
from pydantic import SecretStr

from myvoice.client import (
    AnalysisCache,
    NotEnoughDemosError,
    StudioClient,
    UploadError,
    VOICE_REPORT_CACHE_KEY,
    analysis_cache_key,
)
from myvoice.client.placeholders import (
    PLACEHOLDER_NOTE,
    REPORT_PLACEHOLDER_NOTE,
    build_placeholder_analysis,
    placeholder_scores,
)
from myvoice.config.settings import settings
from myvoice.controllers.dependencies import get_completion_client
from myvoice.main import app
from myvoice.services import OpenAiChatClient


def _override_completion(handler) -> None:
    config = settings.openai.model_copy(update={"api_key": SecretStr("test-key")})
    app.dependency_overrides[get_completion_client] = lambda: OpenAiChatClient(
        config,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def studio(client, owner_headers) -> StudioClient:
    studio = StudioClient(client, chunk_size=4, cache=AnalysisCache())
    studio.use_password(owner_headers["X-Owner-Password"])
    return studio


def test_upload_streams_chunks_and_lists_demo(studio):
    audio = b"0123456789abcdef-tail"

    demo = studio.upload_demo("Chunked", audio, filename="chunked.mp3")

    assert demo["audioSize"] == len(audio)
    assert studio.list_demos()[0]["id"] == demo["id"]
    assert studio.fetch_blob(demo["id"]) == audio
    assert studio.fetch_blob(demo["id"], "cover") is None


def test_upload_with_cover_then_delete(studio):
    demo = studio.upload_demo(
        "With cover",
        b"abc",
        filename="c.mp3",
        cover=b"jpeg-bytes",
    )
    assert demo["coverType"] == "uploaded"
    assert studio.fetch_blob(demo["id"], "cover") == b"jpeg-bytes"

    studio.cache.set(analysis_cache_key(demo["id"]), "cached")
    studio.delete_demo(demo["id"])

    assert studio.list_demos() == []
    assert studio.cache.get(analysis_cache_key(demo["id"])) is None


def test_bad_password_fails_at_init(client):
    studio = StudioClient(client, chunk_size=4)
    studio.use_password("wrong")

    with pytest.raises(UploadError) as excinfo:
        studio.upload_demo("Denied", b"data", filename="x.mp3")

    assert excinfo.value.step == "Init upload"
    assert excinfo.value.status_code == 401
    assert studio.list_demos() == []


def test_empty_audio_is_rejected_locally(studio):
    with pytest.raises(ValueError):
        studio.upload_demo("Empty", b"", filename="e.mp3")


def test_login_switches_to_token(client, owner_headers):
    studio = StudioClient(client, chunk_size=4)
    assert not studio.is_owner
    studio.login(owner_headers["X-Owner-Password"])
    assert studio.is_owner

    demo = studio.edit_demo(studio.upload_demo("Token", b"xyz", filename="t.mp3")["id"], name="Renamed")
    assert demo["name"] == "Renamed"


def test_analysis_is_cached_after_success(studio):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "Great breath control"}}]})

    _override_completion(handler)
    demo = {"id": "17", "name": "Cached"}

    assert studio.analyze(demo) == "Great breath control"
    assert studio.analyze(demo) == "Great breath control"
    assert len(calls) == 1

    studio.analyze(demo, regenerate=True)
    assert len(calls) == 2


def test_analysis_failure_returns_placeholder_without_caching(studio):
    _override_completion(lambda request: httpx.Response(503, text="unavailable"))
    demo = {"id": "99", "name": "Offline"}

    text = studio.analyze(demo)

    assert text == build_placeholder_analysis(demo)
    assert text.startswith("Song: Offline")
    assert text.endswith(PLACEHOLDER_NOTE)
    assert studio.cache.get(analysis_cache_key("99")) is None


def test_voice_report_needs_three_demos_locally(studio):
    with pytest.raises(NotEnoughDemosError):
        studio.voice_report([{"id": "1", "name": "a"}, {"id": "2", "name": "b"}])


def test_voice_report_failure_returns_placeholder(studio):
    _override_completion(lambda request: httpx.Response(500, text="boom"))
    demos = [{"id": str(i), "name": f"Song {i}"} for i in range(3)]

    report = studio.voice_report(demos)

    assert report["talent"].startswith(REPORT_PLACEHOLDER_NOTE)
    assert len(report) == 8
    assert studio.cache.get(VOICE_REPORT_CACHE_KEY) is None


def test_placeholder_scores_are_stable():
    scores = placeholder_scores("1712345678901")
    assert scores == placeholder_scores("1712345678901")
    assert len(scores) == 12
    assert all(0.0 <= score <= 10.0 for score in scores)


def test_failed_regeneration_clears_stale_cache(studio):
    demo = {"id": "31", "name": "Stale"}
    demos = [{"id": str(i), "name": f"Song {i}"} for i in range(3)]
    studio.cache.set(analysis_cache_key("31"), "old analysis")
    studio.cache.set(VOICE_REPORT_CACHE_KEY, '{"talent": "old"}')
    _override_completion(lambda request: httpx.Response(502, text="bad gateway"))

    assert studio.analyze(demo, regenerate=True) == build_placeholder_analysis(demo)
    assert studio.voice_report(demos, regenerate=True)["talent"].startswith(REPORT_PLACEHOLDER_NOTE)

    assert studio.cache.get(analysis_cache_key("31")) is None
    assert studio.cache.get(VOICE_REPORT_CACHE_KEY) is None
