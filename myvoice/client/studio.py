"""HTTP client mirroring the browser's MyVoice Studio flows.

Uploads go through the three-step chunked protocol. Analysis and voice
report calls never surface errors to the caller: failures fall back to
labeled placeholders, and only genuine results are cached.
"""

from __future__ import annotations

import base64
import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import httpx

from myvoice.config.settings import settings
from myvoice.services.analysis import MIN_REPORT_DEMOS

from .placeholders import build_placeholder_analysis, build_placeholder_voice_report

logger = logging.getLogger(__name__)

OWNER_PASSWORD_HEADER = "X-Owner-Password"
VOICE_REPORT_CACHE_KEY = "voiceReportCache"
ERROR_SNIPPET_LENGTH = 180


class UploadError(RuntimeError):
    """Raised when a step of the chunked upload flow fails."""

    def __init__(self, step: str, status_code: int, message: str) -> None:
        super().__init__(f"{step} failed ({status_code}): {message[:ERROR_SNIPPET_LENGTH]}")
        self.step = step
        self.status_code = status_code
        self.message = message


class StudioRequestError(RuntimeError):
    """Raised when a non-upload owner call is rejected."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Request failed ({status_code}): {message[:ERROR_SNIPPET_LENGTH]}")
        self.status_code = status_code


class NotEnoughDemosError(ValueError):
    """Raised locally before asking for a report on too few demos."""


def analysis_cache_key(demo_id: Any) -> str:
    return f"analysis:{demo_id}"


class AnalysisCache:
    """String key-value cache, optionally persisted to a JSON file."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._values: dict[str, str] = {}
        if path is not None and path.exists():
            self._values = json.loads(path.read_text(encoding="utf-8"))

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        self._values.pop(key, None)
        self._flush()

    def _flush(self) -> None:
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._values), encoding="utf-8")


class StudioClient:
    def __init__(
        self,
        http: httpx.Client,
        *,
        chunk_size: int | None = None,
        cache: AnalysisCache | None = None,
    ) -> None:
        self._http = http
        self._chunk_size = chunk_size or settings.uploads.chunk_size
        self.cache = cache or AnalysisCache()
        self._owner_headers: dict[str, str] = {}

    @classmethod
    def connect(cls, base_url: str, *, timeout: float = 120.0, **kwargs: Any) -> "StudioClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout), **kwargs)

    # Owner session -------------------------------------------------------

    def login(self, password: str) -> str:
        """Trade the owner password for a token and use it from now on."""

        response = self._http.post("/api/owner/login", json={"password": password})
        if not response.is_success:
            raise StudioRequestError(response.status_code, response.text)
        token = response.json()["accessToken"]
        self._owner_headers = {"Authorization": f"Bearer {token}"}
        return token

    def use_password(self, password: str) -> None:
        self._owner_headers = {OWNER_PASSWORD_HEADER: password}

    def logout(self) -> None:
        self._owner_headers = {}

    @property
    def is_owner(self) -> bool:
        return bool(self._owner_headers)

    # Catalogue -----------------------------------------------------------

    def list_demos(self) -> list[dict[str, Any]]:
        response = self._http.get("/api/demos")
        response.raise_for_status()
        return response.json().get("demos", [])

    def fetch_blob(self, demo_id: Any, blob_type: str = "audio") -> Optional[bytes]:
        response = self._http.get("/api/demo-audio", params={"id": str(demo_id), "type": blob_type})
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.content

    def upload_demo(
        self,
        name: str,
        audio: bytes,
        *,
        filename: str,
        content_type: str = "audio/mpeg",
        cover: bytes | None = None,
        cover_filename: str = "cover.jpg",
        cover_content_type: str = "image/jpeg",
        cover_url: str | None = None,
    ) -> dict[str, Any]:
        """Register a demo, stream its audio in chunks and finalize it."""

        if not audio:
            raise ValueError("audio payload is empty")

        init_data: dict[str, str] = {"name": name, "audioFile": filename}
        files: dict[str, Any] = {}
        if cover is not None:
            init_data["coverType"] = "uploaded"
            files["cover"] = (cover_filename, cover, cover_content_type)
        else:
            init_data["coverType"] = "random"
            if cover_url:
                init_data["coverUrl"] = cover_url

        response = self._http.post(
            "/api/upload-demo-init",
            data=init_data,
            files=files or None,
            headers=self._owner_headers,
        )
        if not response.is_success:
            raise UploadError("Init upload", response.status_code, response.text)
        demo_id = (response.json().get("demo") or {}).get("id")
        if not demo_id:
            raise UploadError("Init upload", response.status_code, "missing demo id")

        total = math.ceil(len(audio) / self._chunk_size)
        for index in range(total):
            chunk = audio[index * self._chunk_size : (index + 1) * self._chunk_size]
            response = self._http.post(
                "/api/upload-audio-chunk",
                data={
                    "id": str(demo_id),
                    "index": str(index),
                    "total": str(total),
                    "contentType": content_type,
                },
                files={"chunk": (f"chunk-{index}", chunk, "application/octet-stream")},
                headers=self._owner_headers,
            )
            if not response.is_success:
                raise UploadError(f"Chunk {index + 1}/{total}", response.status_code, response.text)

        response = self._http.post(
            "/api/upload-audio-complete",
            json={"id": str(demo_id), "total": total, "contentType": content_type},
            headers=self._owner_headers,
        )
        if not response.is_success:
            raise UploadError("Finalize", response.status_code, response.text)
        logger.info("Uploaded demo id=%s chunks=%s", demo_id, total)
        return response.json()["demo"]

    def edit_demo(
        self,
        demo_id: Any,
        *,
        name: str | None = None,
        cover: bytes | None = None,
        cover_filename: str = "cover.jpg",
        cover_content_type: str = "image/jpeg",
        cover_url: str | None = None,
    ) -> dict[str, Any]:
        data: dict[str, str] = {"id": str(demo_id)}
        files: dict[str, Any] = {}
        if name is not None:
            data["name"] = name
        if cover is not None:
            data["coverType"] = "uploaded"
            files["cover"] = (cover_filename, cover, cover_content_type)
        elif cover_url:
            data.update(coverType="random", coverUrl=cover_url)

        response = self._http.post(
            "/api/update-demo",
            data=data,
            files=files or None,
            headers=self._owner_headers,
        )
        if not response.is_success:
            raise StudioRequestError(response.status_code, response.text)
        return response.json()["demo"]

    def delete_demo(self, demo_id: Any) -> None:
        response = self._http.delete(
            "/api/demos",
            params={"id": str(demo_id)},
            headers=self._owner_headers,
        )
        if not response.is_success:
            raise StudioRequestError(response.status_code, response.text)
        self.cache.remove(analysis_cache_key(demo_id))

    # Analysis ------------------------------------------------------------

    def analyze(
        self,
        demo: Mapping[str, Any],
        *,
        audio: bytes | None = None,
        regenerate: bool = False,
    ) -> str:
        """Return the cached analysis, or request one; never raises."""

        key = analysis_cache_key(demo.get("id"))
        if regenerate:
            self.cache.remove(key)
        else:
            cached = self.cache.get(key)
            if cached:
                return cached

        payload: dict[str, Any] = {
            "songName": demo.get("name") or demo.get("audioFile") or "Untitled",
            "demoId": demo.get("id"),
            "audioData": base64.b64encode(audio).decode("ascii") if audio else None,
        }
        try:
            response = self._http.post("/api/analyze", json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Analysis unavailable for demo=%s: %s", demo.get("id"), exc)
            return build_placeholder_analysis(demo)

        analysis = body.get("analysis")
        content = analysis if isinstance(analysis, str) else json.dumps(body, indent=2)
        self.cache.set(key, content)
        return content

    def voice_report(
        self,
        demos: Iterable[Mapping[str, Any]],
        *,
        regenerate: bool = False,
    ) -> dict[str, Any]:
        demo_list = list(demos)
        if len(demo_list) < MIN_REPORT_DEMOS:
            raise NotEnoughDemosError(
                f"A voice report needs at least {MIN_REPORT_DEMOS} demos, got {len(demo_list)}"
            )

        if regenerate:
            self.cache.remove(VOICE_REPORT_CACHE_KEY)
        else:
            cached = self.cache.get(VOICE_REPORT_CACHE_KEY)
            if cached:
                return json.loads(cached)

        payload = {
            "demos": [
                {"name": demo.get("name") or demo.get("audioFile") or "Untitled", "id": demo.get("id")}
                for demo in demo_list
            ]
        }
        try:
            response = self._http.post("/api/voice-report", json=payload)
            response.raise_for_status()
            report = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Voice report unavailable: %s", exc)
            return build_placeholder_voice_report()

        self.cache.set(VOICE_REPORT_CACHE_KEY, json.dumps(report))
        return report

    def close(self) -> None:
        self._http.close()


__all__ = [
    "AnalysisCache",
    "NotEnoughDemosError",
    "StudioClient",
    "StudioRequestError",
    "UploadError",
    "VOICE_REPORT_CACHE_KEY",
    "analysis_cache_key",
]
