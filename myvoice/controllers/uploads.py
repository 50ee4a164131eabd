"""Owner upload endpoints.

A new demo is uploaded in three steps:

1. ``/api/upload-demo-init`` registers the metadata (and optional cover)
   and returns the new id.
2. ``/api/upload-audio-chunk`` is called once per chunk of the audio file.
3. ``/api/upload-audio-complete`` stitches the chunks into the final blob.

The stored ``coverType`` follows what was actually supplied: ``uploaded``
only when a cover file arrives, ``random`` otherwise. A ``coverType`` form
field sent by the client does not override this.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status

from myvoice.application.interfaces import BlobStoreInterface
from myvoice.controllers.dependencies import (
    BlobStoreDep,
    OwnerDep,
    ReassemblerDep,
    RegistryDep,
)
from myvoice.domain.models import CoverType, normalize_demo_id
from myvoice.services import (
    DemoNotFoundError,
    InvalidChunkError,
    MissingChunkError,
    cover_key,
)
from myvoice.views import (
    DemoResponse,
    ErrorResponse,
    UploadAbortResponse,
    UploadChunkResponse,
    UploadCompleteRequest,
    UploadCompleteResponse,
)

router = APIRouter(
    prefix="/api",
    tags=["uploads"],
    dependencies=[OwnerDep],
    responses={401: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
)

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_CONTENT_TYPE = "audio/mpeg"
DEFAULT_COVER_CONTENT_TYPE = "image/jpeg"

_NAME_FORM = Form(...)
_OPTIONAL_NAME_FORM = Form(None)
_AUDIO_FILENAME_FORM = Form("", alias="audioFile")
_COVER_URL_FORM = Form(None, alias="coverUrl")
_COVER_UPLOAD = File(None)
_ID_FORM = Form(..., alias="id")
_INDEX_FORM = Form(...)
_TOTAL_FORM = Form(...)
_CONTENT_TYPE_FORM = Form(DEFAULT_AUDIO_CONTENT_TYPE, alias="contentType")
_CHUNK_UPLOAD = File(...)
_UPLOAD_ID_QUERY = Query(..., alias="id", min_length=1)


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


def _bad_request(detail: Any) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _canonical_id(raw_id: str) -> str:
    try:
        return normalize_demo_id(raw_id)
    except ValueError as exc:
        raise _bad_request(str(exc)) from exc


async def _read_cover(cover: UploadFile) -> bytes:
    data = await cover.read()
    if not data:
        raise _bad_request("Cover file is empty")
    return data


async def _store_cover(
    store: BlobStoreInterface,
    demo_id: str,
    cover: UploadFile,
    data: bytes,
) -> None:
    await store.put(
        cover_key(demo_id),
        data,
        content_type=cover.content_type or DEFAULT_COVER_CONTENT_TYPE,
    )


@router.post("/upload-demo-init", response_model=DemoResponse, status_code=status.HTTP_201_CREATED)
async def init_demo_upload(
    registry: RegistryDep,
    store: BlobStoreDep,
    name: str = _NAME_FORM,
    audio_file: str = _AUDIO_FILENAME_FORM,
    cover_url: Optional[str] = _COVER_URL_FORM,
    cover: Optional[UploadFile] = _COVER_UPLOAD,
) -> DemoResponse:
    """Register a demo's metadata; the audio follows in chunks."""

    if not name.strip():
        raise _bad_request("name is required")

    uploaded_cover = _has_file(cover)
    cover_data = await _read_cover(cover) if uploaded_cover else b""
    record = {
        "name": name.strip(),
        "audioFile": audio_file,
        "coverUrl": None if uploaded_cover else cover_url,
        "coverType": (CoverType.UPLOADED if uploaded_cover else CoverType.RANDOM).value,
    }
    demo = await registry.insert(record)
    if uploaded_cover:
        await _store_cover(store, demo.id, cover, cover_data)
    logger.info("Upload initialised id=%s cover=%s", demo.id, demo.cover_type.value)
    return DemoResponse(demo=demo)


@router.post("/upload-audio-chunk", response_model=UploadChunkResponse)
async def upload_audio_chunk(
    reassembler: ReassemblerDep,
    demo_id: str = _ID_FORM,
    index: int = _INDEX_FORM,
    total: int = _TOTAL_FORM,
    content_type: str = _CONTENT_TYPE_FORM,
    chunk: UploadFile = _CHUNK_UPLOAD,
) -> UploadChunkResponse:
    canonical_id = _canonical_id(demo_id)
    data = await chunk.read()
    try:
        await reassembler.put_chunk(canonical_id, index, total, content_type, data)
    except InvalidChunkError as exc:
        raise _bad_request(str(exc)) from exc
    return UploadChunkResponse(id=canonical_id, index=index, total=total, received=len(data))


@router.post("/upload-audio-complete", response_model=UploadCompleteResponse)
async def complete_audio_upload(
    payload: UploadCompleteRequest,
    registry: RegistryDep,
    reassembler: ReassemblerDep,
) -> UploadCompleteResponse:
    """Reassemble the staged chunks into the demo's audio blob."""

    if not await registry.exists(payload.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Demo not found: {payload.id}",
        )

    try:
        completed = await reassembler.complete(payload.id, payload.total, payload.content_type)
    except MissingChunkError as exc:
        raise _bad_request({"error": str(exc), "missingIndex": exc.index}) from exc
    except InvalidChunkError as exc:
        raise _bad_request(str(exc)) from exc

    try:
        demo = await registry.update(
            payload.id,
            {"contentType": completed.content_type, "audioSize": completed.size},
        )
    except DemoNotFoundError as exc:
        # Deleted while the chunks were being stitched together.
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return UploadCompleteResponse(demo=demo, size=completed.size, chunks=completed.chunk_count)


@router.delete("/upload-audio-chunks", response_model=UploadAbortResponse)
async def abort_audio_upload(
    reassembler: ReassemblerDep,
    upload_id: str = _UPLOAD_ID_QUERY,
) -> UploadAbortResponse:
    """Discard the staged chunks of an upload that will not be completed."""

    canonical_id = _canonical_id(upload_id)
    removed = await reassembler.abort(canonical_id)
    return UploadAbortResponse(id=canonical_id, removed=removed)


@router.post("/update-demo", response_model=DemoResponse)
async def update_demo_upload(
    registry: RegistryDep,
    store: BlobStoreDep,
    demo_id: str = _ID_FORM,
    name: Optional[str] = _OPTIONAL_NAME_FORM,
    cover_url: Optional[str] = _COVER_URL_FORM,
    cover: Optional[UploadFile] = _COVER_UPLOAD,
) -> DemoResponse:
    """Patch name and cover; an uploaded cover replaces the stored one."""

    canonical_id = _canonical_id(demo_id)
    if not await registry.exists(canonical_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Demo not found: {canonical_id}",
        )

    changes: dict[str, Any] = {}
    if name is not None:
        if not name.strip():
            raise _bad_request("name must not be empty")
        changes["name"] = name.strip()

    if _has_file(cover):
        await _store_cover(store, canonical_id, cover, await _read_cover(cover))
        changes.update(coverType=CoverType.UPLOADED.value, coverUrl=None)
    elif cover_url:
        changes.update(coverType=CoverType.RANDOM.value, coverUrl=cover_url)
        await store.delete(cover_key(canonical_id))

    try:
        demo = await registry.update(canonical_id, changes)
    except DemoNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return DemoResponse(demo=demo)
