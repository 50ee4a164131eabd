"""Demo catalogue endpoints: listing, owner CRUD and blob streaming."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import Response

from myvoice.controllers.dependencies import (
    BlobStoreDep,
    OwnerDep,
    ReassemblerDep,
    RegistryDep,
)
from myvoice.domain.models import normalize_demo_id
from myvoice.services import DemoNotFoundError, audio_key, cover_key
from myvoice.views import (
    DemoCreateRequest,
    DemoListResponse,
    DemoResponse,
    DemoUpdateRequest,
    SuccessResponse,
)

router = APIRouter(prefix="/api", tags=["demos"])

logger = logging.getLogger(__name__)

BLOB_CACHE_CONTROL = "public, max-age=31536000, immutable"

_DEMO_ID_QUERY = Query(..., alias="id", min_length=1)
_BLOB_TYPE_QUERY = Query("audio", alias="type")


def _not_found(exc: DemoNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _canonical_id(raw_id: str) -> str:
    try:
        return normalize_demo_id(raw_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/demos", response_model=DemoListResponse)
async def list_demos(registry: RegistryDep) -> DemoListResponse:
    """Return every demo's metadata, newest first."""

    return DemoListResponse(demos=await registry.list())


@router.get("/demos/{demo_id}", response_model=DemoResponse)
async def get_demo(demo_id: str, registry: RegistryDep) -> DemoResponse:
    try:
        return DemoResponse(demo=await registry.get(_canonical_id(demo_id)))
    except DemoNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post(
    "/demos",
    response_model=DemoResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[OwnerDep],
)
async def create_demo(payload: DemoCreateRequest, registry: RegistryDep) -> DemoResponse:
    demo = await registry.insert(payload.demo.model_dump(by_alias=True, mode="json"))
    return DemoResponse(demo=demo)


@router.put("/demos", response_model=DemoResponse, dependencies=[OwnerDep])
async def update_demo(payload: DemoUpdateRequest, registry: RegistryDep) -> DemoResponse:
    changes = payload.updates.model_dump(by_alias=True, mode="json", exclude_unset=True)
    try:
        demo = await registry.update(payload.id, changes)
    except DemoNotFoundError as exc:
        raise _not_found(exc) from exc
    return DemoResponse(demo=demo)


@router.delete("/demos", response_model=SuccessResponse, dependencies=[OwnerDep])
async def delete_demo(
    registry: RegistryDep,
    reassembler: ReassemblerDep,
    demo_id: str = _DEMO_ID_QUERY,
) -> SuccessResponse:
    """Remove a demo together with its audio, cover and leftover chunks."""

    try:
        demo = await registry.delete(_canonical_id(demo_id))
    except DemoNotFoundError as exc:
        raise _not_found(exc) from exc
    leftover = await reassembler.abort(demo.id)
    return SuccessResponse(
        message="Demo deleted",
        data={"id": demo.id, "releasedChunks": leftover},
    )


@router.get("/demo-audio", response_class=Response)
async def get_demo_blob(
    store: BlobStoreDep,
    demo_id: str = _DEMO_ID_QUERY,
    blob_type: Literal["audio", "cover"] = _BLOB_TYPE_QUERY,
) -> Response:
    """Stream a demo's audio or uploaded cover with a long-lived cache header."""

    canonical_id = _canonical_id(demo_id)
    key = audio_key(canonical_id) if blob_type == "audio" else cover_key(canonical_id)
    blob = await store.get(key)
    if blob is None:
        logger.info("Blob not found id=%s type=%s", canonical_id, blob_type)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {blob_type} stored for demo {canonical_id}",
        )
    return Response(
        content=blob.data,
        media_type=blob.content_type,
        headers={"Cache-Control": BLOB_CACHE_CONTROL},
    )
