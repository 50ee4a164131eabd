"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from myvoice.application.interfaces import BlobStoreInterface
from myvoice.config.settings import settings
from myvoice.infrastructure.external.s3_blob_store import S3BlobStore
from myvoice.infrastructure.persistence.memory_blob_store import InMemoryBlobStore
from myvoice.services import (
    ChunkReassembler,
    DemoRegistry,
    OpenAiChatClient,
    VocalAnalysisService,
)
from myvoice.utils import AuthenticationError, decode_owner_token, is_authorized

OWNER_PASSWORD_HEADER = "X-Owner-Password"


@lru_cache
def get_blob_store() -> BlobStoreInterface:
    """Build the configured blob store once per process."""

    if settings.blobs.backend == "memory":
        return InMemoryBlobStore()
    return S3BlobStore(settings.blobs)


BlobStoreDep = Annotated[BlobStoreInterface, Depends(get_blob_store)]


def get_registry(store: BlobStoreDep) -> DemoRegistry:
    return DemoRegistry(store)


def get_reassembler(store: BlobStoreDep) -> ChunkReassembler:
    return ChunkReassembler(store, max_chunks=settings.uploads.max_chunks)


def get_completion_client() -> OpenAiChatClient:
    return OpenAiChatClient(settings.openai)


def get_analysis_service(
    client: Annotated[OpenAiChatClient, Depends(get_completion_client)],
) -> VocalAnalysisService:
    return VocalAnalysisService(client, settings.openai)


RegistryDep = Annotated[DemoRegistry, Depends(get_registry)]
ReassemblerDep = Annotated[ChunkReassembler, Depends(get_reassembler)]
AnalysisServiceDep = Annotated[VocalAnalysisService, Depends(get_analysis_service)]


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def _owner_token_valid(token: str) -> bool:
    try:
        decode_owner_token(token)
    except AuthenticationError:
        return False
    return True


async def require_owner(
    x_owner_password: Annotated[Optional[str], Header(alias=OWNER_PASSWORD_HEADER)] = None,
    authorization: Annotated[Optional[str], Header()] = None,
) -> None:
    """Accept the shared owner password or a signed owner token."""

    if is_authorized(x_owner_password):
        return

    token = _bearer_token(authorization)
    if token and _owner_token_valid(token):
        return

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )


OwnerDep = Depends(require_owner)


__all__ = [
    "AnalysisServiceDep",
    "BlobStoreDep",
    "OWNER_PASSWORD_HEADER",
    "OwnerDep",
    "ReassemblerDep",
    "RegistryDep",
    "get_analysis_service",
    "get_blob_store",
    "get_completion_client",
    "get_reassembler",
    "get_registry",
    "require_owner",
]
