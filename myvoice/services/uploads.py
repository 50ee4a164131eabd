"""Chunked audio uploads.

Clients split an audio file into fixed-size chunks and post them one at a
time. Each chunk is parked under ``chunks/<upload_id>/<index>``. Completion
fetches every index in ``[0, total)``, concatenates them in order into the
final blob, then purges the temporary keys.

Chunks of uploads that never complete stay behind until ``abort`` or
``sweep_stale`` removes them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from myvoice.application.interfaces import BlobStoreInterface
from myvoice.services.registry import audio_key
from myvoice.telemetry import UPLOAD_CHUNK_COUNTER, UPLOAD_COMPLETED_COUNTER

logger = logging.getLogger(__name__)

CHUNK_PREFIX = "chunks/"


def chunk_prefix(upload_id: str) -> str:
    return f"{CHUNK_PREFIX}{upload_id}/"


def chunk_key(upload_id: str, index: int) -> str:
    return f"{chunk_prefix(upload_id)}{index}"


class InvalidChunkError(ValueError):
    """Raised when chunk coordinates or payload are unusable."""


class MissingChunkError(LookupError):
    """Raised when completion finds a hole in the chunk sequence."""

    def __init__(self, upload_id: str, index: int, total: int) -> None:
        super().__init__(f"Missing chunk {index} of {total} for upload {upload_id}")
        self.upload_id = upload_id
        self.index = index
        self.total = total


@dataclass(frozen=True)
class CompletedUpload:
    upload_id: str
    key: str
    size: int
    content_type: str
    chunk_count: int


class ChunkReassembler:
    """Stage chunks in the blob store and stitch them together on completion."""

    def __init__(
        self,
        store: BlobStoreInterface,
        *,
        max_chunks: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._max_chunks = max_chunks
        self._clock = clock

    def _check_total(self, total: int) -> None:
        if total < 1:
            raise InvalidChunkError("total must be at least 1")
        if total > self._max_chunks:
            raise InvalidChunkError(f"total exceeds the limit of {self._max_chunks} chunks")

    async def put_chunk(
        self,
        upload_id: str,
        index: int,
        total: int,
        content_type: str,
        data: bytes,
    ) -> str:
        """Store one chunk; arrival order does not matter."""

        self._check_total(total)
        if not 0 <= index < total:
            raise InvalidChunkError(f"index {index} is outside [0, {total})")
        if not data:
            raise InvalidChunkError(f"chunk {index} is empty")

        key = chunk_key(upload_id, index)
        await self._store.put(
            key,
            data,
            content_type="application/octet-stream",
            metadata={
                "total": str(total),
                "content-type": content_type,
                "uploaded-at": f"{self._clock():.3f}",
            },
        )
        UPLOAD_CHUNK_COUNTER.inc()
        logger.info("Chunk stored upload=%s index=%s/%s bytes=%s", upload_id, index, total, len(data))
        return key

    async def complete(
        self,
        upload_id: str,
        total: int,
        content_type: str,
        *,
        target_key: str | None = None,
    ) -> CompletedUpload:
        """Concatenate chunks ``0..total-1`` into the final blob.

        Every chunk is fetched before anything is written, so a missing index
        raises ``MissingChunkError`` and a chunk staged under a different total
        raises ``InvalidChunkError``, both without touching the final key or
        the staged chunks.
        """

        self._check_total(total)
        parts: list[bytes] = []
        for index in range(total):
            blob = await self._store.get(chunk_key(upload_id, index))
            if blob is None:
                logger.warning("Upload incomplete upload=%s missing=%s total=%s", upload_id, index, total)
                raise MissingChunkError(upload_id, index, total)
            recorded_total = blob.metadata.get("total")
            if recorded_total and recorded_total != str(total):
                logger.warning(
                    "Chunk total mismatch upload=%s index=%s recorded=%s requested=%s",
                    upload_id,
                    index,
                    recorded_total,
                    total,
                )
                raise InvalidChunkError(
                    f"chunk {index} was staged for {recorded_total} chunks, not {total}"
                )
            parts.append(blob.data)

        size = sum(len(part) for part in parts)
        buffer = bytearray(size)
        view = memoryview(buffer)
        offset = 0
        for part in parts:
            view[offset : offset + len(part)] = part
            offset += len(part)

        final_key = target_key or audio_key(upload_id)
        await self._store.put(
            final_key,
            bytes(buffer),
            content_type=content_type,
            metadata={"size": str(size), "chunks": str(total)},
        )
        UPLOAD_COMPLETED_COUNTER.inc()
        logger.info("Upload finalized upload=%s key=%s bytes=%s chunks=%s", upload_id, final_key, size, total)

        await self._purge(upload_id, extra_indices=range(total))
        return CompletedUpload(
            upload_id=upload_id,
            key=final_key,
            size=size,
            content_type=content_type,
            chunk_count=total,
        )

    async def _purge(self, upload_id: str, extra_indices=()) -> int:
        keys = {chunk_key(upload_id, index) for index in extra_indices}
        try:
            keys.update(await self._store.list_keys(chunk_prefix(upload_id)))
        except RuntimeError as exc:
            logger.warning("Could not list leftover chunks upload=%s: %s", upload_id, exc)
        removed = 0
        for key in sorted(keys):
            if await self._store.delete(key):
                removed += 1
            else:
                logger.warning("Temporary chunk not released upload=%s key=%s", upload_id, key)
        return removed

    async def abort(self, upload_id: str) -> int:
        """Drop every staged chunk for one upload and return how many existed."""

        staged = await self._store.list_keys(chunk_prefix(upload_id))
        for key in staged:
            await self._store.delete(key)
        logger.info("Upload aborted upload=%s chunks=%s", upload_id, len(staged))
        return len(staged)

    async def sweep_stale(self, max_age_seconds: float) -> int:
        """Delete chunks older than ``max_age_seconds``; returns the count."""

        cutoff = self._clock() - max_age_seconds
        removed = 0
        for key in await self._store.list_keys(CHUNK_PREFIX):
            blob = await self._store.get(key)
            if blob is None:
                continue
            try:
                uploaded_at = float(blob.metadata.get("uploaded-at", "0"))
            except ValueError:
                uploaded_at = 0.0
            if uploaded_at < cutoff and await self._store.delete(key):
                removed += 1
        if removed:
            logger.info("Swept %s stale chunks", removed)
        return removed


__all__ = [
    "CHUNK_PREFIX",
    "ChunkReassembler",
    "CompletedUpload",
    "InvalidChunkError",
    "MissingChunkError",
    "chunk_key",
    "chunk_prefix",
]
