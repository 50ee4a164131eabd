"""In-memory blob store used for local development and tests."""

from __future__ import annotations

from typing import List, Mapping, Optional

from myvoice.application.interfaces import BlobStoreInterface, StoredBlob


class InMemoryBlobStore(BlobStoreInterface):
    """Process-local blob store; contents vanish with the process."""

    def __init__(self) -> None:
        self._blobs: dict[str, StoredBlob] = {}

    async def get(self, key: str) -> Optional[StoredBlob]:
        return self._blobs.get(key)

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        self._blobs[key] = StoredBlob(
            data=bytes(data),
            content_type=content_type,
            metadata={k: str(v) for k, v in (metadata or {}).items()},
        )

    async def delete(self, key: str) -> bool:
        # Mirrors S3: deleting a missing key is not a failure.
        self._blobs.pop(key, None)
        return True

    async def list_keys(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self._blobs if key.startswith(prefix))

    def __contains__(self, key: str) -> bool:
        return key in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)


__all__ = ["InMemoryBlobStore"]
