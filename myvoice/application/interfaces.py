from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


@dataclass(frozen=True)
class StoredBlob:
    """Binary value plus the metadata it was stored with."""

    data: bytes
    content_type: str = "application/octet-stream"
    metadata: Mapping[str, str] = field(default_factory=dict)


class BlobStoreInterface(ABC):
    """Key-value contract for binary and JSON blobs"""

    @abstractmethod
    async def get(self, key: str) -> Optional[StoredBlob]:
        ...

    @abstractmethod
    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> List[str]:
        ...

    async def get_json(self, key: str) -> Any:
        """Return the decoded JSON value stored under ``key`` or None."""

        blob = await self.get(key)
        if blob is None:
            return None
        return json.loads(blob.data.decode("utf-8"))

    async def put_json(self, key: str, value: Any) -> None:
        payload = json.dumps(value, separators=(",", ":")).encode("utf-8")
        await self.put(key, payload, content_type="application/json")
