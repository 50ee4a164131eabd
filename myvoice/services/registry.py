"""Demo registry persisted as a single JSON document in the blob store.

Every mutation re-reads the whole document, applies the change and writes
it back. There is no locking: two concurrent owners writing at once can
lose one of the updates (last write wins).
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping

from pydantic import ValidationError

from myvoice.application.interfaces import BlobStoreInterface
from myvoice.domain.models import BINARY_FIELDS, Demo, normalize_demo_id

logger = logging.getLogger(__name__)

REGISTRY_KEY = "demos/index.json"
_IMMUTABLE_FIELDS = frozenset({"id", "uploadDate"})


def audio_key(demo_id: str) -> str:
    return f"audio/{demo_id}"


def cover_key(demo_id: str) -> str:
    return f"covers/{demo_id}"


class DemoNotFoundError(LookupError):
    """Raised when no registry entry matches the requested id."""

    def __init__(self, demo_id: str) -> None:
        super().__init__(f"Demo not found: {demo_id}")
        self.demo_id = demo_id


class DemoRegistry:
    """Ordered demo catalogue, newest first."""

    def __init__(
        self,
        store: BlobStoreInterface,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._clock = clock

    async def _load(self) -> list[dict[str, Any]]:
        document = await self._store.get_json(REGISTRY_KEY)
        if document is None:
            return []
        if isinstance(document, Mapping):
            document = document.get("demos", [])
        if not isinstance(document, list):
            logger.warning("Registry document has unexpected shape: %s", type(document).__name__)
            return []
        return [dict(record) for record in document if isinstance(record, Mapping)]

    async def _save(self, records: List[dict[str, Any]]) -> None:
        await self._store.put_json(REGISTRY_KEY, records)

    @staticmethod
    def _index_of(records: List[dict[str, Any]], demo_id: str) -> int:
        target = normalize_demo_id(demo_id)
        for index, record in enumerate(records):
            try:
                if normalize_demo_id(record.get("id")) == target:
                    return index
            except ValueError:
                continue
        raise DemoNotFoundError(target)

    def _next_id(self, records: List[dict[str, Any]]) -> str:
        """Epoch milliseconds, bumped past the largest existing numeric id."""

        candidate = int(self._clock() * 1000)
        numeric_ids = [
            int(str(record.get("id")))
            for record in records
            if str(record.get("id", "")).isdigit()
        ]
        if numeric_ids and candidate <= max(numeric_ids):
            candidate = max(numeric_ids) + 1
        return str(candidate)

    async def list(self) -> List[Demo]:
        """Return every record in stored order, without inline payloads."""

        demos: List[Demo] = []
        for record in await self._load():
            stripped = {k: v for k, v in record.items() if k not in BINARY_FIELDS}
            try:
                demos.append(Demo.model_validate(stripped))
            except ValidationError as exc:
                logger.warning("Skipping malformed registry record id=%s: %s", record.get("id"), exc)
        return demos

    async def get(self, demo_id: str) -> Demo:
        records = await self._load()
        record = records[self._index_of(records, demo_id)]
        return Demo.model_validate({k: v for k, v in record.items() if k not in BINARY_FIELDS})

    async def exists(self, demo_id: str) -> bool:
        try:
            self._index_of(await self._load(), demo_id)
        except DemoNotFoundError:
            return False
        return True

    async def insert(self, data: Mapping[str, Any]) -> Demo:
        """Assign a fresh id, prepend the record and persist the list."""

        records = await self._load()
        payload = {k: v for k, v in data.items() if k not in BINARY_FIELDS and k != "id"}
        payload["id"] = self._next_id(records)
        payload.setdefault("uploadDate", datetime.now(timezone.utc).isoformat())
        demo = Demo.model_validate(payload)
        records.insert(0, demo.to_document())
        await self._save(records)
        logger.info("Demo registered id=%s name=%s", demo.id, demo.name)
        return demo

    async def update(self, demo_id: str, patch: Mapping[str, Any]) -> Demo:
        records = await self._load()
        index = self._index_of(records, demo_id)
        changes = {
            k: v
            for k, v in patch.items()
            if k not in _IMMUTABLE_FIELDS and k not in BINARY_FIELDS
        }
        merged = {**records[index], **changes}
        demo = Demo.model_validate(merged)
        records[index] = {**merged, **demo.to_document()}
        await self._save(records)
        logger.info("Demo updated id=%s fields=%s", demo.id, sorted(changes))
        return demo

    async def delete(self, demo_id: str) -> Demo:
        """Remove the record, then release its audio and cover blobs."""

        records = await self._load()
        index = self._index_of(records, demo_id)
        removed = records.pop(index)
        demo = Demo.model_validate({k: v for k, v in removed.items() if k not in BINARY_FIELDS})
        await self._save(records)

        for key in (audio_key(demo.id), cover_key(demo.id)):
            if not await self._store.delete(key):
                logger.warning("Blob release failed after delete id=%s key=%s", demo.id, key)
        logger.info("Demo deleted id=%s", demo.id)
        return demo


__all__ = [
    "DemoNotFoundError",
    "DemoRegistry",
    "REGISTRY_KEY",
    "audio_key",
    "cover_key",
]
