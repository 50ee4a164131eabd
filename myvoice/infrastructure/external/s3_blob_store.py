"""S3-backed blob store for demo audio, covers and the registry document."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from myvoice.application.interfaces import BlobStoreInterface, StoredBlob
from myvoice.config.settings import BlobStoreConfig

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class StorageError(RuntimeError):
    """Raised when a blob cannot be read or written."""


class S3BlobStore(BlobStoreInterface):
    """AWS S3 adapter implementation"""

    def __init__(self, config: BlobStoreConfig, client: Any | None = None) -> None:
        if not config.bucket_name:
            raise StorageError("Blob bucket name is not configured.")
        self.bucket = config.bucket_name
        self.prefix = config.prefix.strip("/")
        if client is None:
            client_kwargs: dict[str, Any] = {"region_name": config.region}
            if config.access_key and config.secret_key:
                client_kwargs["aws_access_key_id"] = config.access_key
                client_kwargs["aws_secret_access_key"] = config.secret_key
            client = boto3.client("s3", **client_kwargs)
        self.s3_client = client

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}/{key}" if self.prefix else key

    def _logical_key(self, object_key: str) -> str:
        if self.prefix and object_key.startswith(f"{self.prefix}/"):
            return object_key[len(self.prefix) + 1 :]
        return object_key

    async def get(self, key: str) -> Optional[StoredBlob]:
        """Fetch an object, returning None when it does not exist."""

        def _read() -> Optional[StoredBlob]:
            try:
                response = self.s3_client.get_object(
                    Bucket=self.bucket, Key=self._object_key(key)
                )
            except ClientError as exc:
                code = exc.response.get("Error", {}).get("Code", "")
                if code in _MISSING_KEY_CODES:
                    return None
                raise
            body = response["Body"].read()
            return StoredBlob(
                data=body,
                content_type=response.get("ContentType") or "application/octet-stream",
                metadata=dict(response.get("Metadata") or {}),
            )

        try:
            return await run_in_threadpool(_read)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to read blob {key}: {exc}") from exc

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        try:
            await run_in_threadpool(
                self.s3_client.put_object,
                Bucket=self.bucket,
                Key=self._object_key(key),
                Body=data,
                ContentType=content_type,
                Metadata={k: str(v) for k, v in (metadata or {}).items()},
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to write blob {key}: {exc}") from exc

    async def delete(self, key: str) -> bool:
        """Delete an object; S3 reports success for missing keys too."""

        try:
            await run_in_threadpool(
                self.s3_client.delete_object,
                Bucket=self.bucket,
                Key=self._object_key(key),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to delete blob %s: %s", key, exc)
            return False
        return True

    async def list_keys(self, prefix: str = "") -> List[str]:
        def _list() -> List[str]:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            keys: List[str] = []
            for page in paginator.paginate(
                Bucket=self.bucket, Prefix=self._object_key(prefix)
            ):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
            return [self._logical_key(k) for k in keys]

        try:
            return await run_in_threadpool(_list)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to list blobs under {prefix}: {exc}") from exc


__all__ = ["S3BlobStore", "StorageError"]
