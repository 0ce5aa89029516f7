"""S3-compatible object store gateway."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any, Protocol, cast

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from audio_migrator.domain.errors import TransferError
from audio_migrator.domain.ports import ObjectStore

_DEFAULT_CHUNK_SIZE_BYTES = 1024 * 1024
_DEFAULT_MAX_POOL_CONNECTIONS = 16


class S3Client(Protocol):
    """Subset of S3 client operations used by the object store."""

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:
        """Return object metadata and a streaming `Body`."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
    ) -> dict[str, Any]:
        """Store an object in one request."""


class S3ObjectStore(ObjectStore):
    """Object store adapter running blocking boto3 calls in worker threads.

    Works against AWS S3 and S3-compatible providers (R2, MinIO) through
    `endpoint_url`.
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        region: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        max_pool_connections: int = _DEFAULT_MAX_POOL_CONNECTIONS,
        connect_timeout_seconds: float | None = None,
        read_timeout_seconds: float | None = None,
        chunk_size_bytes: int = _DEFAULT_CHUNK_SIZE_BYTES,
        s3_client_factory: Callable[[], S3Client] | None = None,
    ) -> None:
        self._endpoint_url = endpoint_url
        self._region = region
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._max_pool_connections = max(1, max_pool_connections)
        self._connect_timeout_seconds = connect_timeout_seconds
        self._read_timeout_seconds = read_timeout_seconds
        self._chunk_size_bytes = max(1, chunk_size_bytes)
        self._s3_client_factory = s3_client_factory or self._build_default_s3_client
        self._client: S3Client | None = None

    async def get(self, bucket: str, key: str) -> AsyncIterator[bytes]:
        """Stream object body chunks."""

        client = self._get_client()
        try:
            response = await asyncio.to_thread(client.get_object, Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise TransferError(f"GET s3://{bucket}/{key} failed: {exc}") from exc

        body = response.get("Body")
        if body is None:
            raise TransferError(f"GET s3://{bucket}/{key} returned no body.")

        try:
            while True:
                try:
                    chunk = await asyncio.to_thread(body.read, self._chunk_size_bytes)
                except (BotoCoreError, ClientError, OSError) as exc:
                    raise TransferError(
                        f"Reading s3://{bucket}/{key} failed: {exc}"
                    ) from exc
                if not chunk:
                    return
                yield chunk
        finally:
            close = getattr(body, "close", None)
            if callable(close):
                close()

    async def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        """Upload one object in a single request."""

        client = self._get_client()
        try:
            await asyncio.to_thread(
                client.put_object,
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise TransferError(f"PUT s3://{bucket}/{key} failed: {exc}") from exc

    def _get_client(self) -> S3Client:
        if self._client is None:
            self._client = self._s3_client_factory()
        return self._client

    def _build_default_s3_client(self) -> S3Client:
        """Create the boto3 client; clients are thread-safe and shared by workers."""

        config_options: dict[str, Any] = {"max_pool_connections": self._max_pool_connections}
        if self._connect_timeout_seconds is not None:
            config_options["connect_timeout"] = self._connect_timeout_seconds
        if self._read_timeout_seconds is not None:
            config_options["read_timeout"] = self._read_timeout_seconds
        config = Config(**config_options)
        client = boto3.client(
            "s3",
            endpoint_url=self._endpoint_url,
            region_name=self._region,
            aws_access_key_id=self._access_key_id,
            aws_secret_access_key=self._secret_access_key,
            config=config,
        )
        return cast(S3Client, client)


__all__ = ["S3Client", "S3ObjectStore"]
