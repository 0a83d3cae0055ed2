"""Object Store: durable storage of proof files behind a swappable protocol.

Invariants:
    - put() returns a URL that resolves to exactly the bytes written under key
    - put() failures always raise StorageFailureError (SDK and OS errors never leak)
    - Blocking IO (boto3, filesystem) runs in a worker thread, never on the event loop
    - S3 addressing is path-style, so non-AWS S3-compatible endpoints work

Design Decisions:
    - S3ObjectStore wraps a sync boto3 client; LocalObjectStore writes under a
      directory that main.py serves at /uploads
    - Local writes go to a temp file then os.replace, so readers never see a partial file;
      a failed write removes its temp file
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from payproof.core.errors import ErrorContext, StorageFailureError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Storage contract used by the orchestrator."""

    async def put(self, key: str, data: bytes, content_type: str) -> str: ...

    async def check(self) -> None: ...


class S3ObjectStore:
    """ObjectStore over any S3-compatible service."""

    def __init__(
        self,
        bucket: str,
        *,
        region: str = "",
        endpoint: str = "",
        key_id: str = "",
        key_secret: str = "",
        public_base_url: str = "",
        client=None,
    ):
        if not bucket:
            raise ValueError("S3 bucket is required for the s3 object store")
        self.bucket = bucket
        self.region = region
        self.endpoint = endpoint.rstrip("/")
        self.public_base_url = public_base_url.rstrip("/")
        self._client = client or boto3.client(
            "s3",
            region_name=region or None,
            endpoint_url=endpoint or None,
            aws_access_key_id=key_id or None,
            aws_secret_access_key=key_secret or None,
            config=Config(s3={"addressing_style": "path"}),
        )

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint:
            return f"{self.endpoint}/{self.bucket}/{key}"
        region = self.region or "us-east-1"
        return f"https://s3.{region}.amazonaws.com/{self.bucket}/{key}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                f"S3 put_object failed: {e}", extra={"object_key": key},
            )
            raise StorageFailureError(
                type(e).__name__, ErrorContext(object_key=key),
            ) from e
        return self.url_for(key)

    async def check(self) -> None:
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self.bucket)
        except (BotoCoreError, ClientError) as e:
            raise StorageFailureError(f"bucket check failed: {type(e).__name__}") from e


class LocalObjectStore:
    """ObjectStore writing files under a local directory."""

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if path.parent != self.root.resolve():
            raise StorageFailureError(
                "invalid object key", ErrorContext(object_key=key),
            )
        return path

    def _write(self, path: Path, data: bytes) -> None:
        tmp = path.with_name(path.name + ".part")
        try:
            with open(tmp, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error(
                f"Local object write failed: {e}", extra={"object_key": key},
            )
            raise StorageFailureError(
                e.strerror or type(e).__name__, ErrorContext(object_key=key),
            ) from e
        return f"{self.public_base_url}/{key}"

    async def check(self) -> None:
        if not os.access(self.root, os.W_OK):
            raise StorageFailureError(f"upload directory not writable: {self.root}")
