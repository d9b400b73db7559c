"""
AWS S3 object store — whole-file fetch into scratch space and upload back.

No retry: a single failed attempt surfaces as a StorageError.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from ffmpeg_bridge.constants import SCRATCH_DIR
from ffmpeg_bridge.exceptions import ObjectNotFound, StorageError, UnsafeObjectKey

logger = logging.getLogger(__name__)


class S3ObjectStore:
    """Thin wrapper over a boto3 S3 client bound to a scratch directory."""

    def __init__(self, client: Any | None = None, scratch_dir: Path = SCRATCH_DIR) -> None:
        self._client = client
        self.scratch_dir = Path(scratch_dir)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("s3")
        return self._client

    def local_path(self, key: str) -> Path:
        """Scratch path for ``key``; keys resolving outside scratch_dir are refused."""
        root = self.scratch_dir.resolve()
        resolved = (root / key).resolve()
        if resolved == root or not resolved.is_relative_to(root):
            raise UnsafeObjectKey(key, f"resolves outside {self.scratch_dir}")
        return self.scratch_dir / resolved.relative_to(root)

    def fetch(self, bucket: str, key: str) -> Path:
        """Download s3://bucket/key to its scratch path, overwriting any existing file."""
        path = self.local_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.client.download_file(bucket, key, str(path))
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code", "")
            if error_code in ("404", "NoSuchKey"):
                raise ObjectNotFound(bucket, key) from exc
            raise StorageError("get", bucket, key, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError("get", bucket, key, str(exc)) from exc
        logger.info("Downloaded s3://%s/%s to %s", bucket, key, path)
        return path

    def put(self, bucket: str, key: str, local_path: Path) -> None:
        """Upload a local file as s3://bucket/key."""
        try:
            self.client.upload_file(str(local_path), bucket, key)
        except (BotoCoreError, ClientError, S3UploadFailedError) as exc:
            raise StorageError("put", bucket, key, str(exc)) from exc
        logger.info("Uploaded %s to s3://%s/%s", local_path, bucket, key)
