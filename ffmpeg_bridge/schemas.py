"""
Notification and result models, plus parsing of the raw Lambda event.
"""
from __future__ import annotations

import json
import urllib.parse
from typing import Any

from pydantic import BaseModel, ConfigDict

from ffmpeg_bridge.constants import TranscodeStatus


class StorageNotification(BaseModel):
    """One newly created S3 object."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    bucket: str
    key: str

    @classmethod
    def from_s3_record(cls, record: dict[str, Any]) -> StorageNotification | None:
        """Build from an S3 event record; None when bucket or key is missing."""
        s3_info = record.get("s3", {})
        bucket = s3_info.get("bucket", {}).get("name", "")
        key = urllib.parse.unquote_plus(
            s3_info.get("object", {}).get("key", "")
        )
        if not bucket or not key:
            return None
        return cls(bucket=bucket, key=key)


class TranscodeResult(BaseModel):
    """Outcome of one workflow run."""

    model_config = ConfigDict(extra="forbid")

    bucket: str
    key: str
    status: TranscodeStatus
    output_key: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is TranscodeStatus.COMPLETED


def iter_s3_records(event: dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten an event into S3 records, unwrapping SQS message bodies."""
    s3_records: list[dict[str, Any]] = []
    for record in event.get("Records", []):
        if record.get("eventSource") == "aws:sqs":
            body = json.loads(record.get("body") or "{}")
            s3_records.extend(body.get("Records", []))
        else:
            s3_records.append(record)
    return s3_records
