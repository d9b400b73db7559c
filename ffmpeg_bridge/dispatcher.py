"""
Event dispatch: one workflow run per notification, strictly in order.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from ffmpeg_bridge.constants import TranscodeStatus
from ffmpeg_bridge.schemas import StorageNotification, TranscodeResult, iter_s3_records

logger = logging.getLogger(__name__)


class Workflow(Protocol):
    def run(self, notification: StorageNotification) -> TranscodeResult: ...


def notifications_from_event(event: dict[str, Any]) -> list[StorageNotification]:
    """Extract notifications from a Lambda event, skipping incomplete records."""
    notifications = []
    for record in iter_s3_records(event):
        notification = StorageNotification.from_s3_record(record)
        if notification is None:
            logger.error("Missing bucket or key in S3 event: %s", record)
            continue
        notifications.append(notification)
    return notifications


def dispatch(
    notifications: Iterable[StorageNotification],
    workflow: Workflow,
) -> list[TranscodeResult]:
    """Run the workflow for each notification; a failure never stops the batch."""
    results: list[TranscodeResult] = []
    for notification in notifications:
        logger.info("New S3 Object %s:%s", notification.bucket, notification.key)
        try:
            result = workflow.run(notification)
        except Exception as exc:
            logger.exception("Error processing s3://%s/%s: %s", notification.bucket, notification.key, exc)
            result = TranscodeResult(
                bucket=notification.bucket,
                key=notification.key,
                status=TranscodeStatus.FAILED,
                message=str(exc),
            )
        results.append(result)
    return results
