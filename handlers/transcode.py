"""
AWS Lambda handler — ffmpeg transcoding

Triggered by:
  1. S3 ObjectCreated event (new source video)
  2. SQS message wrapping an S3 event

Flow:
  1. Extracts bucket/key pairs from the event records.
  2. Runs the transcode workflow for each, one after another.
  3. Returns a per-object result; individual failures never fail the invocation.

Environment variables:
  V_ENC_PARA   — ffmpeg video encoder arguments
  A_ENC_PARA   — ffmpeg audio encoder arguments
  FILTER_PARA  — ffmpeg filter graph and frame rate arguments
  OPTS_PARA    — ffmpeg output/container arguments
  PRE_CMD      — shell command run before transcoding
  POST_CMD     — shell command run after upload
"""
from __future__ import annotations

import logging
from functools import lru_cache

from ffmpeg_bridge.dispatcher import dispatch, notifications_from_event
from ffmpeg_bridge.s3 import S3ObjectStore
from ffmpeg_bridge.workflow import TranscodeWorkflow

logger = logging.getLogger()
logger.setLevel(logging.INFO)


@lru_cache
def _workflow() -> TranscodeWorkflow:
    # Built once per warm container; settings load per run so a bad value
    # fails each notification instead of the invocation
    return TranscodeWorkflow(None, S3ObjectStore())


def handler(event: dict, context: object) -> dict:
    """Lambda entry point — processes S3 or SQS events."""
    notifications = notifications_from_event(event)
    results = dispatch(notifications, _workflow())
    return {
        "statusCode": 200,
        "results": [result.model_dump(mode="json") for result in results],
    }
