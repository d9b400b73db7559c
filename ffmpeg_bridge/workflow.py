"""
Per-notification transcode workflow.

Flow for one new object s3://{bucket}/{key}:
  1. Stage the ffmpeg binary into scratch space (once per process).
  2. Download the object to {scratch}/{key} unless it is already there.
  3. Run the configured pre-command.
  4. Run ffmpeg: {key} -> {key}.mp4, forwarding its output to the log.
  5. Upload {key}.mp4 to the destination bucket.
  6. Delete both local files (on every exit path).
  7. Run the configured post-command.

Errors are reported as a FAILED TranscodeResult instead of being raised.
"""
from __future__ import annotations

import logging
import shlex
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ffmpeg_bridge.config import Settings, get_settings
from ffmpeg_bridge.constants import (
    BINARY_SOURCE,
    DESTINATION_BUCKET,
    OUTPUT_SUFFIX,
    SCRATCH_DIR,
    TranscodeStatus,
)
from ffmpeg_bridge.exceptions import TranscodeBridgeError, TranscodeFailed, UnsafeObjectKey
from ffmpeg_bridge.s3 import S3ObjectStore
from ffmpeg_bridge.schemas import StorageNotification, TranscodeResult
from ffmpeg_bridge.shell import run_command, stream_process
from ffmpeg_bridge.staging import ensure_binary

logger = logging.getLogger(__name__)


def output_key_for(key: str) -> str:
    """The suffix is appended, never substituted: clip.mov -> clip.mov.mp4."""
    return f"{key}{OUTPUT_SUFFIX}"


@contextmanager
def scratch_files(source: Path, output: Path) -> Iterator[tuple[Path, Path]]:
    """Yield the source/output pair and delete both on exit.

    A failed delete is raised only when the body itself succeeded, so the
    body's own error is never masked.
    """
    body_failed = False
    try:
        yield source, output
    except BaseException:
        body_failed = True
        raise
    finally:
        first_error: OSError | None = None
        for path in (source, output):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Failed to delete %s: %s", path, exc)
                first_error = first_error or exc
        if first_error is not None and not body_failed:
            raise first_error


class TranscodeWorkflow:
    def __init__(
        self,
        settings: Settings | None,
        store: S3ObjectStore,
        *,
        scratch_dir: Path = SCRATCH_DIR,
        binary_source: Path = BINARY_SOURCE,
        destination_bucket: str = DESTINATION_BUCKET,
    ) -> None:
        self._settings = settings
        self.store = store
        self.scratch_dir = Path(scratch_dir)
        self.binary_source = Path(binary_source)
        self.destination_bucket = destination_bucket

    @property
    def settings(self) -> Settings:
        """Explicit settings, or the process-wide ones loaded on first use."""
        if self._settings is None:
            return get_settings()
        return self._settings

    def build_command(self, binary: Path, source: Path, output: Path) -> list[str]:
        settings = self.settings
        return [
            str(binary),
            "-y",
            "-i", str(source),
            *settings.filter_arg_list,
            *settings.video_args,
            *settings.audio_args,
            *settings.output_arg_list,
            str(output),
        ]

    def run(self, notification: StorageNotification) -> TranscodeResult:
        bucket, key = notification.bucket, notification.key
        output_key = output_key_for(key)

        try:
            settings = self.settings
            source = self.store.local_path(key)
            output = self.store.local_path(output_key)
            binary = ensure_binary(self.binary_source, self.scratch_dir)
            if binary.resolve() in (source.resolve(), output.resolve()):
                raise UnsafeObjectKey(key, "collides with the staged ffmpeg binary")

            with scratch_files(source, output):
                if source.exists():
                    logger.info("Reusing downloaded %s", source)
                else:
                    self.store.fetch(bucket, key)

                run_command(settings.pre_cmd)
                self._transcode(binary, source, output)

                logger.info("Upload to S3")
                self.store.put(self.destination_bucket, output_key, output)
            run_command(settings.post_cmd)
        except (TranscodeBridgeError, OSError) as exc:
            logger.error("%s", exc)
            return TranscodeResult(
                bucket=bucket,
                key=key,
                status=TranscodeStatus.FAILED,
                message=str(exc),
            )

        return TranscodeResult(
            bucket=bucket,
            key=key,
            status=TranscodeStatus.COMPLETED,
            output_key=output_key,
        )

    def _transcode(self, binary: Path, source: Path, output: Path) -> None:
        command = self.build_command(binary, source, output)
        logger.info("Transcoding...")
        logger.info("ffmpeg %s", shlex.join(command[1:]))
        returncode = stream_process(command)
        if returncode != 0:
            raise TranscodeFailed(returncode)
        logger.info("Transcode Successfully")
