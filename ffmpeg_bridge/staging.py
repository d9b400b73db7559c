"""
One-time staging of the ffmpeg binary into scratch space.

The deployment package is read-only, so the binary is copied into the
scratch directory and made executable there. The copy happens at most once
per scratch area: an existing file at the target path is always reused,
whatever its mode.
"""
from __future__ import annotations

import logging
import os
import shutil
import threading
from pathlib import Path

from ffmpeg_bridge.constants import BINARY_MODE, BINARY_NAME, BINARY_SOURCE, SCRATCH_DIR

logger = logging.getLogger(__name__)

_stage_lock = threading.Lock()


def staged_binary_path(scratch_dir: Path = SCRATCH_DIR) -> Path:
    return Path(scratch_dir) / BINARY_NAME


def ensure_binary(
    source: Path = BINARY_SOURCE,
    scratch_dir: Path = SCRATCH_DIR,
) -> Path:
    """Return the staged binary path, copying it from ``source`` if absent."""
    target = staged_binary_path(scratch_dir)
    if target.exists():
        return target
    with _stage_lock:
        if not target.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
            os.chmod(target, BINARY_MODE)
            logger.info("Staged %s to %s", source, target)
    return target
