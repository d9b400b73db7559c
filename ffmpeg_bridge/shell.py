"""
Subprocess helpers that forward child output to the log line by line.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence

from ffmpeg_bridge.constants import SHELL_PATH
from ffmpeg_bridge.exceptions import SubprocessLaunchError

logger = logging.getLogger(__name__)


def stream_process(command: Sequence[str], *, capture_stderr: bool = True) -> int:
    """Run ``command`` and log its output as it arrives. Returns the exit status.

    With ``capture_stderr`` the child's stderr is merged into stdout so both
    streams reach the log in emission order. Blocks until the child exits;
    there is no timeout.
    """
    try:
        process = subprocess.Popen(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if capture_stderr else None,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        raise SubprocessLaunchError(command[0], exc.strerror or str(exc)) from exc

    assert process.stdout is not None
    with process.stdout:
        for line in process.stdout:
            logger.info("%s", line.rstrip("\n"))
    return process.wait()


def run_command(command: str, *, shell: str = SHELL_PATH) -> int:
    """Run a shell command string, logging its stdout. Stderr is not captured."""
    logger.debug("Running: %s -c %s", shell, shlex.quote(command))
    return stream_process([shell, "-c", command], capture_stderr=False)
