import logging
from pathlib import Path

import pytest

from ffmpeg_bridge.exceptions import SubprocessLaunchError
from ffmpeg_bridge.shell import run_command, stream_process


def test_run_command_logs_stdout_lines_in_order(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    assert run_command("echo first; echo second") == 0
    messages = caplog.messages
    assert messages.index("first") < messages.index("second")


def test_run_command_passes_command_as_single_argument(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    run_command('printf "%s\\n" "a b"  "c"')
    assert "a b" in caplog.messages
    assert "c" in caplog.messages


def test_run_command_returns_exit_status_without_raising() -> None:
    assert run_command("exit 3") == 3


def test_run_command_does_not_capture_stderr(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    run_command("echo hidden >&2")
    assert "hidden" not in caplog.messages


def test_run_command_missing_shell_raises(tmp_path: Path) -> None:
    with pytest.raises(SubprocessLaunchError):
        run_command("true", shell=str(tmp_path / "no-such-shell"))


def test_stream_process_merges_stderr(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    status = stream_process(["/bin/sh", "-c", "echo out; echo err >&2; echo out2"])
    assert status == 0
    lines = [m for m in caplog.messages if m in ("out", "err", "out2")]
    assert lines == ["out", "err", "out2"]


def test_stream_process_unexecutable_binary_raises(tmp_path: Path) -> None:
    binary = tmp_path / "ffmpeg"
    binary.write_text("#!/bin/sh\n")
    binary.chmod(0o644)
    with pytest.raises(SubprocessLaunchError) as exc_info:
        stream_process([str(binary), "-version"])
    assert exc_info.value.executable == str(binary)
