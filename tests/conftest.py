from collections.abc import Generator
from pathlib import Path

import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from ffmpeg_bridge.config import Settings, load_settings
from ffmpeg_bridge.s3 import S3ObjectStore
from ffmpeg_bridge.workflow import TranscodeWorkflow

ENV_VARS = ("V_ENC_PARA", "A_ENC_PARA", "FILTER_PARA", "OPTS_PARA", "PRE_CMD", "POST_CMD")

# Stand-in for the ffmpeg binary: one line on stdout, one on stderr, then
# copies the input ($3, after "-y -i") to the last argument.
FAKE_FFMPEG = """#!/bin/sh
echo "frame=1 fps=0.0"
echo "frame=2 fps=30.0" >&2
for last; do :; done
cp "$3" "$last"
"""

FAILING_FFMPEG = """#!/bin/sh
echo "Invalid data found when processing input" >&2
exit 1
"""


class FakeS3Client:
    """Records download_file/upload_file calls against an in-memory store."""

    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None) -> None:
        self.objects = dict(objects or {})
        self.uploads: dict[tuple[str, str], bytes] = {}
        self.download_calls: list[tuple[str, str]] = []
        self.fail_uploads: set[str] = set()

    def download_file(self, bucket: str, key: str, filename: str) -> None:
        self.download_calls.append((bucket, key))
        if (bucket, key) not in self.objects:
            raise ClientError(
                {"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject",
            )
        Path(filename).write_bytes(self.objects[(bucket, key)])

    def upload_file(self, filename: str, bucket: str, key: str) -> None:
        if key in self.fail_uploads:
            # boto3 managed transfers wrap the ClientError
            raise S3UploadFailedError(
                f"Failed to upload {filename} to {bucket}/{key}: An error occurred "
                "(AccessDenied) when calling the PutObject operation: Access Denied"
            )
        self.uploads[(bucket, key)] = Path(filename).read_bytes()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path


def _write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(0o644)  # staging is responsible for making it executable
    return path


@pytest.fixture
def fake_ffmpeg(tmp_path: Path) -> Path:
    return _write_script(tmp_path / "task" / "ffmpeg", FAKE_FFMPEG)


@pytest.fixture
def failing_ffmpeg(tmp_path: Path) -> Path:
    return _write_script(tmp_path / "task-broken" / "ffmpeg", FAILING_FFMPEG)


@pytest.fixture
def settings() -> Settings:
    return load_settings(pre_cmd="echo pre-hook", post_cmd="echo post-hook")


@pytest.fixture
def s3_client() -> FakeS3Client:
    return FakeS3Client({("src", "a.mp4"): b"source-bytes"})


@pytest.fixture
def store(s3_client: FakeS3Client, scratch_dir: Path) -> S3ObjectStore:
    return S3ObjectStore(client=s3_client, scratch_dir=scratch_dir)


@pytest.fixture
def workflow(
    settings: Settings, store: S3ObjectStore, scratch_dir: Path, fake_ffmpeg: Path,
) -> Generator[TranscodeWorkflow, None, None]:
    yield TranscodeWorkflow(
        settings,
        store,
        scratch_dir=scratch_dir,
        binary_source=fake_ffmpeg,
        destination_bucket="dest-bucket",
    )
