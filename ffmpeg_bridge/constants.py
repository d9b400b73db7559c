"""
Transcode bridge — fixed locations and enum types.
"""
import enum
from pathlib import Path

# Lambda scratch space; the only writable path in the runtime
SCRATCH_DIR = Path("/tmp")

# Deployment package root, read-only at runtime
BINARY_SOURCE = Path("/var/task/ffmpeg")
BINARY_NAME = "ffmpeg"
BINARY_MODE = 0o755

DESTINATION_BUCKET = "com.moiamond.ffpoc"
OUTPUT_SUFFIX = ".mp4"

SHELL_PATH = "/bin/bash"


class TranscodeStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
