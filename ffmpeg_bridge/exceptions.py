"""
Transcode bridge — domain exceptions.

Every error raised while handling a notification derives from
TranscodeBridgeError, so the workflow boundary can catch the whole family
and report it as a failed result. Messages are preset; call sites only pass
the identifying details.
"""


class TranscodeBridgeError(Exception):
    """Base class for all bridge errors."""


# ── Configuration ────────────────────────────────────────────────────────────

class ConfigError(TranscodeBridgeError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid value for {name}: {reason}")
        self.name = name


# ── Storage ──────────────────────────────────────────────────────────────────

class StorageError(TranscodeBridgeError):
    def __init__(self, operation: str, bucket: str, key: str, reason: str) -> None:
        super().__init__(f"S3 {operation} failed for s3://{bucket}/{key}: {reason}")
        self.operation = operation
        self.bucket = bucket
        self.key = key


class ObjectNotFound(StorageError):
    def __init__(self, bucket: str, key: str) -> None:
        super().__init__("get", bucket, key, "object does not exist")


class UnsafeObjectKey(TranscodeBridgeError):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Refusing object key {key!r}: {reason}")
        self.key = key


# ── Subprocess ───────────────────────────────────────────────────────────────

class SubprocessLaunchError(TranscodeBridgeError):
    def __init__(self, executable: str, reason: str) -> None:
        super().__init__(f"Could not launch {executable}: {reason}")
        self.executable = executable


class TranscodeFailed(TranscodeBridgeError):
    def __init__(self, returncode: int) -> None:
        super().__init__(f"ffmpeg exited with status {returncode}")
        self.returncode = returncode
