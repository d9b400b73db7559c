"""
Encoder configuration, read once per process from the Lambda environment.

Every parameter falls back to its default when the variable is unset or
blank. Values are otherwise passed through untouched; the four ffmpeg
parameters are only checked for being splittable into shell words, since
they are turned into discrete argv entries rather than handed to a shell.
"""
from __future__ import annotations

import shlex
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ffmpeg_bridge.exceptions import ConfigError

DEFAULT_VIDEO_ENCODE_ARGS = "-c:v libx264 -pix_fmt yuv420p -profile:v high -level 4.0 -b:v 5000K"
DEFAULT_AUDIO_ENCODE_ARGS = "-c:a aac -b:a 256K"
DEFAULT_FILTER_ARGS = '-vf "yadif=0:-1:0,scale=1920:1080" -r 30'
DEFAULT_OUTPUT_ARGS = "-movflags +faststart"
DEFAULT_PRE_CMD = "ls -al /tmp"
DEFAULT_POST_CMD = "ls -al /tmp"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # ── ffmpeg parameters ────────────────────────────────────────────────────
    video_encode_args: str = Field(DEFAULT_VIDEO_ENCODE_ARGS, validation_alias="V_ENC_PARA")
    audio_encode_args: str = Field(DEFAULT_AUDIO_ENCODE_ARGS, validation_alias="A_ENC_PARA")
    filter_args: str = Field(DEFAULT_FILTER_ARGS, validation_alias="FILTER_PARA")
    output_args: str = Field(DEFAULT_OUTPUT_ARGS, validation_alias="OPTS_PARA")

    # ── Shell hooks ──────────────────────────────────────────────────────────
    pre_cmd: str = Field(DEFAULT_PRE_CMD, validation_alias="PRE_CMD")
    post_cmd: str = Field(DEFAULT_POST_CMD, validation_alias="POST_CMD")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("video_encode_args", "audio_encode_args", "filter_args", "output_args")
    @classmethod
    def _splittable(cls, value: str) -> str:
        try:
            shlex.split(value)
        except ValueError as exc:
            raise ValueError(f"cannot split into arguments ({exc})") from exc
        return value

    @property
    def video_args(self) -> list[str]:
        return shlex.split(self.video_encode_args)

    @property
    def audio_args(self) -> list[str]:
        return shlex.split(self.audio_encode_args)

    @property
    def filter_arg_list(self) -> list[str]:
        return shlex.split(self.filter_args)

    @property
    def output_arg_list(self) -> list[str]:
        return shlex.split(self.output_args)


def load_settings(**overrides: Any) -> Settings:
    """Build Settings, reporting the first invalid field as a ConfigError."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        first = exc.errors()[0]
        name = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise ConfigError(name, first.get("msg", str(exc))) from exc


@lru_cache
def get_settings() -> Settings:
    return load_settings()
