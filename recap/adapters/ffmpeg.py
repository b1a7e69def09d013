from __future__ import annotations

import logging
import subprocess
from os import PathLike
from pathlib import Path
from typing import Protocol, Sequence, TypeAlias

from recap.contracts.errors import ConversionError


StrPath: TypeAlias = str | PathLike[str]

logger = logging.getLogger(__name__)


def _path_str(value: StrPath) -> str:
    return str(Path(value))


def _require_positive_int(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be > 0")


def build_ffmpeg_normalize_cmd(
    input_path: StrPath,
    output_path: StrPath,
    *,
    ffmpeg_executable: str = "ffmpeg",
    sample_rate: int = 16000,
    channels: int = 1,
) -> list[str]:
    """Build a deterministic ffmpeg command for PCM 16-bit WAV normalization."""
    _require_positive_int("sample_rate", sample_rate)
    _require_positive_int("channels", channels)

    return [
        ffmpeg_executable,
        "-y",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        _path_str(input_path),
        "-vn",
        "-acodec",
        "pcm_s16le",
        "-ar",
        str(sample_rate),
        "-ac",
        str(channels),
        "-f",
        "wav",
        _path_str(output_path),
    ]


class AudioConverter(Protocol):
    def convert_to_wav(self, input_path: Path, output_path: Path) -> None:
        """Write a PCM 16-bit WAV rendition of input_path to output_path."""


class FfmpegAudioConverter:
    """Runs ffmpeg as a subprocess; any non-zero exit becomes a ConversionError."""

    def __init__(
        self,
        *,
        ffmpeg_executable: str = "ffmpeg",
        sample_rate: int = 16000,
        channels: int = 1,
    ) -> None:
        _require_positive_int("sample_rate", sample_rate)
        _require_positive_int("channels", channels)
        self._ffmpeg_executable = ffmpeg_executable
        self._sample_rate = sample_rate
        self._channels = channels

    def convert_to_wav(self, input_path: Path, output_path: Path) -> None:
        cmd = build_ffmpeg_normalize_cmd(
            input_path,
            output_path,
            ffmpeg_executable=self._ffmpeg_executable,
            sample_rate=self._sample_rate,
            channels=self._channels,
        )
        _run_ffmpeg_or_raise(cmd, "ffmpeg could not convert the audio to WAV")


def _run_ffmpeg_or_raise(cmd: Sequence[str], fallback_message: str) -> None:
    try:
        completed = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        raise ConversionError(f"ffmpeg executable not found: {cmd[0]}") from exc
    if completed.returncode == 0:
        return
    message = completed.stderr.strip() or completed.stdout.strip() or fallback_message
    logger.warning(
        "ffmpeg exited with a non-zero status",
        extra={"returncode": completed.returncode},
    )
    raise ConversionError(message)


__all__ = [
    "AudioConverter",
    "FfmpegAudioConverter",
    "build_ffmpeg_normalize_cmd",
]
