from __future__ import annotations

import io
import logging
import tempfile
import threading
import wave
from pathlib import Path

from recap.adapters.ffmpeg import AudioConverter
from recap.contracts.artifacts import NormalizedAudio
from recap.contracts.errors import ConversionError, ValidationError
from recap.utils.hashing import sha256_bytes
from recap.utils.time import Timer


DEFAULT_MAX_CONCURRENT_CONVERSIONS = 4
PCM_16_BIT_SAMPLE_WIDTH = 2

_MIME_SUFFIXES = {
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/mp4": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/aac": ".aac",
    "audio/flac": ".flac",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
}

logger = logging.getLogger(__name__)


def suffix_for_mime_type(mime_type: str | None) -> str:
    if not mime_type:
        return ".tmp"
    base_type = mime_type.split(";", 1)[0].strip().lower()
    return _MIME_SUFFIXES.get(base_type, ".tmp")


def _read_pcm_wav(data: bytes) -> tuple[int, int, float]:
    try:
        with wave.open(io.BytesIO(data), "rb") as wav:
            sample_width = wav.getsampwidth()
            channels = wav.getnchannels()
            sample_rate = wav.getframerate()
            frames = wav.getnframes()
    except (wave.Error, EOFError) as exc:
        raise ConversionError(f"converter output is not a PCM WAV file: {exc}") from exc

    if sample_width != PCM_16_BIT_SAMPLE_WIDTH:
        raise ConversionError(f"converter output must be 16-bit PCM, got {sample_width * 8}-bit")
    if channels <= 0 or sample_rate <= 0:
        raise ConversionError("converter output has an invalid WAV header")
    return sample_rate, channels, frames / float(sample_rate)


class AudioNormalizer:
    """Turns arbitrary audio bytes into canonical PCM 16-bit WAV bytes.

    Intermediate files live in a private temporary directory that is removed on
    both success and failure. Conversion is never retried. At most
    ``max_concurrent`` conversions run at once across the process.
    """

    def __init__(
        self,
        converter: AudioConverter,
        *,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT_CONVERSIONS,
        tmp_root: Path | None = None,
    ) -> None:
        if max_concurrent <= 0:
            raise ValueError("max_concurrent must be > 0")
        self._converter = converter
        self._slots = threading.BoundedSemaphore(max_concurrent)
        self._tmp_root = tmp_root

    def normalize(self, buffer: bytes, *, mime_type: str | None = None) -> NormalizedAudio:
        if not isinstance(buffer, (bytes, bytearray)) or len(buffer) == 0:
            raise ValidationError("No audio data provided.")

        timer = Timer.start()
        with self._slots:
            with tempfile.TemporaryDirectory(prefix="recap-", dir=self._tmp_root) as tmp:
                tmp_dir = Path(tmp)
                input_path = tmp_dir / f"input{suffix_for_mime_type(mime_type)}"
                output_path = tmp_dir / "normalized.wav"
                input_path.write_bytes(bytes(buffer))

                self._converter.convert_to_wav(input_path, output_path)

                if not output_path.exists() or not output_path.is_file():
                    raise ConversionError(f"converter did not produce normalized audio: {output_path.name}")
                data = output_path.read_bytes()

        sample_rate, channels, duration_s = _read_pcm_wav(data)
        logger.info(
            "Audio normalized",
            extra={
                "input_bytes": len(buffer),
                "output_bytes": len(data),
                "duration_s": round(duration_s, 3),
                "elapsed_ms": timer.elapsed_ms(),
            },
        )
        return NormalizedAudio(
            data=data,
            sha256=sha256_bytes(data),
            sample_rate=sample_rate,
            channels=channels,
            duration_s=duration_s,
        )


__all__ = ["AudioNormalizer", "suffix_for_mime_type"]
