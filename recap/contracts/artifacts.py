from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


DEFAULT_MIME_TYPE = "audio/webm"


class JobStatus(StrEnum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.ERROR)


class SummaryStyle(StrEnum):
    SHORT = "short"
    MEDIUM = "medium"
    DETAILED = "detailed"


@dataclass(frozen=True, slots=True)
class AudioArtifact:
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class NormalizedAudio:
    """PCM 16-bit little-endian WAV bytes derived from one AudioArtifact."""

    data: bytes
    sha256: str
    sample_rate: int | None = None
    channels: int | None = None
    duration_s: float | None = None


@dataclass(frozen=True, slots=True)
class UploadReference:
    url: str


@dataclass(frozen=True, slots=True)
class TranscriptionJob:
    id: str
    status: JobStatus
    text: str | None = None
    error_detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "text": self.text,
            "error": self.error_detail,
        }


@dataclass(frozen=True, slots=True)
class SummaryRequest:
    source_text: str
    style: SummaryStyle = SummaryStyle.MEDIUM

    @classmethod
    def create(cls, source_text: str, style: str | SummaryStyle | None = None) -> "SummaryRequest":
        return cls(source_text=source_text, style=resolve_style(style))


def resolve_style(style: Any) -> SummaryStyle:
    """Absent or unrecognized styles fall back to medium."""
    if style is None:
        return SummaryStyle.MEDIUM
    try:
        return SummaryStyle(style)
    except ValueError:
        return SummaryStyle.MEDIUM


@dataclass(frozen=True, slots=True)
class SummaryResult:
    text: str
    style_used: SummaryStyle
    meta: dict[str, Any] | None = None
