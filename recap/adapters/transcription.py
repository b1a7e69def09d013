from __future__ import annotations

from typing import Any, Protocol


class TranscriptionProvider(Protocol):
    """Provider adapter boundary for upload, job submission and status reads."""

    def upload_audio(self, data: bytes, *, content_type: str = "audio/wav") -> dict[str, Any]:
        """Upload audio bytes and return the raw provider payload."""

    def create_transcript(self, audio_url: str) -> dict[str, Any]:
        """Submit a transcription job for a remote audio URL."""

    def get_transcript(self, transcript_id: str) -> dict[str, Any]:
        """Read the current state of a transcription job."""


__all__ = ["TranscriptionProvider"]
