"""Request and response models for the recap HTTP API."""

from typing import Any

from pydantic import BaseModel


class TranscribeRequest(BaseModel):
    """Body of POST /api/transcribe. Content is validated by the transcription client."""

    audio_url: Any = None


class SummarizeRequest(BaseModel):
    """Body of POST /api/summarize. Unknown lengths fall back to medium."""

    text: Any = None
    summary_length: Any = None


class UploadResponse(BaseModel):
    """Response returned after a successful normalize + upload."""

    upload_url: str


class JobResponse(BaseModel):
    """Transcription job state as reported by the service."""

    id: str
    status: str
    text: str | None = None
    error: str | None = None


class SummarizeResponse(BaseModel):
    """Generated summary and the style that was applied."""

    summary: str
    selected_length: str


class ErrorResponse(BaseModel):
    error: str
