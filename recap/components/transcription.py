from __future__ import annotations

import logging
from typing import Any

from recap.adapters.transcription import TranscriptionProvider
from recap.contracts.artifacts import JobStatus, TranscriptionJob, UploadReference
from recap.contracts.errors import ProviderResponseError, ValidationError


API_NAME = "transcription"
PROVIDER_LABEL = "AssemblyAI"

logger = logging.getLogger(__name__)


def require_https_url(url: Any) -> str:
    if not isinstance(url, str) or not url.startswith("https://"):
        raise ValidationError("Invalid or missing audio_url.")
    return url


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def parse_job(payload: dict[str, Any], *, expected_id: str | None = None) -> TranscriptionJob:
    """Normalize a provider transcript payload into a TranscriptionJob."""
    job_id = payload.get("id") or expected_id
    if not isinstance(job_id, str) or not job_id:
        raise ProviderResponseError(
            f"{PROVIDER_LABEL} response is missing a job id",
            api=API_NAME,
            provider=PROVIDER_LABEL,
        )

    raw_status = payload.get("status")
    try:
        status = JobStatus(raw_status)
    except ValueError as exc:
        raise ProviderResponseError(
            f"{PROVIDER_LABEL} returned an unknown job status: {raw_status!r}",
            api=API_NAME,
            provider=PROVIDER_LABEL,
        ) from exc

    return TranscriptionJob(
        id=job_id,
        status=status,
        text=_optional_text(payload.get("text")),
        error_detail=_optional_text(payload.get("error")),
    )


class TranscriptionClient:
    """Provider-agnostic job submission and single status reads.

    Repetition, waiting and cancellation belong to the caller; ``poll`` never
    retries on its own.
    """

    def __init__(self, provider: TranscriptionProvider) -> None:
        self._provider = provider

    def submit(self, upload_ref: UploadReference) -> TranscriptionJob:
        audio_url = require_https_url(upload_ref.url if upload_ref is not None else None)
        payload = self._provider.create_transcript(audio_url)
        job = parse_job(payload)
        logger.info("Transcription submitted", extra={"job_id": job.id, "status": job.status.value})
        return job

    def poll(self, job_id: str) -> TranscriptionJob:
        if not isinstance(job_id, str) or not job_id.strip():
            raise ValidationError("Invalid or missing transcription job id.")
        payload = self._provider.get_transcript(job_id)
        job = parse_job(payload, expected_id=job_id)
        logger.debug("Transcription status read", extra={"job_id": job.id, "status": job.status.value})
        return job


__all__ = ["TranscriptionClient", "parse_job", "require_https_url"]
