from __future__ import annotations

import logging

from recap.adapters.transcription import TranscriptionProvider
from recap.components.transcription import API_NAME, PROVIDER_LABEL, require_https_url
from recap.contracts.artifacts import NormalizedAudio, UploadReference
from recap.contracts.errors import ProviderResponseError, ValidationError


logger = logging.getLogger(__name__)


def upload_audio(audio: NormalizedAudio, provider: TranscriptionProvider) -> UploadReference:
    """Upload normalized WAV bytes and return the service-issued reference URL."""
    if not audio.data:
        raise ValidationError("No audio data provided.")

    payload = provider.upload_audio(audio.data, content_type="audio/wav")
    # Older upload responses use "url" instead of "upload_url".
    url = payload.get("upload_url") or payload.get("url")
    if not isinstance(url, str) or not url:
        raise ProviderResponseError(
            f"{PROVIDER_LABEL} upload response is missing upload_url",
            api=API_NAME,
            provider=PROVIDER_LABEL,
        )
    try:
        require_https_url(url)
    except ValidationError as exc:
        raise ProviderResponseError(
            f"{PROVIDER_LABEL} returned a non-HTTPS upload_url",
            api=API_NAME,
            provider=PROVIDER_LABEL,
        ) from exc

    logger.info("Audio uploaded", extra={"sha256": audio.sha256, "bytes": len(audio.data)})
    return UploadReference(url=url)


__all__ = ["upload_audio"]
