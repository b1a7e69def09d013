from __future__ import annotations

import logging
from typing import Any

import httpx

from recap.adapters.transcription import TranscriptionProvider
from recap.contracts.errors import ProviderResponseError, RemoteServiceError


PROVIDER_NAME = "AssemblyAI"
API_NAME = "transcription"
DEFAULT_BASE_URL = "https://api.assemblyai.com/v2"

logger = logging.getLogger(__name__)


class AssemblyAIAdapter(TranscriptionProvider):
    """Thin REST client for the AssemblyAI upload and transcript endpoints.

    Every method returns the decoded JSON body. Non-2xx responses raise
    RemoteServiceError with the status-derived category message; requests that
    never complete raise RemoteServiceError with ``status=None``.
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        if not api_key:
            raise ValueError("AssemblyAI api_key is required")
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def upload_audio(self, data: bytes, *, content_type: str = "audio/wav") -> dict[str, Any]:
        response = self._send(
            "POST",
            "/upload",
            headers={"Content-Type": content_type},
            content=data,
        )
        return self._json(response)

    def create_transcript(self, audio_url: str) -> dict[str, Any]:
        response = self._send(
            "POST",
            "/transcript",
            json={"audio_url": audio_url},
            include_body_in_error=True,
        )
        return self._json(response)

    def get_transcript(self, transcript_id: str) -> dict[str, Any]:
        response = self._send("GET", f"/transcript/{transcript_id}")
        return self._json(response)

    def _send(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        include_body_in_error: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        request_headers = {"Authorization": self._api_key}
        if headers:
            request_headers.update(headers)
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, headers=request_headers, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("AssemblyAI request did not complete", extra={"path": path})
            raise RemoteServiceError(
                status=None,
                api=API_NAME,
                provider=PROVIDER_NAME,
                message=f"Could not reach {PROVIDER_NAME}: {exc}",
            ) from exc

        if response.is_success:
            return response

        logger.warning(
            "AssemblyAI rejected request",
            extra={"path": path, "status": response.status_code},
        )
        detail = response.text.strip() if include_body_in_error else None
        raise RemoteServiceError(
            status=response.status_code,
            api=API_NAME,
            provider=PROVIDER_NAME,
            detail=detail or None,
        )

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderResponseError(
                f"{PROVIDER_NAME} returned a non-JSON response",
                api=API_NAME,
                provider=PROVIDER_NAME,
            ) from exc
        if not isinstance(payload, dict):
            raise ProviderResponseError(
                f"{PROVIDER_NAME} returned an unexpected response body",
                api=API_NAME,
                provider=PROVIDER_NAME,
            )
        return payload


__all__ = ["AssemblyAIAdapter", "DEFAULT_BASE_URL", "PROVIDER_NAME"]
