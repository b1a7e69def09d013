from __future__ import annotations

import logging
from typing import Any, Protocol

import openai

from recap.contracts.errors import GenerationError, RemoteServiceError


PROVIDER_NAME = "OpenAI"
API_NAME = "summarization"

logger = logging.getLogger(__name__)


class _ChatCompletionsAPI(Protocol):
    def create(self, **kwargs: Any) -> Any: ...


class _ChatAPI(Protocol):
    completions: _ChatCompletionsAPI


class OpenAIClientLike(Protocol):
    chat: _ChatAPI


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    if hasattr(obj, name):
        return getattr(obj, name)
    model_dump = getattr(obj, "model_dump", None)
    if callable(model_dump):
        dumped = model_dump()
        if isinstance(dumped, dict):
            return dumped.get(name, default)
    return default


def _error_payload_message(response: Any) -> str | None:
    error = _field(response, "error")
    if not error:
        return None
    message = _field(error, "message")
    if message:
        return str(message)
    return str(error)


def _extract_chat_completion_text(response: Any) -> str:
    choices = _field(response, "choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = _field(choices[0], "message")
    content = _field(message, "content")
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            text = _field(item, "text")
            if text:
                parts.append(str(text))
        return "\n".join(parts).strip()
    return ""


class OpenAISummaryLLM:
    """Chat-completions adapter that maps SDK failures onto the pipeline error taxonomy."""

    def __init__(self, client: OpenAIClientLike, *, model: str, temperature: float = 0.7) -> None:
        if not model:
            raise ValueError("summary model is required")
        self._client = client
        self._model = model
        self._temperature = temperature

    @property
    def model(self) -> str:
        return self._model

    def generate_summary(self, *, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
                temperature=self._temperature,
            )
        except openai.APIStatusError as exc:
            logger.warning("OpenAI rejected request", extra={"status": exc.status_code})
            raise RemoteServiceError(status=exc.status_code, api=API_NAME, provider=PROVIDER_NAME) from exc
        except openai.APIConnectionError as exc:
            logger.warning("OpenAI request did not complete")
            raise RemoteServiceError(
                status=None,
                api=API_NAME,
                provider=PROVIDER_NAME,
                message=f"Could not reach {PROVIDER_NAME}: {exc}",
            ) from exc

        error_message = _error_payload_message(response)
        if error_message:
            raise GenerationError(error_message)

        return _extract_chat_completion_text(response)


__all__ = ["OpenAIClientLike", "OpenAISummaryLLM"]
