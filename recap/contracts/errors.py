from __future__ import annotations


_HTTP_STATUS_MESSAGES: dict[int, str] = {
    400: "Bad request to {provider}.",
    401: "Authentication failed for {provider}.",
    429: "Rate limit exceeded for {provider}.",
    500: "Server error from {provider}.",
    502: "{provider} is temporarily unavailable.",
    503: "{provider} is temporarily unavailable.",
    504: "{provider} is temporarily unavailable.",
}


def describe_http_status(status: int, provider: str) -> str:
    """Map an upstream HTTP status to a fixed, human-readable category message."""
    template = _HTTP_STATUS_MESSAGES.get(status)
    if template is None:
        return f"Unexpected error from {provider} (Status {status})."
    return template.format(provider=provider)


class PipelineError(Exception):
    """Raised by the orchestrator for user-facing failures of one run."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        self.message = message
        super().__init__(message)


class PreconditionError(PipelineError):
    """Raised when a transition is not allowed in the current pipeline state."""


class PipelineCancelledError(PipelineError):
    """Raised when a run is cancelled before it reaches a terminal state."""


class ComponentError(Exception):
    """Base exception for component-level failures."""


class ValidationError(ComponentError):
    """Raised when local input is malformed (empty buffer, bad URL, missing text)."""


class ConversionError(ComponentError):
    """Raised when audio cannot be normalized to PCM WAV."""


class RemoteServiceError(ComponentError):
    """Raised when an upstream call is rejected (non-2xx) or does not complete."""

    def __init__(
        self,
        *,
        status: int | None,
        api: str,
        provider: str,
        detail: str | None = None,
        message: str | None = None,
    ) -> None:
        self.status = status
        self.api = api
        self.provider = provider
        self.detail = detail
        if message is None:
            if status is None:
                message = f"Could not reach {provider}."
            else:
                message = describe_http_status(status, provider)
            if detail:
                message = f"{message} {detail}"
        super().__init__(message)


class ProviderResponseError(RemoteServiceError):
    """Raised when an upstream response has an unexpected shape."""

    def __init__(self, message: str, *, api: str, provider: str) -> None:
        super().__init__(status=None, api=api, provider=provider, message=message)


class GenerationError(ComponentError):
    """Raised when the language model returns an error payload or no usable text."""


class JobFailedError(ComponentError):
    """Raised when a transcription job reaches the terminal error state."""

    def __init__(self, job_id: str, detail: str | None) -> None:
        self.job_id = job_id
        self.detail = detail
        super().__init__(f"Transcription failed: {detail or 'unknown error'}")


class TranscriptionTimeoutError(ComponentError):
    """Raised when polling gives up before the job reaches a terminal status."""

    def __init__(self, job_id: str, attempts: int) -> None:
        self.job_id = job_id
        self.attempts = attempts
        super().__init__(f"Transcription did not finish after {attempts} status checks.")
