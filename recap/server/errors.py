"""Error translation for the recap HTTP API.

Every failure inside a route becomes HTTP 500 with ``{"error": "<prefix>: <message>"}``;
unknown routes become HTTP 404 with ``{"error": "API endpoint not found"}``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recap.contracts.errors import ComponentError


UPLOAD_PREFIX = "Upload failed"
TRANSCRIBE_PREFIX = "Transcription failed"
STATUS_PREFIX = "Transcription status failed"
SUMMARIZE_PREFIX = "Summarization failed"
NOT_FOUND_MESSAGE = "API endpoint not found"
INVALID_BODY_MESSAGE = "Invalid request body."

_PREFIX_BY_PATH = {
    "/api/upload": UPLOAD_PREFIX,
    "/api/transcribe": TRANSCRIBE_PREFIX,
    "/api/summarize": SUMMARIZE_PREFIX,
}

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A route failure already mapped to its user-facing prefix."""

    def __init__(self, prefix: str, message: str) -> None:
        self.prefix = prefix
        self.message = message
        super().__init__(f"{prefix}: {message}")


@contextmanager
def api_errors(prefix: str) -> Iterator[None]:
    try:
        yield
    except ComponentError as exc:
        raise ApiError(prefix, str(exc)) from exc
    except Exception as exc:
        logger.exception("Unexpected failure while handling request", extra={"prefix": prefix})
        raise ApiError(prefix, str(exc)) from exc


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on a FastAPI application."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        logger.warning(
            "Request failed",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return _error_response(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        prefix = _PREFIX_BY_PATH.get(request.url.path)
        message = f"{prefix}: {INVALID_BODY_MESSAGE}" if prefix else INVALID_BODY_MESSAGE
        return _error_response(500, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in (404, 405):
            return _error_response(404, NOT_FOUND_MESSAGE)
        return _error_response(exc.status_code, str(exc.detail))


__all__ = [
    "ApiError",
    "api_errors",
    "register_error_handlers",
]
