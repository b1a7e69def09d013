"""Upload, transcription and summarization endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from recap.components.upload import upload_audio
from recap.config import AppConfig
from recap.contracts.artifacts import UploadReference
from recap.contracts.errors import ValidationError
from recap.pipeline.services import PipelineServices
from recap.server.errors import STATUS_PREFIX, SUMMARIZE_PREFIX, TRANSCRIBE_PREFIX, UPLOAD_PREFIX, api_errors
from recap.server.models import (
    ErrorResponse,
    JobResponse,
    SummarizeRequest,
    SummarizeResponse,
    TranscribeRequest,
    UploadResponse,
)


router = APIRouter(prefix="/api", tags=["pipeline"], responses={500: {"model": ErrorResponse}})


def get_services(request: Request) -> PipelineServices:
    """Returns the services bound to the application."""
    return request.app.state.services


def get_config(request: Request) -> AppConfig:
    """Returns the configuration bound to the application."""
    return request.app.state.config


ServicesDep = Annotated[PipelineServices, Depends(get_services)]
ConfigDep = Annotated[AppConfig, Depends(get_config)]


def _check_declared_size(request: Request, limit: int) -> None:
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise ValidationError(f"Audio payload exceeds the {limit} byte upload limit.")


@router.post("/upload", response_model=UploadResponse)
async def upload(request: Request, services: ServicesDep, config: ConfigDep) -> UploadResponse:
    """
    Normalizes raw audio to PCM WAV and uploads it to the transcription service.

    The body is the raw audio; its Content-Type must be an ``audio/*`` type.
    """
    with api_errors(UPLOAD_PREFIX):
        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith("audio/"):
            raise ValidationError("No audio data provided.")
        limit = config.server.max_upload_bytes
        _check_declared_size(request, limit)

        body = await request.body()
        if not body:
            raise ValidationError("No audio data provided.")
        if len(body) > limit:
            raise ValidationError(f"Audio payload exceeds the {limit} byte upload limit.")

        normalized = await run_in_threadpool(services.normalizer.normalize, body, mime_type=content_type)
        upload_ref = await run_in_threadpool(upload_audio, normalized, services.provider)

    return UploadResponse(upload_url=upload_ref.url)


@router.post("/transcribe", response_model=JobResponse)
def transcribe(body: TranscribeRequest, services: ServicesDep) -> JobResponse:
    """Submits an uploaded audio URL for transcription."""
    with api_errors(TRANSCRIBE_PREFIX):
        job = services.transcription.submit(UploadReference(url=body.audio_url))
    return JobResponse(**job.to_dict())


@router.get("/transcript/{transcript_id}", response_model=JobResponse, response_model_exclude_none=True)
def transcript_status(transcript_id: str, services: ServicesDep) -> JobResponse:
    """Reads the current status of a transcription job."""
    with api_errors(STATUS_PREFIX):
        job = services.transcription.poll(transcript_id)
    return JobResponse(**job.to_dict())


@router.post("/summarize", response_model=SummarizeResponse)
def summarize(body: SummarizeRequest, services: ServicesDep) -> SummarizeResponse:
    """Summarizes transcript text in the requested length style."""
    with api_errors(SUMMARIZE_PREFIX):
        result = services.composer.compose(body.text, body.summary_length)
    return SummarizeResponse(summary=result.text, selected_length=result.style_used.value)
