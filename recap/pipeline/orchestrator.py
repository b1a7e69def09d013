from __future__ import annotations

import logging
import threading
from typing import Any, Callable, NoReturn, TypeVar
from uuid import uuid4

from recap.components.upload import upload_audio
from recap.contracts.artifacts import AudioArtifact, JobStatus, SummaryResult, SummaryStyle, TranscriptionJob, resolve_style
from recap.contracts.errors import (
    JobFailedError,
    PipelineCancelledError,
    PipelineError,
    PreconditionError,
    TranscriptionTimeoutError,
)
from recap.contracts.run_state import PipelineStage, ProgressEvent, RunFailure, StageRecord
from recap.pipeline.cancellation import CancellationToken
from recap.pipeline.services import PipelineServices


DEFAULT_POLL_INTERVAL_S = 1.0
DEFAULT_MAX_POLL_ATTEMPTS = 600
CANCELLED_MESSAGE = "Pipeline cancelled."
NO_TRANSCRIPT_MESSAGE = "No transcript to summarize!"
BUSY_MESSAGE = "A pipeline run is already in progress."
WAITING_MESSAGE = "Waiting for transcription..."
POLLING_MESSAGE = "Polling transcription status..."

# Stage records are kept per step; failures are reported under the coarser
# user-facing stage names.
_FAILURE_STAGE = {
    "normalize": "normalize",
    "upload": "upload",
    "submit": "transcribe",
    "poll": "transcribe",
    "summarize": "summarize",
}

ProgressObserver = Callable[[ProgressEvent], None]
T = TypeVar("T")

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Drives one audio artifact at a time through normalize, upload, transcribe and summarize.

    The orchestrator owns the only cross-stage state: the current stage, the
    transcript and summary of the latest run, and the per-step timing records.
    Failures leave earlier artifacts in place, so a transcript survives a
    failed summarization and can be summarized again with ``regenerate``.

    ``run`` and ``regenerate`` claim the orchestrator under a lock; a second
    caller gets PreconditionError while a stage is active. ``cancel`` applies
    to the active run only and is a no-op while idle.
    """

    def __init__(
        self,
        services: PipelineServices,
        *,
        observer: ProgressObserver | None = None,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        max_poll_attempts: int | None = DEFAULT_MAX_POLL_ATTEMPTS,
    ) -> None:
        if poll_interval_s < 0:
            raise ValueError("poll_interval_s must be >= 0")
        if max_poll_attempts is not None and max_poll_attempts <= 0:
            raise ValueError("max_poll_attempts must be > 0 or None")
        self._services = services
        self._observer = observer
        self._poll_interval_s = poll_interval_s
        self._max_poll_attempts = max_poll_attempts

        self._stage = PipelineStage.IDLE
        self._run_id: str | None = None
        self._lock = threading.Lock()
        self._cancel = CancellationToken()
        self._transcript: str | None = None
        self._summary: SummaryResult | None = None
        self._failure: RunFailure | None = None
        self._stages: dict[str, StageRecord] = {}

    @property
    def stage(self) -> PipelineStage:
        return self._stage

    @property
    def run_id(self) -> str | None:
        return self._run_id

    @property
    def transcript(self) -> str | None:
        return self._transcript

    @property
    def summary(self) -> SummaryResult | None:
        return self._summary

    @property
    def failure(self) -> RunFailure | None:
        return self._failure

    @property
    def stages(self) -> dict[str, StageRecord]:
        return dict(self._stages)

    def cancel(self) -> None:
        with self._lock:
            if self._stage.is_active:
                self._cancel.cancel()

    def run(self, artifact: AudioArtifact, *, style: str | SummaryStyle | None = None) -> SummaryResult:
        with self._lock:
            if self._stage.is_active:
                raise PreconditionError("normalize", BUSY_MESSAGE)
            self._run_id = uuid4().hex
            self._cancel = CancellationToken()
            self._transcript = None
            self._summary = None
            self._failure = None
            self._stages = {}
            self._stage = PipelineStage.NORMALIZING
        logger.info(
            "Pipeline run started",
            extra={"run_id": self._run_id, "mime_type": artifact.mime_type, "bytes": artifact.size},
        )

        self._emit(PipelineStage.NORMALIZING, "Processing audio...")
        normalized = self._execute(
            "normalize",
            lambda: self._services.normalizer.normalize(artifact.data, mime_type=artifact.mime_type),
            network=False,
        )

        self._transition(PipelineStage.UPLOADING, "Uploading audio...")
        upload_ref = self._execute("upload", lambda: upload_audio(normalized, self._services.provider))

        self._transition(PipelineStage.TRANSCRIPTION_SUBMITTED, "Requesting transcription...")
        job = self._execute("submit", lambda: self._services.transcription.submit(upload_ref))

        self._transition(PipelineStage.POLLING, WAITING_MESSAGE)
        job = self._execute("poll", lambda: self._await_completion(job), network=False)
        self._transcript = job.text

        self._transition(PipelineStage.SUMMARIZING, "Transcription complete. Generating summary...")
        return self._summarize(style)

    def regenerate(self, style: str | SummaryStyle | None = None) -> SummaryResult:
        """Summarize the held transcript again, skipping upload and transcription."""
        with self._lock:
            if self._stage.is_active:
                raise PreconditionError("summarize", BUSY_MESSAGE)
            has_transcript = bool(self._transcript and self._transcript.strip())
            if has_transcript:
                self._cancel = CancellationToken()
                self._failure = None
                self._stage = PipelineStage.SUMMARIZING

        if not has_transcript:
            self._emit(self._stage, NO_TRANSCRIPT_MESSAGE, is_error=True)
            raise PreconditionError("summarize", NO_TRANSCRIPT_MESSAGE)
        self._emit(PipelineStage.SUMMARIZING, "Generating summary...")
        return self._summarize(style)

    def _summarize(self, style: str | SummaryStyle | None) -> SummaryResult:
        transcript = self._transcript
        result = self._execute(
            "summarize",
            lambda: self._services.composer.compose(transcript, resolve_style(style)),
        )
        self._summary = result
        self._transition(PipelineStage.DONE, f"Summary complete ({result.style_used.value}).")
        logger.info(
            "Pipeline run finished",
            extra={"run_id": self._run_id, "style": result.style_used.value},
        )
        return result

    def _await_completion(self, job: TranscriptionJob) -> TranscriptionJob:
        attempts = 0
        while not job.status.is_terminal:
            if self._max_poll_attempts is not None and attempts >= self._max_poll_attempts:
                raise TranscriptionTimeoutError(job.id, attempts)
            if attempts and self._cancel.wait(self._poll_interval_s):
                raise PipelineCancelledError("transcribe", CANCELLED_MESSAGE)
            self._raise_if_cancelled("poll")
            attempts += 1
            self._emit(PipelineStage.POLLING, POLLING_MESSAGE)
            job = self._services.transcription.poll(job.id)

        self._stages["poll"].meta["poll_count"] = attempts
        if job.status is JobStatus.ERROR:
            raise JobFailedError(job.id, job.error_detail)
        if not job.text or not job.text.strip():
            raise JobFailedError(job.id, "no transcript text was returned")
        return job

    def _execute(self, name: str, action: Callable[[], T], *, network: bool = True) -> T:
        record = self._stages.setdefault(name, StageRecord(name=name))
        record.start()
        try:
            if network:
                self._raise_if_cancelled(name)
            value = action()
        except Exception as exc:
            self._fail(record, exc)
        record.finish(status="success")
        logger.info(
            "Pipeline stage finished",
            extra={"run_id": self._run_id, "stage": name, "duration_ms": record.duration_ms},
        )
        return value

    def _raise_if_cancelled(self, name: str) -> None:
        if self._cancel.cancelled:
            raise PipelineCancelledError(_FAILURE_STAGE[name], CANCELLED_MESSAGE)

    def _fail(self, record: StageRecord, exc: Exception) -> NoReturn:
        stage = _FAILURE_STAGE[record.name]
        message = str(exc)
        record.finish(status="failed", error=message, error_type=type(exc).__name__)
        self._stage = PipelineStage.FAILED
        self._failure = RunFailure(stage=stage, message=message, error_type=type(exc).__name__)

        event_message = f"Error summarizing: {message}" if stage == "summarize" else message
        self._emit(PipelineStage.FAILED, event_message, is_error=True)
        logger.warning(
            "Pipeline stage failed",
            extra={
                "run_id": self._run_id,
                "stage": stage,
                "step": record.name,
                "error_type": type(exc).__name__,
                "error": message,
            },
        )

        if isinstance(exc, PipelineError):
            raise exc
        raise PipelineError(stage, message) from exc

    def _transition(self, stage: PipelineStage, message: str) -> None:
        self._stage = stage
        self._emit(stage, message)

    def _emit(self, stage: PipelineStage, message: str, *, is_error: bool = False) -> None:
        if self._observer is None:
            return
        self._observer(ProgressEvent(stage=stage, message=message, is_error=is_error))


def describe_run(orchestrator: PipelineOrchestrator) -> dict[str, Any]:
    """Snapshot of the orchestrator's transient state for logs and CLI output."""
    failure = orchestrator.failure
    return {
        "run_id": orchestrator.run_id,
        "stage": orchestrator.stage.value,
        "has_transcript": orchestrator.transcript is not None,
        "summary_style": orchestrator.summary.style_used.value if orchestrator.summary else None,
        "failure": {"stage": failure.stage, "message": failure.message} if failure else None,
        "stages": {
            name: {"status": rec.status, "duration_ms": rec.duration_ms, "attempts": rec.attempts}
            for name, rec in orchestrator.stages.items()
        },
    }


__all__ = [
    "DEFAULT_MAX_POLL_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL_S",
    "PipelineOrchestrator",
    "ProgressObserver",
    "describe_run",
]
