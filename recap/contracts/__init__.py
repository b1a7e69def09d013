from .artifacts import (
    AudioArtifact,
    JobStatus,
    NormalizedAudio,
    SummaryRequest,
    SummaryResult,
    SummaryStyle,
    TranscriptionJob,
    UploadReference,
    resolve_style,
)
from .errors import (
    ComponentError,
    ConversionError,
    GenerationError,
    JobFailedError,
    PipelineCancelledError,
    PipelineError,
    PreconditionError,
    ProviderResponseError,
    RemoteServiceError,
    TranscriptionTimeoutError,
    ValidationError,
    describe_http_status,
)
from .run_state import PipelineStage, ProgressEvent, RunFailure, StageRecord

__all__ = [
    "AudioArtifact",
    "NormalizedAudio",
    "UploadReference",
    "JobStatus",
    "TranscriptionJob",
    "SummaryStyle",
    "SummaryRequest",
    "SummaryResult",
    "resolve_style",
    "PipelineStage",
    "ProgressEvent",
    "RunFailure",
    "StageRecord",
    "PipelineError",
    "PreconditionError",
    "PipelineCancelledError",
    "ComponentError",
    "ValidationError",
    "ConversionError",
    "RemoteServiceError",
    "ProviderResponseError",
    "GenerationError",
    "JobFailedError",
    "TranscriptionTimeoutError",
    "describe_http_status",
]
