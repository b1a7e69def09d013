from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from recap.utils.time import now_unix_s

StageStatus = Literal["pending", "success", "failed"]


class PipelineStage(StrEnum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    UPLOADING = "uploading"
    TRANSCRIPTION_SUBMITTED = "transcription_submitted"
    POLLING = "polling"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self not in (PipelineStage.IDLE, PipelineStage.DONE, PipelineStage.FAILED)


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    stage: PipelineStage
    message: str
    is_error: bool = False


@dataclass(frozen=True, slots=True)
class RunFailure:
    stage: str
    message: str
    error_type: str


@dataclass(slots=True)
class StageRecord:
    name: str
    status: StageStatus = "pending"
    started_at_s: float | None = None
    ended_at_s: float | None = None
    duration_ms: int | None = None
    attempts: int = 0
    error: str | None = None
    error_type: str | None = None
    meta: dict[str, object] = field(default_factory=dict)

    def start(self, *, at_s: float | None = None) -> None:
        self.started_at_s = now_unix_s() if at_s is None else at_s
        self.ended_at_s = None
        self.duration_ms = None
        self.status = "pending"
        self.attempts += 1

    def finish(
        self,
        *,
        status: StageStatus,
        at_s: float | None = None,
        error: str | None = None,
        error_type: str | None = None,
        meta: dict[str, object] | None = None,
    ) -> None:
        self.ended_at_s = now_unix_s() if at_s is None else at_s
        self.status = status
        self.error = error
        self.error_type = error_type
        if meta:
            self.meta.update(meta)
        self.duration_ms = self.compute_duration_ms()

    def compute_duration_ms(self) -> int | None:
        if self.started_at_s is None or self.ended_at_s is None:
            return None
        return max(0, int(round((self.ended_at_s - self.started_at_s) * 1000)))
