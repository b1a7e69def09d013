from __future__ import annotations

from typing import Any

import pytest

from recap.components.transcription import TranscriptionClient, parse_job, require_https_url
from recap.components.upload import upload_audio
from recap.contracts.artifacts import JobStatus, NormalizedAudio, UploadReference
from recap.contracts.errors import ProviderResponseError, ValidationError


class _FakeProvider:
    def __init__(
        self,
        *,
        upload: dict[str, Any] | None = None,
        created: dict[str, Any] | None = None,
        statuses: list[dict[str, Any]] | None = None,
    ) -> None:
        self.upload = upload or {"upload_url": "https://cdn.example.test/a.wav"}
        self.created = created or {"id": "t1", "status": "queued"}
        self.statuses = list(statuses or [])
        self.calls: list[tuple[str, object]] = []

    def upload_audio(self, data: bytes, *, content_type: str) -> dict[str, Any]:
        self.calls.append(("upload", content_type))
        return self.upload

    def create_transcript(self, audio_url: str) -> dict[str, Any]:
        self.calls.append(("create", audio_url))
        return self.created

    def get_transcript(self, transcript_id: str) -> dict[str, Any]:
        self.calls.append(("get", transcript_id))
        return self.statuses.pop(0)


def test_submit_rejects_non_https_url_before_any_remote_call() -> None:
    provider = _FakeProvider()
    client = TranscriptionClient(provider)

    with pytest.raises(ValidationError, match="Invalid or missing audio_url."):
        client.submit(UploadReference(url="http://insecure.example.test/a.wav"))

    assert provider.calls == []


@pytest.mark.parametrize("url", [None, "", 42, "ftp://example.test/a.wav"])
def test_require_https_url_rejects_invalid_values(url: object) -> None:
    with pytest.raises(ValidationError):
        require_https_url(url)


def test_submit_returns_queued_job() -> None:
    provider = _FakeProvider()

    job = TranscriptionClient(provider).submit(UploadReference(url="https://cdn.example.test/a.wav"))

    assert job.id == "t1"
    assert job.status is JobStatus.QUEUED
    assert provider.calls == [("create", "https://cdn.example.test/a.wav")]


def test_poll_reads_status_once() -> None:
    provider = _FakeProvider(statuses=[{"id": "t1", "status": "completed", "text": "hello world"}])

    job = TranscriptionClient(provider).poll("t1")

    assert job.status is JobStatus.COMPLETED
    assert job.text == "hello world"
    assert provider.calls == [("get", "t1")]


def test_poll_reports_error_status_as_job_state() -> None:
    provider = _FakeProvider(statuses=[{"id": "t1", "status": "error", "error": "audio too short"}])

    job = TranscriptionClient(provider).poll("t1")

    assert job.status is JobStatus.ERROR
    assert job.error_detail == "audio too short"


def test_poll_rejects_blank_job_id() -> None:
    provider = _FakeProvider()

    with pytest.raises(ValidationError):
        TranscriptionClient(provider).poll("  ")

    assert provider.calls == []


def test_parse_job_uses_expected_id_when_missing() -> None:
    job = parse_job({"status": "processing"}, expected_id="t9")

    assert job.id == "t9"
    assert job.status is JobStatus.PROCESSING


def test_parse_job_rejects_unknown_status() -> None:
    with pytest.raises(ProviderResponseError, match="unknown job status"):
        parse_job({"id": "t1", "status": "paused"})


def test_parse_job_requires_an_id() -> None:
    with pytest.raises(ProviderResponseError):
        parse_job({"status": "queued"})


def _normalized() -> NormalizedAudio:
    return NormalizedAudio(data=b"RIFFdata", sha256="0" * 64)


def test_upload_audio_returns_reference() -> None:
    provider = _FakeProvider()

    ref = upload_audio(_normalized(), provider)

    assert ref == UploadReference(url="https://cdn.example.test/a.wav")
    assert provider.calls == [("upload", "audio/wav")]


def test_upload_audio_rejects_missing_url() -> None:
    provider = _FakeProvider(upload={"status": "ok"})

    with pytest.raises(ProviderResponseError, match="missing upload_url"):
        upload_audio(_normalized(), provider)


def test_upload_audio_rejects_non_https_url() -> None:
    provider = _FakeProvider(upload={"upload_url": "http://cdn.example.test/a.wav"})

    with pytest.raises(ProviderResponseError, match="non-HTTPS"):
        upload_audio(_normalized(), provider)


def test_upload_audio_rejects_empty_audio() -> None:
    provider = _FakeProvider()

    with pytest.raises(ValidationError):
        upload_audio(NormalizedAudio(data=b"", sha256="0" * 64), provider)

    assert provider.calls == []
