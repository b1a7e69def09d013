import unittest

from recap.contracts.artifacts import (
    AudioArtifact,
    JobStatus,
    NormalizedAudio,
    SummaryRequest,
    SummaryResult,
    SummaryStyle,
    TranscriptionJob,
    resolve_style,
)
from recap.contracts.run_state import PipelineStage


class ArtifactDefaultsTests(unittest.TestCase):
    def test_artifact_construction_defaults(self) -> None:
        audio = AudioArtifact(data=b"abc")
        self.assertEqual(audio.mime_type, "audio/webm")
        self.assertEqual(audio.size, 3)

        normalized = NormalizedAudio(data=b"RIFF", sha256="0" * 64)
        self.assertIsNone(normalized.sample_rate)
        self.assertIsNone(normalized.channels)
        self.assertIsNone(normalized.duration_s)

        job = TranscriptionJob(id="t1", status=JobStatus.QUEUED)
        self.assertIsNone(job.text)
        self.assertIsNone(job.error_detail)
        self.assertEqual(job.to_dict(), {"id": "t1", "status": "queued", "text": None, "error": None})

        request = SummaryRequest(source_text="hello")
        self.assertIs(request.style, SummaryStyle.MEDIUM)

        result = SummaryResult(text="summary", style_used=SummaryStyle.SHORT)
        self.assertIsNone(result.meta)

    def test_terminal_job_statuses(self) -> None:
        self.assertFalse(JobStatus.QUEUED.is_terminal)
        self.assertFalse(JobStatus.PROCESSING.is_terminal)
        self.assertTrue(JobStatus.COMPLETED.is_terminal)
        self.assertTrue(JobStatus.ERROR.is_terminal)

    def test_active_pipeline_stages(self) -> None:
        inactive = {PipelineStage.IDLE, PipelineStage.DONE, PipelineStage.FAILED}
        for stage in PipelineStage:
            self.assertEqual(stage.is_active, stage not in inactive, stage)

    def test_resolve_style_falls_back_to_medium(self) -> None:
        self.assertIs(resolve_style("short"), SummaryStyle.SHORT)
        self.assertIs(resolve_style(SummaryStyle.DETAILED), SummaryStyle.DETAILED)
        self.assertIs(resolve_style(None), SummaryStyle.MEDIUM)
        self.assertIs(resolve_style("extra-long"), SummaryStyle.MEDIUM)
        self.assertIs(resolve_style(42), SummaryStyle.MEDIUM)

    def test_summary_request_create_resolves_style(self) -> None:
        self.assertIs(SummaryRequest.create("text", "bogus").style, SummaryStyle.MEDIUM)
        self.assertIs(SummaryRequest.create("text", "short").style, SummaryStyle.SHORT)


if __name__ == "__main__":
    unittest.main()
