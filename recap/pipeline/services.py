from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from openai import OpenAI

from recap.adapters.assemblyai import AssemblyAIAdapter
from recap.adapters.ffmpeg import FfmpegAudioConverter
from recap.adapters.openai_summary import OpenAISummaryLLM
from recap.adapters.transcription import TranscriptionProvider
from recap.components.normalization import AudioNormalizer
from recap.components.summary import SummaryComposer
from recap.components.transcription import TranscriptionClient
from recap.config import AppConfig


@dataclass(frozen=True, slots=True)
class PipelineServices:
    """Stateless collaborators shared by pipeline runs and HTTP handlers."""

    normalizer: AudioNormalizer
    provider: TranscriptionProvider
    transcription: TranscriptionClient
    composer: SummaryComposer


def build_http_client(config: AppConfig) -> httpx.Client:
    return httpx.Client(timeout=httpx.Timeout(config.assemblyai.timeout_s))


def build_openai_client(config: AppConfig) -> OpenAI:
    return OpenAI(api_key=config.openai.api_key or None, max_retries=0)


def build_services(
    config: AppConfig,
    *,
    http_client: httpx.Client | None = None,
    openai_client: Any | None = None,
) -> PipelineServices:
    normalizer = AudioNormalizer(
        FfmpegAudioConverter(
            ffmpeg_executable=config.normalizer.ffmpeg_path,
            sample_rate=config.normalizer.sample_rate,
            channels=config.normalizer.channels,
        ),
        max_concurrent=config.normalizer.max_concurrent,
    )
    provider = AssemblyAIAdapter(
        http_client if http_client is not None else build_http_client(config),
        api_key=config.assemblyai.api_key,
        base_url=config.assemblyai.base_url,
    )
    llm = OpenAISummaryLLM(
        openai_client if openai_client is not None else build_openai_client(config),
        model=config.openai.model,
        temperature=config.openai.temperature,
    )
    return PipelineServices(
        normalizer=normalizer,
        provider=provider,
        transcription=TranscriptionClient(provider),
        composer=SummaryComposer(llm),
    )


__all__ = ["PipelineServices", "build_http_client", "build_openai_client", "build_services"]
