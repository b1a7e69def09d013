"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    api_key: str = ""
    base_url: str = "https://api.assemblyai.com/v2"
    timeout_s: float = 60.0


class OpenAIConfig(BaseModel, frozen=True):
    """OpenAI chat-completions configuration."""

    api_key: str = ""
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7


class NormalizerConfig(BaseModel, frozen=True):
    """ffmpeg normalization configuration."""

    ffmpeg_path: str = "ffmpeg"
    sample_rate: int = 16000
    channels: int = 1
    max_concurrent: int = 4


class PollingConfig(BaseModel, frozen=True):
    """Transcription status polling configuration."""

    interval_s: float = 1.0
    max_attempts: int | None = 600


class ServerConfig(BaseModel, frozen=True):
    """HTTP service configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_bytes: int = 50 * 1024 * 1024
    cors_origins: tuple[str, ...] = ("*",)


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    assemblyai: AssemblyAIConfig = AssemblyAIConfig()
    openai: OpenAIConfig = OpenAIConfig()
    normalizer: NormalizerConfig = NormalizerConfig()
    polling: PollingConfig = PollingConfig()
    server: ServerConfig = ServerConfig()
    log_level: str = "INFO"


def _max_attempts(raw: str) -> int | None:
    value = int(raw)
    return value if value > 0 else None


def _origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip()) or ("*",)


def load_config(env: Mapping[str, str] | None = None) -> AppConfig:
    """Loads configuration from environment variables."""
    env = os.environ if env is None else env
    return AppConfig(
        assemblyai=AssemblyAIConfig(
            api_key=env.get("ASSEMBLYAI_API_KEY", ""),
            base_url=env.get("ASSEMBLYAI_BASE_URL", "https://api.assemblyai.com/v2"),
            timeout_s=env.get("ASSEMBLYAI_TIMEOUT_S", "60"),
        ),
        openai=OpenAIConfig(
            api_key=env.get("OPENAI_API_KEY", ""),
            model=env.get("OPENAI_MODEL", "gpt-3.5-turbo"),
            temperature=env.get("OPENAI_TEMPERATURE", "0.7"),
        ),
        normalizer=NormalizerConfig(
            ffmpeg_path=env.get("FFMPEG_PATH", "ffmpeg"),
            sample_rate=env.get("NORMALIZE_SAMPLE_RATE", "16000"),
            channels=env.get("NORMALIZE_CHANNELS", "1"),
            max_concurrent=env.get("MAX_CONCURRENT_CONVERSIONS", "4"),
        ),
        polling=PollingConfig(
            interval_s=env.get("POLL_INTERVAL_S", "1.0"),
            max_attempts=_max_attempts(env.get("POLL_MAX_ATTEMPTS", "600")),
        ),
        server=ServerConfig(
            host=env.get("HOST", "0.0.0.0"),
            port=env.get("PORT", "8000"),
            max_upload_bytes=env.get("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)),
            cors_origins=_origins(env.get("CORS_ORIGINS", "*")),
        ),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
