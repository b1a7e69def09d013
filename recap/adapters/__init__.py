from __future__ import annotations

from .assemblyai import AssemblyAIAdapter
from .ffmpeg import AudioConverter, FfmpegAudioConverter, build_ffmpeg_normalize_cmd
from .openai_summary import OpenAIClientLike, OpenAISummaryLLM
from .transcription import TranscriptionProvider

__all__ = [
    "AudioConverter",
    "FfmpegAudioConverter",
    "build_ffmpeg_normalize_cmd",
    "TranscriptionProvider",
    "AssemblyAIAdapter",
    "OpenAIClientLike",
    "OpenAISummaryLLM",
]
