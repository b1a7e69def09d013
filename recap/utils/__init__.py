"""Small helpers shared by components and the orchestrator."""

from __future__ import annotations

from .hashing import sha256_bytes, sha256_text
from .time import Timer, now_unix_s

__all__ = [
    "sha256_bytes",
    "sha256_text",
    "now_unix_s",
    "Timer",
]
