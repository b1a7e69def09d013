from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Protocol

from recap.contracts.artifacts import SummaryRequest, SummaryResult, SummaryStyle, resolve_style
from recap.contracts.errors import GenerationError, ValidationError
from recap.utils.hashing import sha256_text


PROMPT_OVERHEAD_TOKENS = 20
SYSTEM_ROLE = "You are a friendly academic assistant."
FINISH_SENTENCES_DIRECTIVE = "Ensure you finish each sentence in full and do not cut off mid-sentence."
TRANSCRIPT_PREAMBLE = "Here is the transcript of an audio recording:"
CLOSING_REQUEST = "Please summarize its key points."

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StyleSpec:
    token_cap: int
    sentence_guidance: str
    extra_instruction: str | None = None

    @property
    def max_tokens(self) -> int:
        return self.token_cap - PROMPT_OVERHEAD_TOKENS


STYLE_TABLE: Mapping[SummaryStyle, StyleSpec] = MappingProxyType(
    {
        SummaryStyle.SHORT: StyleSpec(
            token_cap=100,
            sentence_guidance="exactly two complete sentences",
            extra_instruction="Use exactly two complete sentences.",
        ),
        SummaryStyle.MEDIUM: StyleSpec(token_cap=300, sentence_guidance="2-3 sentences"),
        SummaryStyle.DETAILED: StyleSpec(token_cap=500, sentence_guidance="3-5 sentences"),
    }
)


@dataclass(frozen=True, slots=True)
class SummaryPrompt:
    style: SummaryStyle
    system: str
    user: str
    max_tokens: int


class SummaryLLM(Protocol):
    """Provider adapter boundary for summary generation."""

    @property
    def model(self) -> str: ...

    def generate_summary(self, *, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        """Return raw generated text for the given prompts and output budget."""


def generation_budget(style: str | SummaryStyle | None) -> int:
    return STYLE_TABLE[resolve_style(style)].max_tokens


def build_summary_prompt(request: SummaryRequest) -> SummaryPrompt:
    style_spec = STYLE_TABLE[request.style]
    system_lines = [SYSTEM_ROLE]
    if style_spec.extra_instruction:
        system_lines.append(style_spec.extra_instruction)
    system_lines.extend(
        [
            "Summarize the content of the provided audio transcript (e.g. a lecture or meeting)",
            f"in {style_spec.sentence_guidance}, focusing on the key academic points.",
            FINISH_SENTENCES_DIRECTIVE,
        ]
    )
    user = "\n\n".join([TRANSCRIPT_PREAMBLE, request.source_text, CLOSING_REQUEST])
    return SummaryPrompt(
        style=request.style,
        system="\n".join(system_lines),
        user=user,
        max_tokens=style_spec.max_tokens,
    )


class SummaryComposer:
    def __init__(self, llm: SummaryLLM) -> None:
        self._llm = llm

    def compose(self, text: Any, style: str | SummaryStyle | None = None) -> SummaryResult:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Invalid or missing transcript text.")

        request = SummaryRequest.create(text, style)
        prompt = build_summary_prompt(request)
        raw = self._llm.generate_summary(
            system_prompt=prompt.system,
            user_prompt=prompt.user,
            max_tokens=prompt.max_tokens,
        )
        summary = (raw or "").strip()
        if not summary:
            raise GenerationError("language model returned an empty summary")

        logger.info(
            "Summary generated",
            extra={"style": request.style.value, "max_tokens": prompt.max_tokens, "chars": len(summary)},
        )
        return SummaryResult(
            text=summary,
            style_used=request.style,
            meta={
                "model": self._llm.model,
                "max_tokens": prompt.max_tokens,
                "prompt_hash": sha256_text(prompt.system + "\n" + prompt.user),
            },
        )


__all__ = [
    "PROMPT_OVERHEAD_TOKENS",
    "STYLE_TABLE",
    "StyleSpec",
    "SummaryComposer",
    "SummaryLLM",
    "SummaryPrompt",
    "build_summary_prompt",
    "generation_budget",
    "resolve_style",
]
