from __future__ import annotations

import unittest

from recap.components.summary import (
    FINISH_SENTENCES_DIRECTIVE,
    PROMPT_OVERHEAD_TOKENS,
    STYLE_TABLE,
    SummaryComposer,
    build_summary_prompt,
    generation_budget,
)
from recap.contracts.artifacts import SummaryRequest, SummaryStyle
from recap.contracts.errors import GenerationError, ValidationError


class _FakeSummaryLLM:
    def __init__(self, reply: str = "  A tidy summary.  ") -> None:
        self.reply = reply
        self.calls: list[dict[str, object]] = []

    @property
    def model(self) -> str:
        return "fake-model"

    def generate_summary(self, *, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "max_tokens": max_tokens})
        return self.reply


class SummaryComposerTests(unittest.TestCase):
    def test_budget_is_cap_minus_overhead(self) -> None:
        self.assertEqual(PROMPT_OVERHEAD_TOKENS, 20)
        self.assertEqual(generation_budget("short"), 80)
        self.assertEqual(generation_budget("medium"), 280)
        self.assertEqual(generation_budget("detailed"), 480)
        self.assertEqual(generation_budget("unknown"), 280)
        self.assertEqual(generation_budget(None), 280)

    def test_short_style_prompt(self) -> None:
        llm = _FakeSummaryLLM("Two sentences. Exactly two.")
        result = SummaryComposer(llm).compose("Lecture on photosynthesis.", "short")

        call = llm.calls[0]
        self.assertEqual(call["max_tokens"], 80)
        self.assertIn("exactly two complete sentences", str(call["system"]))
        self.assertIn("Use exactly two complete sentences.", str(call["system"]))
        self.assertIn(FINISH_SENTENCES_DIRECTIVE, str(call["system"]))
        self.assertIn("Lecture on photosynthesis.", str(call["user"]))
        self.assertIs(result.style_used, SummaryStyle.SHORT)

    def test_unknown_style_falls_back_to_medium(self) -> None:
        llm = _FakeSummaryLLM()
        result = SummaryComposer(llm).compose("Some transcript.", "novel-length")

        self.assertIs(result.style_used, SummaryStyle.MEDIUM)
        self.assertEqual(llm.calls[0]["max_tokens"], 280)
        self.assertIn("2-3 sentences", str(llm.calls[0]["system"]))

    def test_result_is_trimmed_and_carries_meta(self) -> None:
        result = SummaryComposer(_FakeSummaryLLM("\n  Key points here.\n")).compose("Transcript text.", "detailed")

        self.assertEqual(result.text, "Key points here.")
        assert result.meta is not None
        self.assertEqual(result.meta["model"], "fake-model")
        self.assertEqual(result.meta["max_tokens"], 480)
        self.assertEqual(len(str(result.meta["prompt_hash"])), 64)

    def test_blank_text_is_rejected_without_calling_llm(self) -> None:
        llm = _FakeSummaryLLM()
        for text in ("", "   \n", None, 123):
            with self.assertRaises(ValidationError):
                SummaryComposer(llm).compose(text)
        self.assertEqual(llm.calls, [])

    def test_empty_reply_is_generation_error(self) -> None:
        with self.assertRaises(GenerationError):
            SummaryComposer(_FakeSummaryLLM("   ")).compose("Transcript text.")

    def test_prompt_layout(self) -> None:
        prompt = build_summary_prompt(SummaryRequest(source_text="Body text.", style=SummaryStyle.DETAILED))

        self.assertTrue(prompt.system.startswith("You are a friendly academic assistant."))
        self.assertIn("3-5 sentences", prompt.system)
        self.assertEqual(
            prompt.user,
            "Here is the transcript of an audio recording:\n\nBody text.\n\nPlease summarize its key points.",
        )
        self.assertEqual(prompt.max_tokens, STYLE_TABLE[SummaryStyle.DETAILED].max_tokens)


if __name__ == "__main__":
    unittest.main()
