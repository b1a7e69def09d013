from __future__ import annotations

import unittest

import httpx
import openai

from recap.adapters.openai_summary import OpenAISummaryLLM
from recap.config import load_config
from recap.contracts.errors import GenerationError, RemoteServiceError
from recap.pipeline.services import build_openai_client


class _Obj:
    def __init__(self, **kwargs) -> None:
        for key, value in kwargs.items():
            setattr(self, key, value)


class _FakeCompletionsAPI:
    def __init__(self, responses: list[object]) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, object]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        next_item = self._responses.pop(0)
        if isinstance(next_item, Exception):
            raise next_item
        return next_item


class _FakeChatAPI:
    def __init__(self, completions: _FakeCompletionsAPI) -> None:
        self.completions = completions


class _FakeClient:
    def __init__(self, responses: list[object]) -> None:
        self.chat = _FakeChatAPI(_FakeCompletionsAPI(responses))


_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content: object) -> _Obj:
    return _Obj(choices=[_Obj(message=_Obj(content=content))])


class OpenAISummaryAdapterTests(unittest.TestCase):
    def _generate(self, client: _FakeClient) -> str:
        llm = OpenAISummaryLLM(client, model="gpt-3.5-turbo", temperature=0.7)
        return llm.generate_summary(system_prompt="sys", user_prompt="user", max_tokens=80)

    def test_sends_system_and_user_messages_with_budget(self) -> None:
        client = _FakeClient([_completion(" Short summary. ")])

        text = self._generate(client)

        self.assertEqual(text, "Short summary.")
        call = client.chat.completions.calls[0]
        self.assertEqual(call["model"], "gpt-3.5-turbo")
        self.assertEqual(call["max_tokens"], 80)
        self.assertEqual(call["temperature"], 0.7)
        self.assertEqual(
            call["messages"],
            [{"role": "system", "content": "sys"}, {"role": "user", "content": "user"}],
        )

    def test_accepts_dict_responses_and_content_parts(self) -> None:
        client = _FakeClient([{"choices": [{"message": {"content": [{"text": "part one"}, {"text": "part two"}]}}]}])

        self.assertEqual(self._generate(client), "part one\npart two")

    def test_rate_limit_maps_to_category_message(self) -> None:
        error = openai.RateLimitError(
            "rate limited",
            response=httpx.Response(429, request=_REQUEST),
            body=None,
        )

        with self.assertRaises(RemoteServiceError) as ctx:
            self._generate(_FakeClient([error]))

        self.assertEqual(ctx.exception.status, 429)
        self.assertEqual(str(ctx.exception), "Rate limit exceeded for OpenAI.")

    def test_auth_failure_maps_to_category_message(self) -> None:
        error = openai.AuthenticationError(
            "bad key",
            response=httpx.Response(401, request=_REQUEST),
            body=None,
        )

        with self.assertRaises(RemoteServiceError) as ctx:
            self._generate(_FakeClient([error]))

        self.assertEqual(str(ctx.exception), "Authentication failed for OpenAI.")

    def test_connection_failure_is_unreachable_error(self) -> None:
        error = openai.APIConnectionError(request=_REQUEST)

        with self.assertRaises(RemoteServiceError) as ctx:
            self._generate(_FakeClient([error]))

        self.assertIsNone(ctx.exception.status)
        self.assertTrue(str(ctx.exception).startswith("Could not reach OpenAI"))

    def test_error_payload_is_generation_error(self) -> None:
        client = _FakeClient([{"error": {"message": "context length exceeded"}}])

        with self.assertRaises(GenerationError) as ctx:
            self._generate(client)

        self.assertEqual(str(ctx.exception), "context length exceeded")

    def test_built_client_sends_failed_request_once(self) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(429, json={"error": {"message": "rate limited"}})

        client = build_openai_client(load_config({"OPENAI_API_KEY": "sk-test"})).with_options(
            base_url="https://api.openai.com/v1",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with self.assertRaises(RemoteServiceError) as ctx:
            OpenAISummaryLLM(client, model="gpt-3.5-turbo").generate_summary(
                system_prompt="sys",
                user_prompt="user",
                max_tokens=80,
            )

        self.assertEqual(str(ctx.exception), "Rate limit exceeded for OpenAI.")
        self.assertEqual(paths, ["/v1/chat/completions"])

    def test_model_is_required(self) -> None:
        with self.assertRaises(ValueError):
            OpenAISummaryLLM(_FakeClient([]), model="")


if __name__ == "__main__":
    unittest.main()
