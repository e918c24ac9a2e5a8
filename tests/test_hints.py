import asyncio

import httpx
import pytest

from wrife.gemini_client import GeminiClient, LLMNotConfigured
from wrife.hints import GENERIC_HINT, FALLBACK_HINTS, HintRequest, HintService, build_hint_prompt


class FakeClient:
	def __init__(self, reply=None, error=None):
		self.reply = reply
		self.error = error
		self.prompts = []
		self.closed = False

	async def __aenter__(self):
		return self

	async def __aexit__(self, *exc_info):
		self.closed = True

	async def generate(self, prompt, *, max_output_tokens=None):
		self.prompts.append(prompt)
		if self.error is not None:
			raise self.error
		return self.reply


def _service(client):
	return HintService(client_factory=lambda: client)


def test_ai_hint_is_extracted_from_json():
	client = FakeClient(reply='Sure! {"hint": "Which word tells you HOW it moves?"}')
	hint = asyncio.run(_service(client).get_hint(HintRequest(question="Add an adverb", activity_type="formula")))
	assert hint.source == "ai"
	assert hint.text == "Which word tells you HOW it moves?"
	assert client.closed


def test_llm_failure_uses_static_hint():
	client = FakeClient(error=httpx.ConnectError("offline"))
	req = HintRequest(question="Add an adverb", activity_type="formula", fallback="Adverbs describe HOW.")
	hint = asyncio.run(_service(client).get_hint(req))
	assert hint.source == "fallback"
	assert hint.text == "Adverbs describe HOW."


def test_unparsable_reply_uses_activity_default():
	client = FakeClient(reply="no json here")
	hint = asyncio.run(_service(client).get_hint(HintRequest(question="Sort these", activity_type="sorting")))
	assert hint.text == FALLBACK_HINTS["sorting"]


def test_unknown_type_gets_generic_hint():
	client = FakeClient(reply='{"hint": ""}')
	hint = asyncio.run(_service(client).get_hint(HintRequest(question="?", activity_type="crossword")))
	assert hint.text == GENERIC_HINT


def test_missing_api_key_falls_back(monkeypatch):
	monkeypatch.setattr("wrife.gemini_client.settings.gemini_api_key", None)
	hint = asyncio.run(HintService().get_hint(HintRequest(question="Pick the noun", activity_type="multiple_choice")))
	assert hint.source == "fallback"
	assert hint.text == FALLBACK_HINTS["multiple_choice"]


def test_prompt_is_pitched_at_the_year_group():
	prompt = build_hint_prompt(HintRequest(question="Pick the verb", year_group=2, options=["dog", "runs"]))
	assert "Year 2 pupil (age 6-7)" in prompt
	assert '["dog", "runs"]' in prompt
	assert '{"hint"' in prompt


def test_client_requires_api_key(monkeypatch):
	monkeypatch.setattr("wrife.gemini_client.settings.gemini_api_key", None)
	with pytest.raises(LLMNotConfigured):
		GeminiClient()


def test_client_reads_gemini_text():
	def handler(request: httpx.Request) -> httpx.Response:
		assert request.url.params["key"] == "test-key"
		return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "hello"}]}}]})

	async def run():
		async with GeminiClient("test-key", transport=httpx.MockTransport(handler)) as client:
			return await client.generate("hi", max_output_tokens=16)

	assert asyncio.run(run()) == "hello"


def test_client_raises_without_fallback(monkeypatch):
	monkeypatch.setattr("wrife.gemini_client.settings.openrouter_api_key", None)

	def handler(request: httpx.Request) -> httpx.Response:
		return httpx.Response(503, json={"error": "busy"})

	async def run():
		async with GeminiClient("test-key", transport=httpx.MockTransport(handler)) as client:
			await client.generate("hi")

	with pytest.raises(httpx.HTTPStatusError):
		asyncio.run(run())


def test_client_falls_back_to_openrouter(monkeypatch):
	monkeypatch.setattr("wrife.gemini_client.settings.openrouter_api_key", "router-key")

	def handler(request: httpx.Request) -> httpx.Response:
		if "openrouter" in request.url.host:
			assert request.headers["Authorization"] == "Bearer router-key"
			return httpx.Response(200, json={"choices": [{"message": {"content": "from router"}}]})
		return httpx.Response(500)

	async def run():
		async with GeminiClient("test-key", transport=httpx.MockTransport(handler)) as client:
			return await client.generate("hi")

	assert asyncio.run(run()) == "from router"
