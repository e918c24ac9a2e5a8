from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .gemini_client import GeminiClient
from .settings import settings


logger = logging.getLogger(__name__)


FALLBACK_HINTS: Dict[str, str] = {
	"multiple_choice": "Read each option carefully. Think about what type of word the question is asking for.",
	"fill_blank": "Think about what type of word fits in the gap. Is it a doing word, a naming word, or a describing word?",
	"sorting": "Read each word and ask: Is this a person/place/thing (noun), a doing word (verb), or a describing word (adjective)?",
	"matching": "Look at each word on the left. Say the word in a sentence to help you decide what type of word it is.",
	"drag_drop": "Try putting the words in order. Does the sentence make sense when you read it out loud?",
	"formula": "Use every word from your last sentence, then add the new part in the right place.",
}
GENERIC_HINT = "Think carefully about each word. What job does it do in the sentence?"


class HintRequest(BaseModel):
	question: str
	activity_type: str = "multiple_choice"
	options: Optional[List[Any]] = None
	year_group: int = Field(default=4, ge=1, le=6)
	fallback: Optional[str] = None


class Hint(BaseModel):
	text: str
	source: Literal["ai", "fallback"]


def fallback_hint(request: HintRequest) -> Hint:
	text = (request.fallback or "").strip() or FALLBACK_HINTS.get(request.activity_type) or GENERIC_HINT
	return Hint(text=text, source="fallback")


def build_hint_prompt(request: HintRequest) -> str:
	age = "6-7" if request.year_group <= 3 else "8-10"
	options_line = f"Options: {json.dumps(request.options)}\n" if request.options else ""
	return (
		f"A Year {request.year_group} pupil (age {age}) is stuck on this activity:\n\n"
		f"Question: {request.question}\n"
		f"Type: {request.activity_type}\n"
		f"{options_line}\n"
		"Provide a helpful hint (NOT the answer) that:\n"
		"1. Guides their thinking\n"
		"2. Uses simple, child-friendly language\n"
		"3. Is encouraging\n"
		"4. Is 1-2 sentences only\n\n"
		'Return ONLY JSON: {"hint": "your hint here"}'
	)


def _extract_hint(raw: str) -> str:
	match = re.search(r"\{[\s\S]*\}", raw or "")
	if not match:
		raise ValueError("No JSON object in hint response")
	data = json.loads(match.group(0))
	hint = data.get("hint") if isinstance(data, dict) else None
	if not isinstance(hint, str) or not hint.strip():
		raise ValueError("Hint response has no 'hint' text")
	return hint.strip()


class HintService:
	def __init__(self, client_factory: Optional[Callable[[], GeminiClient]] = None) -> None:
		self._client_factory = client_factory or (lambda: GeminiClient(model=settings.hint_model))

	async def get_hint(self, request: HintRequest) -> Hint:
		try:
			async with self._client_factory() as client:
				raw = await client.generate(build_hint_prompt(request), max_output_tokens=settings.hint_max_tokens)
			return Hint(text=_extract_hint(raw), source="ai")
		except Exception as err:
			logger.warning("AI hint unavailable for %s activity, using fallback: %s", request.activity_type, err)
			return fallback_hint(request)


def get_hint_service() -> HintService:
	return HintService()


__all__ = ["FALLBACK_HINTS", "Hint", "HintRequest", "HintService", "fallback_hint", "get_hint_service"]
