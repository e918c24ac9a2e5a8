"""Sentence assembly from reused word-bank words and typed words."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence


class TokenOrigin(str, Enum):
	REUSED = "reused"
	TYPED = "typed"


class RemovalPolicy(str, Enum):
	# Session component: only typed words can be taken back out
	TYPED_ONLY = "typed_only"
	# Landing demo: re-clicking any token removes it and frees its word-bank slot
	ANY = "any"


@dataclass(frozen=True)
class Token:
	token_id: int
	origin: TokenOrigin
	text: str


class SentenceBuilder:
	"""Builds the learner's candidate sentence for one formula.

	``source_words`` is the word bank: the previous accepted sentence. Words
	may repeat there, so a reused word is tracked per occurrence rather than
	per spelling. Invalid actions are ignored and report ``None`` or ``[]``.
	"""

	def __init__(self, source_words: Sequence[str] = (), removal_policy: RemovalPolicy = RemovalPolicy.TYPED_ONLY) -> None:
		self._source_words: List[str] = list(source_words)
		self.removal_policy = removal_policy
		self._tokens: List[Token] = []
		self._next_id = 0

	@property
	def source_words(self) -> List[str]:
		return list(self._source_words)

	@property
	def tokens(self) -> List[Token]:
		return list(self._tokens)

	@property
	def words(self) -> List[str]:
		return [t.text for t in self._tokens]

	def __len__(self) -> int:
		return len(self._tokens)

	def is_used(self, source_index: int) -> bool:
		if not 0 <= source_index < len(self._source_words):
			return False
		word = self._source_words[source_index]
		occurrences_up_to_index = self._source_words[: source_index + 1].count(word)
		already_in_sentence = sum(1 for t in self._tokens if t.text == word)
		return already_in_sentence >= occurrences_up_to_index

	def used_indices(self) -> List[int]:
		return [i for i in range(len(self._source_words)) if self.is_used(i)]

	def add_reused(self, word: str, source_index: int) -> Optional[Token]:
		if not 0 <= source_index < len(self._source_words):
			return None
		if self._source_words[source_index] != word:
			return None
		if self.is_used(source_index):
			return None
		return self._append(TokenOrigin.REUSED, word)

	def add_typed(self, raw_text: str) -> List[Token]:
		pieces = (raw_text or "").split()
		return [self._append(TokenOrigin.TYPED, piece) for piece in pieces]

	def remove(self, position: int) -> Optional[Token]:
		if not 0 <= position < len(self._tokens):
			return None
		token = self._tokens[position]
		if self.removal_policy is RemovalPolicy.TYPED_ONLY and token.origin is not TokenOrigin.TYPED:
			return None
		del self._tokens[position]
		return token

	def clear(self) -> None:
		self._tokens.clear()

	def _append(self, origin: TokenOrigin, text: str) -> Token:
		token = Token(token_id=self._next_id, origin=origin, text=text)
		self._next_id += 1
		self._tokens.append(token)
		return token


__all__ = ["Token", "TokenOrigin", "RemovalPolicy", "SentenceBuilder"]
