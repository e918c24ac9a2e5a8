"""Step sequencing and aggregation for one Progressive Writing Practice run."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .formulas import Formula, validate_formula_chain
from .grading import validate_sentence
from .settings import settings
from .tokens import RemovalPolicy, SentenceBuilder, Token


logger = logging.getLogger(__name__)


STOPWORDS = frozenset({"a", "an", "the", "in"})


class Phase(str, Enum):
	PRESENTING = "presenting"
	VALIDATING = "validating"
	SUCCESS = "success"
	COMPLETE = "complete"


@dataclass(frozen=True)
class CheckResult:
	ignored: bool
	correct: bool = False
	attempts: int = 0
	hint_eligible: bool = False


@dataclass(frozen=True)
class SessionStats:
	formulas_completed: int
	total_formulas: int
	accuracy: int
	total_attempts: int
	duration_seconds: int
	top_words: List[Tuple[str, int]] = field(default_factory=list)
	word_write_counts: Dict[str, int] = field(default_factory=dict)


class PWPSession:
	"""A learner's walk through an ordered chain of formulas.

	Phases move presenting -> validating -> success -> presenting (next step)
	until the last step is accepted, which ends in ``complete``. Learner
	actions that do not fit the current phase are ignored.
	"""

	def __init__(
		self,
		formulas: Sequence[Formula],
		*,
		removal_policy: RemovalPolicy = RemovalPolicy.TYPED_ONLY,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		validate_formula_chain(formulas)
		self.formulas: List[Formula] = list(formulas)
		self.removal_policy = removal_policy
		self._clock = clock
		self._started_at = clock()
		self._finished_at: Optional[float] = None
		self.current_step_index = 0
		self.phase = Phase.PRESENTING
		self.attempts = 0
		self.total_attempts = 0
		self.accepted_sentences: List[List[str]] = []
		self._word_write_counts: Dict[str, int] = {}
		self.builder = SentenceBuilder(self.current_formula.previous_words, removal_policy)

	@property
	def current_formula(self) -> Formula:
		return self.formulas[self.current_step_index]

	@property
	def total_formulas(self) -> int:
		return len(self.formulas)

	@property
	def formulas_completed(self) -> int:
		return len(self.accepted_sentences)

	@property
	def word_write_counts(self) -> Mapping[str, int]:
		return MappingProxyType(self._word_write_counts)

	@property
	def hint_eligible(self) -> bool:
		return self.phase is Phase.PRESENTING and self.attempts > 0

	@property
	def is_complete(self) -> bool:
		return self.phase is Phase.COMPLETE

	# Token operations only apply while the step is being presented

	def add_reused(self, word: str, source_index: int) -> Optional[Token]:
		if self.phase is not Phase.PRESENTING:
			return None
		return self.builder.add_reused(word, source_index)

	def add_typed(self, raw_text: str) -> List[Token]:
		if self.phase is not Phase.PRESENTING:
			return []
		return self.builder.add_typed(raw_text)

	def remove(self, position: int) -> Optional[Token]:
		if self.phase is not Phase.PRESENTING:
			return None
		return self.builder.remove(position)

	def clear(self) -> bool:
		if self.phase is not Phase.PRESENTING:
			return False
		self.builder.clear()
		return True

	def check(self) -> CheckResult:
		if self.phase is not Phase.PRESENTING or not len(self.builder):
			return CheckResult(ignored=True, attempts=self.attempts, hint_eligible=self.hint_eligible)

		self.phase = Phase.VALIDATING
		formula = self.current_formula
		result = validate_sentence(self.builder.words, formula.target_sentence)
		if result.correct:
			self.phase = Phase.SUCCESS
			self.accepted_sentences.append(list(formula.target_sentence))
			for word in formula.target_sentence:
				key = word.strip().lower()
				if key:
					self._word_write_counts[key] = self._word_write_counts.get(key, 0) + 1
			logger.debug("Formula %d accepted after %d failed attempts", formula.formula_number, self.attempts)
		else:
			self.phase = Phase.PRESENTING
			self.attempts += 1
			self.total_attempts += 1
		return CheckResult(
			ignored=False,
			correct=result.correct,
			attempts=self.attempts,
			hint_eligible=self.hint_eligible,
		)

	def advance(self) -> bool:
		if self.phase is not Phase.SUCCESS:
			return False
		if self.current_step_index == len(self.formulas) - 1:
			self.phase = Phase.COMPLETE
			self._finished_at = self._clock()
			return True
		accepted = self.accepted_sentences[-1]
		self.current_step_index += 1
		self.attempts = 0
		self.builder = SentenceBuilder(accepted, self.removal_policy)
		self.phase = Phase.PRESENTING
		return True

	def top_words(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
		if limit is None:
			limit = settings.top_repeated_words
		repeated = [
			(word, count)
			for word, count in self._word_write_counts.items()
			if count >= 2 and word not in STOPWORDS
		]
		repeated.sort(key=lambda item: (-item[1], item[0]))
		return repeated[:limit]

	def stats(self) -> SessionStats:
		end = self._finished_at if self._finished_at is not None else self._clock()
		total = len(self.formulas)
		return SessionStats(
			formulas_completed=self.formulas_completed,
			total_formulas=total,
			accuracy=round(self.formulas_completed / total * 100) if total else 0,
			total_attempts=self.total_attempts,
			duration_seconds=int(end - self._started_at),
			top_words=self.top_words(),
			word_write_counts=dict(self._word_write_counts),
		)


__all__ = ["CheckResult", "PWPSession", "Phase", "STOPWORDS", "SessionStats"]
