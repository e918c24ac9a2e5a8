"""Answer checking for formula sentences and practice activities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Sequence


@dataclass(frozen=True)
class ValidationResult:
	correct: bool


def normalize_sentence(tokens: Sequence[str]) -> str:
	# Case and spacing are forgiven; punctuation is not ("weekday," != "weekday")
	return " ".join(" ".join(tokens).split()).lower()


def validate_sentence(built: Sequence[str], target: Sequence[str]) -> ValidationResult:
	built_text = normalize_sentence(built)
	if not built_text:
		return ValidationResult(correct=False)
	return ValidationResult(correct=built_text == normalize_sentence(target))


class ActivityType(str, Enum):
	MULTIPLE_CHOICE = "multiple_choice"
	FILL_BLANK = "fill_blank"
	SORTING = "sorting"
	MATCHING = "matching"
	DRAG_DROP = "drag_drop"


ANY_ANSWER = "any"


def _first(correct: Any) -> Any:
	if isinstance(correct, (list, tuple)):
		return correct[0] if correct else None
	return correct


def grade_multiple_choice(answer: Any, correct: Any) -> bool:
	expected = _first(correct)
	return isinstance(answer, str) and expected is not None and answer == expected


def grade_fill_blank(answer: Any, correct: Any) -> bool:
	if isinstance(answer, str):
		answer = [answer]
	if isinstance(correct, str):
		correct = [correct]
	if not isinstance(answer, (list, tuple)) or not isinstance(correct, (list, tuple)):
		return False
	if not correct or len(answer) != len(correct):
		return False
	for given, expected in zip(answer, correct):
		given_text = str(given or "").strip().lower()
		expected_text = str(expected or "").strip().lower()
		if expected_text == ANY_ANSWER:
			if not given_text:
				return False
			continue
		if given_text != expected_text:
			return False
	return True


def grade_sorting(answer: Any, correct: Any) -> bool:
	if not isinstance(answer, Mapping) or not isinstance(correct, Mapping) or not correct:
		return False
	return all(answer.get(item) == category for item, category in correct.items())


def _pairs_to_mapping(pairs: Any) -> Dict[str, str]:
	if isinstance(pairs, Mapping):
		return dict(pairs)
	mapping: Dict[str, str] = {}
	for pair in pairs or []:
		if isinstance(pair, Mapping) and "left" in pair and "right" in pair:
			mapping[pair["left"]] = pair["right"]
	return mapping


def grade_matching(answer: Any, correct: Any) -> bool:
	if not isinstance(answer, Mapping):
		return False
	expected = _pairs_to_mapping(correct)
	if not expected:
		return False
	return all(answer.get(left) == right for left, right in expected.items())


def grade_drag_drop(answer: Any, correct: Any) -> bool:
	if not isinstance(answer, (list, tuple)) or not isinstance(correct, (list, tuple)):
		return False
	return bool(correct) and list(answer) == list(correct)


GRADERS: Dict[ActivityType, Callable[[Any, Any], bool]] = {
	ActivityType.MULTIPLE_CHOICE: grade_multiple_choice,
	ActivityType.FILL_BLANK: grade_fill_blank,
	ActivityType.SORTING: grade_sorting,
	ActivityType.MATCHING: grade_matching,
	ActivityType.DRAG_DROP: grade_drag_drop,
}


def grade(activity_type: ActivityType | str, user_answer: Any, correct_answer: Any) -> bool:
	"""Grade one practice answer; unknown activity types raise ``ValueError``."""
	kind = ActivityType(activity_type)
	return GRADERS[kind](user_answer, correct_answer)


__all__: List[str] = [
	"ActivityType",
	"ValidationResult",
	"grade",
	"normalize_sentence",
	"validate_sentence",
]
