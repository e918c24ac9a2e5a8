import pytest

from wrife.grading import ActivityType, grade, normalize_sentence, validate_sentence


def test_validation_forgives_case_and_spacing():
	target = ["The", "library", "opens"]
	assert validate_sentence(["the", "LIBRARY", "opens"], target).correct
	assert validate_sentence(["the  library", "opens "], target).correct


def test_extra_or_missing_tokens_fail():
	target = ["The", "library", "opens"]
	assert not validate_sentence(["the", "library", "opens", "today"], target).correct
	assert not validate_sentence(["the", "library"], target).correct


def test_empty_sentence_is_never_correct():
	assert not validate_sentence([], ["Library", "opens"]).correct
	assert not validate_sentence(["  "], ["Library", "opens"]).correct


def test_trailing_comma_must_be_typed():
	target = ["Every", "weekday,", "the", "library", "opens"]
	assert not validate_sentence(["every", "weekday", "the", "library", "opens"], target).correct
	assert validate_sentence(["every", "weekday,", "the", "library", "opens"], target).correct
	assert normalize_sentence(["Weekday,"]) == "weekday,"


def test_validation_is_repeatable():
	built = ["Library", "opens"]
	first = validate_sentence(built, ["Library", "opens"])
	second = validate_sentence(built, ["Library", "opens"])
	assert first == second
	assert built == ["Library", "opens"]


def test_multiple_choice_uses_first_correct_answer():
	assert grade("multiple_choice", "dog", ["dog"])
	assert not grade(ActivityType.MULTIPLE_CHOICE, "Dog", ["dog"])
	assert not grade("multiple_choice", ["dog"], ["dog"])


def test_fill_blank_compares_each_blank():
	assert grade("fill_blank", [" Big", "RUNS "], ["big", "runs"])
	assert not grade("fill_blank", ["big"], ["big", "runs"])
	assert grade("fill_blank", "big", ["big"])


def test_fill_blank_any_needs_a_non_empty_answer():
	assert grade("fill_blank", ["cat", "chased", "mouse"], ["any", "any", "any"])
	assert not grade("fill_blank", ["cat", "", "mouse"], ["any", "any", "any"])
	assert not grade("fill_blank", [], ["any"])


def test_sorting_and_matching():
	key = {"dog": "Nouns", "runs": "Verbs"}
	assert grade("sorting", {"dog": "Nouns", "runs": "Verbs"}, key)
	assert not grade("sorting", {"dog": "Verbs", "runs": "Verbs"}, key)

	pairs = [{"left": "book", "right": "Noun"}, {"left": "quickly", "right": "Adverb"}]
	assert grade("matching", {"book": "Noun", "quickly": "Adverb"}, pairs)
	assert not grade("matching", {"book": "Noun"}, pairs)
	assert not grade("matching", {}, {})


def test_drag_drop_needs_exact_order():
	assert grade("drag_drop", ["The", "cat", "sat"], ["The", "cat", "sat"])
	assert not grade("drag_drop", ["cat", "The", "sat"], ["The", "cat", "sat"])
	assert not grade("drag_drop", "The cat sat", ["The", "cat", "sat"])


def test_unknown_activity_type_raises():
	with pytest.raises(ValueError):
		grade("crossword", "x", "x")
