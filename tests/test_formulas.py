import pytest

from wrife.formulas import (
	Formula,
	FormulaChainError,
	NewElement,
	demo_formulas,
	is_ordered_extension,
	validate_formula_chain,
)


def _formula(number, previous, target):
	return Formula(
		formula_number=number,
		structure_parts=["Subject", "Verb"],
		previous_words=previous,
		new_element=NewElement(label="verb"),
		target_sentence=target,
	)


def test_demo_chain_is_valid():
	formulas = demo_formulas()
	validate_formula_chain(formulas)
	assert len(formulas) == 6
	assert formulas[0].target_sentence == ["Library", "opens"]
	assert " ".join(formulas[-1].target_sentence) == "Every weekday, the peaceful library quietly opens in the morning"
	for prior, current in zip(formulas, formulas[1:]):
		assert current.previous_words == prior.target_sentence


def test_demo_concepts_are_catalogue_keys():
	formulas = demo_formulas()
	assert formulas[0].concepts_used == ["noun", "verb"]
	assert formulas[2].concepts_used == ["noun", "verb", "adverb", "prepositional_phrase"]
	assert formulas[-1].concepts_used[-1] == "time_phrase"


def test_structure_joins_parts():
	assert demo_formulas()[1].structure == "Subject + Adverb + Verb"


def test_ordered_extension_ignores_case():
	assert is_ordered_extension(["Library", "opens"], ["The", "library", "quietly", "opens"])
	assert not is_ordered_extension(["Library", "opens"], ["opens", "the", "library"])
	assert not is_ordered_extension(["Library", "opens"], ["Library", "closes"])


def test_empty_chain_is_rejected():
	with pytest.raises(FormulaChainError):
		validate_formula_chain([])


def test_numbers_must_run_from_one():
	with pytest.raises(FormulaChainError):
		validate_formula_chain([_formula(2, [], ["Dog", "runs"])])


def test_first_formula_has_no_previous_words():
	with pytest.raises(FormulaChainError):
		validate_formula_chain([_formula(1, ["Dog"], ["Dog", "runs"])])


def test_previous_words_must_match_prior_target():
	chain = [_formula(1, [], ["Dog", "runs"]), _formula(2, ["Dog", "walks"], ["Dog", "quickly", "walks"])]
	with pytest.raises(FormulaChainError):
		validate_formula_chain(chain)


def test_target_may_not_drop_previous_words():
	chain = [_formula(1, [], ["Dog", "runs"]), _formula(2, ["Dog", "runs"], ["Dog", "quickly"])]
	with pytest.raises(FormulaChainError) as err:
		validate_formula_chain(chain)
	assert isinstance(err.value, ValueError)
