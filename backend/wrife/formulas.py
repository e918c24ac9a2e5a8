from __future__ import annotations

from typing import List, Sequence

from pydantic import BaseModel, Field


class NewElement(BaseModel):
	label: str
	examples: List[str] = Field(default_factory=list)
	placeholder: str = ""


class LabelledPart(BaseModel):
	text: str
	label: str


class Formula(BaseModel):
	formula_number: int = Field(ge=1)
	structure_parts: List[str]
	previous_words: List[str] = Field(default_factory=list)
	new_element: NewElement
	target_sentence: List[str]
	hint_text: str = ""
	evolution_instruction: str = ""
	concepts_used: List[str] = Field(default_factory=list)
	labelled_parts: List[LabelledPart] = Field(default_factory=list)

	@property
	def structure(self) -> str:
		return " + ".join(self.structure_parts)


class FormulaChainError(ValueError):
	pass


def _norm(word: str) -> str:
	return word.strip().lower()


def is_ordered_extension(previous: Sequence[str], target: Sequence[str]) -> bool:
	# Every previous word must reappear in target, in the same order
	remaining = iter(_norm(w) for w in target)
	return all(any(candidate == _norm(word) for candidate in remaining) for word in previous)


def validate_formula_chain(formulas: Sequence[Formula]) -> None:
	if not formulas:
		raise FormulaChainError("a session needs at least one formula")
	for index, formula in enumerate(formulas):
		if formula.formula_number != index + 1:
			raise FormulaChainError(
				f"formula numbers must run 1..{len(formulas)}; got {formula.formula_number} at position {index}"
			)
		if not formula.target_sentence:
			raise FormulaChainError(f"formula {formula.formula_number} has an empty target sentence")
		if index == 0:
			if formula.previous_words:
				raise FormulaChainError("the first formula cannot carry previous words")
			continue
		prior = formulas[index - 1]
		if list(formula.previous_words) != list(prior.target_sentence):
			raise FormulaChainError(
				f"formula {formula.formula_number} does not start from formula {prior.formula_number}'s sentence"
			)
		if not is_ordered_extension(formula.previous_words, formula.target_sentence):
			raise FormulaChainError(
				f"formula {formula.formula_number} drops or reorders words from formula {prior.formula_number}"
			)


_DEMO_STEPS = [
	(["Subject", "Verb"], NewElement(label="verb", examples=["opens", "sits", "welcomes"], placeholder="What does the library do?"), None, "Library opens", "Think: what does a library DO?"),
	(["Subject", "Adverb", "Verb"], NewElement(label="adverb", examples=["quietly", "slowly", "gently"], placeholder="How does it open?"), "adverb", "Library quietly opens", "Adverbs describe HOW the action happens."),
	(["Subject", "Adverb", "Verb", "Prepositional phrase"], NewElement(label="prepositional phrase", examples=["in the morning", "near the park"], placeholder="When or where?"), "prepositional_phrase", "Library quietly opens in the morning", "Prepositional phrases tell WHERE or WHEN."),
	(["Determiner", "Subject", "Adverb", "Verb", "Prepositional phrase"], NewElement(label="determiner", examples=["The", "A", "Our"], placeholder="Which library?"), "determiner", "The library quietly opens in the morning", "Determiners: the, a, my, our."),
	(["Determiner", "Adjective", "Subject", "Adverb", "Verb", "Prepositional phrase"], NewElement(label="adjective", examples=["peaceful", "old", "busy"], placeholder="Describe the library"), "adjective", "The peaceful library quietly opens in the morning", "Adjectives describe the noun."),
	(["Time phrase", "Determiner", "Adjective", "Subject", "Adverb", "Verb", "Prepositional phrase"], NewElement(label="time phrase", examples=["Every weekday,", "Each day,"], placeholder="How often?"), "time_phrase", "Every weekday, the peaceful library quietly opens in the morning", "Time phrases: Every morning, Each day, On weekdays."),
]


def demo_formulas() -> List[Formula]:
	"""The six-step "Library" chain used by the landing-page demo."""
	formulas: List[Formula] = []
	previous: List[str] = []
	current: List[str] = []
	for number, (parts, element, added, sentence, hint) in enumerate(_DEMO_STEPS, start=1):
		target = sentence.split()
		if added:
			current = current + [added]
		formulas.append(
			Formula(
				formula_number=number,
				structure_parts=parts,
				previous_words=list(previous),
				new_element=element,
				target_sentence=target,
				hint_text=hint,
				evolution_instruction=(
					"Write your sentence using the subject and a verb."
					if number == 1
					else f"REWRITE your Formula {number - 1} sentence, adding {element.label.upper()}."
				),
				concepts_used=["noun", "verb", *current],
			)
		)
		previous = target
	return formulas


__all__ = [
	"Formula",
	"FormulaChainError",
	"LabelledPart",
	"NewElement",
	"demo_formulas",
	"is_ordered_extension",
	"validate_formula_chain",
]
