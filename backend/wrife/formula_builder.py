"""Adaptive formula generation for a lesson and a learner's concept mastery.

Each generated formula adds one grammar concept (or a determiner and an
adjective together) to the previous sentence, so the result is always a
valid evolution chain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .formulas import Formula, LabelledPart, NewElement, validate_formula_chain


logger = logging.getLogger(__name__)


VERBS_FOR_PLACES = ["opens", "sits", "stands", "welcomes", "holds", "contains", "waits"]
VERBS_FOR_PEOPLE = ["walks", "runs", "dances", "sings", "reads", "writes", "plays"]
VERBS_FOR_ANIMALS = ["runs", "jumps", "sleeps", "barks", "flies", "swims", "plays"]
VERBS_FOR_THINGS = ["sits", "stands", "waits", "shines", "moves", "falls", "floats"]

PLACE_WORDS = [
	"library", "school", "park", "museum", "shop", "beach", "house", "building", "street",
	"hospital", "classroom", "kitchen", "bedroom", "hall", "office", "forest", "playground",
]
ANIMAL_WORDS = ["dog", "cat", "bird", "fish", "rabbit", "horse", "mouse", "elephant", "lion", "tiger"]

ADVERBS = ["quietly", "slowly", "quickly", "gently", "happily", "carefully", "softly"]
ADJECTIVES = ["old", "quiet", "busy", "peaceful", "small", "large", "bright", "tired"]
DETERMINERS = ["The", "A", "An", "My", "Our", "This", "That"]
PREP_PHRASES = [
	"in the morning", "at nine o'clock", "on weekdays", "after lunch",
	"in the town", "near the park", "by the river", "on the hill",
]
TIME_PHRASES = ["Every morning,", "Each day,", "On weekdays,", "In winter,", "During summer,"]
FRONTED_ADVERBIALS = ["Suddenly,", "Slowly,", "Carefully,", "Happily,", "Gently,"]


@dataclass(frozen=True)
class ConceptDefinition:
	concept: str
	position: str
	examples: Sequence[str]
	hint: str
	requires: Tuple[str, ...] = ()


CONCEPT_DEFINITIONS: Dict[str, ConceptDefinition] = {
	"adverb": ConceptDefinition("adverb", "between_subject_verb", ADVERBS, "Adverbs describe HOW the action happens."),
	"prepositional_phrase": ConceptDefinition(
		"prepositional_phrase", "after_verb", PREP_PHRASES, "Prepositional phrases tell WHERE or WHEN.", ("adverb",)
	),
	"determiner": ConceptDefinition(
		"determiner", "before_subject", DETERMINERS, "Determiners: the, a, my, our.", ("prepositional_phrase",)
	),
	"adjective": ConceptDefinition("adjective", "before_subject", ADJECTIVES, "Adjectives describe the noun.", ("determiner",)),
	"time_phrase": ConceptDefinition(
		"time_phrase",
		"sentence_start",
		TIME_PHRASES,
		"Time phrases: Every morning, Each day, On weekdays.",
		("adjective", "prepositional_phrase"),
	),
	"fronted_adverbial": ConceptDefinition(
		"fronted_adverbial",
		"sentence_start",
		FRONTED_ADVERBIALS,
		"Fronted adverbials: Quietly, Slowly, Carefully (with comma).",
		("time_phrase",),
	),
}

PROGRESSION_ORDER: List[str] = [
	"adverb",
	"prepositional_phrase",
	"determiner",
	"adjective",
	"time_phrase",
	"fronted_adverbial",
]

CURRICULUM_TO_PWP_CONCEPTS: Dict[str, List[str]] = {
	"adverb": ["adverb"],
	"adjective": ["adjective"],
	"determiner": ["determiner"],
	"phrases": ["prepositional_phrase"],
	"phrase_types": ["prepositional_phrase"],
	"clauses": ["fronted_adverbial", "time_phrase"],
	"clause_types": ["fronted_adverbial", "time_phrase"],
	"sentence_structure": ["time_phrase", "fronted_adverbial"],
	"fronted_adverbial": ["fronted_adverbial"],
	"prepositional_phrase": ["prepositional_phrase"],
	"time_phrase": ["time_phrase"],
}

_IGNORED_CURRICULUM_CONCEPTS = {"noun", "verb", "review"}

# (min, max) formula counts per curriculum stage
STAGE_FORMULA_COUNTS: Dict[str, Tuple[int, int]] = {
	"foundation": (3, 4),
	"development": (5, 7),
	"application": (8, 10),
	"advanced": (10, 12),
}

MASTERED = "MASTERED"
PRACTICING = "PRACTICING"
NEW = "NEW"


@dataclass
class MasteryLevel:
	concept: str
	mastery_status: str = NEW
	score: float = 50.0


@dataclass
class MasterySummary:
	mastered: List[str] = field(default_factory=list)
	practicing: List[str] = field(default_factory=list)
	new: List[str] = field(default_factory=list)


def map_curriculum_concepts(curriculum_concepts: Iterable[str]) -> List[str]:
	mapped: List[str] = []
	for concept in curriculum_concepts:
		if concept in _IGNORED_CURRICULUM_CONCEPTS:
			continue
		targets = CURRICULUM_TO_PWP_CONCEPTS.get(concept)
		if targets is None:
			targets = [concept] if concept in PROGRESSION_ORDER else []
		for target in targets:
			if target not in mapped:
				mapped.append(target)
	return mapped


def verbs_for_subject(subject: str) -> List[str]:
	lowered = subject.lower()
	if any(place in lowered for place in PLACE_WORDS):
		return VERBS_FOR_PLACES
	if any(animal in lowered for animal in ANIMAL_WORDS):
		return VERBS_FOR_ANIMALS
	# A capitalised subject that is not a place reads as a name
	if subject[:1].isupper():
		return VERBS_FOR_PEOPLE
	return VERBS_FOR_THINGS


def categorize_by_mastery(levels: Iterable[MasteryLevel]) -> MasterySummary:
	summary = MasterySummary()
	for level in levels:
		if level.mastery_status == MASTERED or level.score >= 85:
			summary.mastered.append(level.concept)
		elif level.mastery_status == PRACTICING or level.score >= 65:
			summary.practicing.append(level.concept)
		else:
			summary.new.append(level.concept)
	return summary


def formula_count_for_stage(stage: str, min_formulas: int, max_formulas: int) -> int:
	low, high = STAGE_FORMULA_COUNTS.get(stage, STAGE_FORMULA_COUNTS["foundation"])
	return min(max(min_formulas, low), min(max_formulas, high))


def select_next_concept(
	current: Sequence[str],
	available: Sequence[str],
	mastery: MasterySummary,
	formula_number: int,
	total_formulas: int,
) -> Optional[str]:
	unused = [c for c in PROGRESSION_ORDER if c in available and c not in current]
	if not unused:
		return None

	ratio = formula_number / total_formulas
	if ratio <= 0.5:
		pool = [c for c in unused if c in mastery.mastered or c in mastery.practicing]
	elif ratio <= 0.8:
		known = set(mastery.mastered) | set(mastery.practicing) | set(mastery.new)
		pool = [c for c in unused if c in known]
	else:
		pool = list(unused)
	if not pool:
		pool = list(unused)

	for concept in PROGRESSION_ORDER:
		if concept not in pool:
			continue
		if all(req in current for req in CONCEPT_DEFINITIONS[concept].requires):
			return concept
	return pool[0]


def _structure_parts(concepts: Sequence[str]) -> List[str]:
	parts: List[str] = []
	if "fronted_adverbial" in concepts:
		parts.append("Fronted adverbial")
	if "time_phrase" in concepts:
		parts.append("Time phrase")
	if "determiner" in concepts:
		parts.append("Determiner")
	if "adjective" in concepts:
		parts.append("Adjective")
	parts.append("Subject")
	if "adverb" in concepts:
		parts.append("Adverb")
	parts.append("Verb")
	if "prepositional_phrase" in concepts:
		parts.append("Prepositional phrase")
	return parts


def build_example(subject: str, verb: str, concepts: Sequence[str]) -> List[LabelledPart]:
	"""Example sentence for ``concepts``, split into labelled parts.

	Parts are only ever added around earlier ones, so the sentence for a
	larger concept set is an ordered extension of the smaller one.
	"""
	parts: List[LabelledPart] = []
	if "fronted_adverbial" in concepts:
		parts.append(LabelledPart(text="Suddenly,", label="fronted adverbial"))
	if "time_phrase" in concepts:
		parts.append(LabelledPart(text="Every weekday,", label="time phrase"))
	has_determiner = "determiner" in concepts
	if has_determiner:
		parts.append(LabelledPart(text="The", label="determiner"))
	if "adjective" in concepts:
		parts.append(LabelledPart(text="peaceful", label="adjective"))
	parts.append(LabelledPart(text=subject.lower() if has_determiner else subject, label="subject"))
	if "adverb" in concepts:
		parts.append(LabelledPart(text="quietly", label="adverb"))
	parts.append(LabelledPart(text=verb, label="verb"))
	if "prepositional_phrase" in concepts:
		parts.append(LabelledPart(text="in the morning", label="prepositional phrase"))

	# Only the opening word keeps a capital; later parts are lowered
	normalised: List[LabelledPart] = []
	for index, part in enumerate(parts):
		text = part.text
		if index == 0:
			text = text[:1].upper() + text[1:]
		elif part.label != "subject":
			text = text[:1].lower() + text[1:]
		normalised.append(LabelledPart(text=text, label=part.label))
	return normalised


def _words(parts: Sequence[LabelledPart]) -> List[str]:
	return [word for part in parts for word in part.text.split()]


def generate_formulas(
	subject: str,
	stage: str,
	min_formulas: int,
	max_formulas: int,
	available_concepts: Sequence[str],
	mastery: MasterySummary,
) -> List[Formula]:
	subject = " ".join(subject.split())
	if not subject:
		raise ValueError("subject must not be empty")
	verbs = verbs_for_subject(subject)
	verb = verbs[0]
	total = formula_count_for_stage(stage, min_formulas, max_formulas)

	first_parts = build_example(subject, verb, [])
	formulas: List[Formula] = [
		Formula(
			formula_number=1,
			structure_parts=_structure_parts([]),
			previous_words=[],
			new_element=NewElement(label="verb", examples=verbs[:6], placeholder=f"What does the {subject.lower()} do?"),
			target_sentence=_words(first_parts),
			hint_text=f"Think: What does a {subject.lower()} DO?",
			evolution_instruction="Write your complete sentence using your subject and a verb.",
			concepts_used=["noun", "verb"],
			labelled_parts=first_parts,
		)
	]

	current: List[str] = []
	for number in range(2, total + 1):
		next_concept = select_next_concept(current, available_concepts, mastery, number, total)
		if next_concept is None:
			break
		added = [next_concept]
		if next_concept == "adjective" and "determiner" not in current and "determiner" in available_concepts:
			added = ["determiner", "adjective"]
		current = current + added

		definition = CONCEPT_DEFINITIONS[added[-1]]
		label = " + ".join(added) if len(added) > 1 else added[0].replace("_", " ")
		parts = build_example(subject, verb, current)
		formulas.append(
			Formula(
				formula_number=number,
				structure_parts=_structure_parts(current),
				previous_words=list(formulas[-1].target_sentence),
				new_element=NewElement(label=label, examples=list(definition.examples[:6]), placeholder=f"Add a {label}"),
				target_sentence=_words(parts),
				hint_text=definition.hint,
				evolution_instruction=f"REWRITE your Formula {number - 1} sentence, adding {label.upper()}.",
				concepts_used=["noun", "verb", *current],
				labelled_parts=parts,
			)
		)

	validate_formula_chain(formulas)
	logger.debug("Generated %d formulas for subject %r at stage %s", len(formulas), subject, stage)
	return formulas


__all__ = [
	"CONCEPT_DEFINITIONS",
	"MasteryLevel",
	"MasterySummary",
	"PROGRESSION_ORDER",
	"categorize_by_mastery",
	"formula_count_for_stage",
	"generate_formulas",
	"map_curriculum_concepts",
	"select_next_concept",
	"verbs_for_subject",
]
