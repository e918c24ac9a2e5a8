from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .models import CurriculumLesson


logger = logging.getLogger(__name__)


_ANIMALS = ["dog", "cat", "bird", "fish", "rabbit", "lion", "elephant", "frog", "butterfly", "bear"]
_PLACES = ["school", "library", "park", "beach", "forest", "city", "village", "garden", "museum", "castle"]
_PEOPLE = ["teacher", "student", "doctor", "chef", "artist", "farmer", "scientist", "pilot", "dancer", "writer"]
_LANDSCAPES = ["mountain", "river", "ocean", "desert", "island", "valley", "cave", "waterfall", "volcano", "glacier"]
_CHARACTERS = ["hero", "dragon", "princess", "wizard", "knight", "pirate", "fairy", "giant", "elf", "mermaid"]
_TIMES = ["morning", "evening", "summer", "winter", "spring", "autumn", "sunrise", "sunset", "midnight", "dawn"]
_EVENTS = ["invention", "discovery", "celebration", "adventure", "mystery", "treasure", "journey", "challenge", "competition", "festival"]
_VALUES = ["friendship", "family", "courage", "kindness", "wisdom", "honesty", "patience", "creativity", "determination", "loyalty"]
_WEATHER = ["storm", "rainbow", "thunder", "lightning", "earthquake", "tornado", "flood", "drought", "blizzard", "hurricane"]
_QUALITIES = ["ancient", "modern", "mysterious", "magical", "peaceful", "dangerous", "beautiful", "strange", "wonderful", "secret"]
_FEELINGS = ["memory", "dream", "hope", "fear", "joy", "sadness", "anger", "surprise", "excitement", "wonder"]

_BASE = ["noun", "verb", "determiner", "adjective", "adverb"]

# (lesson, name, introduced, cumulative, stage, minutes, min formulas, max formulas, subject ideas)
_LESSONS = [
	(10, "Nouns and Verbs", ["noun", "verb"], ["noun", "verb"], "foundation", 5, 2, 2, _ANIMALS),
	(11, "Determiners", ["determiner"], ["noun", "verb", "determiner"], "foundation", 5, 3, 3, _ANIMALS),
	(12, "Adjectives", ["adjective"], ["noun", "verb", "determiner", "adjective"], "foundation", 5, 3, 3, _ANIMALS),
	(13, "Adverbs", ["adverb"], _BASE, "foundation", 5, 4, 4, _ANIMALS),
	(14, "Conjunctions", ["review"], _BASE + ["conjunction"], "foundation", 5, 4, 4, _ANIMALS),
	(15, "Pronouns", ["consolidation"], _BASE + ["conjunction", "pronoun"], "foundation", 5, 4, 4, _ANIMALS),
	(16, "Retrieving Information", ["comprehension"], _BASE, "development", 7, 3, 5, _PLACES),
	(17, "Word Meaning in Context", ["vocabulary"], _BASE, "development", 7, 3, 5, _PLACES),
	(18, "Questions & Statements", ["sentence_types"], _BASE + ["sentence_types"], "development", 7, 3, 5, _PEOPLE),
	(19, "Commands & Exclamations", ["commands"], _BASE + ["sentence_types", "commands"], "development", 7, 3, 5, _PEOPLE),
	(20, "Phrases", ["phrases"], _BASE + ["phrases"], "development", 8, 4, 5, _LANDSCAPES),
	(21, "Clauses", ["clauses"], _BASE + ["phrases", "clauses"], "development", 8, 4, 5, _LANDSCAPES),
	(22, "Dependent and Independent Clauses", ["clause_types"], _BASE + ["phrases", "clauses", "clause_types"], "development", 8, 4, 6, _CHARACTERS),
	(23, "What is a Sentence?", ["sentence_structure"], _BASE + ["phrases", "clauses", "sentence_structure"], "application", 8, 4, 6, _CHARACTERS),
	(24, "Simple Sentences with Different Lengths", ["sentence_length"], _BASE + ["phrases", "clauses", "sentence_structure"], "application", 8, 4, 6, _TIMES),
	(25, "Different Ways of Forming Sentences", ["sentence_variation"], _BASE + ["phrases", "clauses", "sentence_structure", "sentence_variation"], "application", 8, 4, 6, _TIMES),
	(26, "Active vs Passive Voice", ["voice"], _BASE + ["phrases", "clauses", "voice"], "application", 10, 4, 6, _EVENTS),
	(27, "What is a Paragraph?", ["paragraphs"], _BASE + ["phrases", "clauses", "paragraphs"], "application", 10, 5, 6, _EVENTS),
	(28, "Using Paragraphs Effectively", ["paragraph_structure"], _BASE + ["phrases", "clauses", "paragraphs", "paragraph_structure"], "application", 10, 5, 6, _VALUES),
	(29, "Short Narratives", ["narrative"], _BASE + ["phrases", "clauses", "paragraphs", "narrative"], "advanced", 10, 5, 6, _VALUES),
	(30, "Compound and Complex Sentences", ["compound_complex"], _BASE + ["phrases", "clauses", "compound_complex"], "advanced", 10, 5, 6, _WEATHER),
	(31, "7 Basic Story Types", ["story_types"], _BASE + ["phrases", "clauses", "story_types"], "advanced", 12, 5, 6, _WEATHER),
	(32, "Noun, Adjective and Adverbial Phrases", ["phrase_types"], _BASE + ["phrases", "phrase_types"], "advanced", 10, 5, 6, _QUALITIES),
	(33, "Direct Speech", ["dialogue"], _BASE + ["phrases", "dialogue"], "advanced", 12, 5, 6, _QUALITIES),
	(34, "Personal Pronouns", ["pronouns"], _BASE + ["pronouns"], "advanced", 10, 5, 6, _FEELINGS),
]


def builtin_lessons() -> List[Dict[str, Any]]:
	return [
		{
			"lesson_number": number,
			"lesson_name": name,
			"concepts_introduced": list(introduced),
			"concepts_cumulative": list(cumulative),
			"pwp_stage": stage,
			"pwp_duration_minutes": minutes,
			"pwp_formula_count_min": low,
			"pwp_formula_count_max": high,
			"subject_ideas": list(ideas),
		}
		for number, name, introduced, cumulative, stage, minutes, low, high, ideas in _LESSONS
	]


def seed_curriculum(db: Session) -> int:
	"""Insert or refresh the built-in lesson map; returns the number of rows written."""
	written = 0
	for data in builtin_lessons():
		row = db.get(CurriculumLesson, data["lesson_number"])
		if row is None:
			db.add(CurriculumLesson(**data))
		else:
			for key, value in data.items():
				setattr(row, key, value)
		written += 1
	db.commit()
	logger.info("Seeded %d curriculum lessons", written)
	return written


def get_lesson(db: Session, lesson_number: int) -> Optional[CurriculumLesson]:
	return db.get(CurriculumLesson, lesson_number)


def lesson_to_dict(row: CurriculumLesson) -> Dict[str, Any]:
	return {
		"lesson_number": row.lesson_number,
		"lesson_name": row.lesson_name,
		"concepts_introduced": list(row.concepts_introduced or []),
		"concepts_cumulative": list(row.concepts_cumulative or []),
		"pwp_stage": row.pwp_stage,
		"pwp_duration_minutes": row.pwp_duration_minutes,
		"pwp_formula_count_min": row.pwp_formula_count_min,
		"pwp_formula_count_max": row.pwp_formula_count_max,
		"subject_ideas": list(row.subject_ideas or []),
	}


__all__ = ["builtin_lessons", "get_lesson", "lesson_to_dict", "seed_curriculum"]
