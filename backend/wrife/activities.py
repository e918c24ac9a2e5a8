from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .grading import ActivityType


class Activity(BaseModel):
	id: int
	activity_number: int
	w_level: str
	activity_type: ActivityType
	title: str
	instructions: str
	content: Dict[str, Any] = Field(default_factory=dict)
	correct_answer: Any = None
	hints: List[str] = Field(default_factory=list)


def _word_lists(year_group: int) -> Dict[str, List[str]]:
	if year_group <= 3:
		return {
			"nouns": ["dog", "cat", "ball", "tree", "house", "book", "mum", "dad"],
			"verbs": ["runs", "jumps", "eats", "plays", "reads", "sings"],
			"adjectives": ["big", "small", "happy", "red", "fast", "loud"],
		}
	return {
		"nouns": ["elephant", "library", "adventure", "mountain", "telescope", "orchestra"],
		"verbs": ["explores", "discovers", "imagines", "observes", "creates", "transforms"],
		"adjectives": ["enormous", "mysterious", "brilliant", "ancient", "magnificent", "peculiar"],
	}


def default_activities(lesson_number: int, year_group: int = 4) -> List[Activity]:
	"""The eight-activity practice bank, W1 recognition through W6 creation."""
	words = _word_lists(year_group)
	nouns, verbs, adjectives = words["nouns"], words["verbs"], words["adjectives"]
	base = lesson_number * 100
	pairs = [
		{"left": nouns[2], "right": "Noun"},
		{"left": verbs[2], "right": "Verb"},
		{"left": adjectives[2], "right": "Adjective"},
		{"left": "quickly", "right": "Adverb"},
	]

	return [
		Activity(
			id=base + 1,
			activity_number=1,
			w_level="W1",
			activity_type=ActivityType.MULTIPLE_CHOICE,
			title="Find the Noun",
			instructions="Which word is a noun (a naming word)?",
			content={
				"question": f'Which word is a noun in this sentence: "The {adjectives[0]} {nouns[0]} {verbs[0]} quickly."',
				"options": [nouns[0], verbs[0], adjectives[0], "quickly"],
			},
			correct_answer=[nouns[0]],
			hints=["A noun is a word that names a person, place, or thing."],
		),
		Activity(
			id=base + 2,
			activity_number=2,
			w_level="W1",
			activity_type=ActivityType.MULTIPLE_CHOICE,
			title="Find the Verb",
			instructions="Which word is a verb (a doing word)?",
			content={
				"question": f'Which word is a verb in: "The {nouns[1]} {verbs[1]} in the park."',
				"options": ["The", nouns[1], verbs[1], "park"],
			},
			correct_answer=[verbs[1]],
			hints=["A verb is a doing word - it tells you what someone or something does."],
		),
		Activity(
			id=base + 3,
			activity_number=3,
			w_level="W2",
			activity_type=ActivityType.SORTING,
			title="Sort the Word Classes",
			instructions="Sort these words into the correct groups.",
			content={
				"items": [nouns[0], verbs[0], adjectives[0], nouns[1], verbs[1], adjectives[1]],
				"categories": ["Nouns", "Verbs", "Adjectives"],
			},
			correct_answer={
				nouns[0]: "Nouns",
				nouns[1]: "Nouns",
				verbs[0]: "Verbs",
				verbs[1]: "Verbs",
				adjectives[0]: "Adjectives",
				adjectives[1]: "Adjectives",
			},
			hints=["Nouns name things, verbs are doing words, adjectives describe things."],
		),
		Activity(
			id=base + 4,
			activity_number=4,
			w_level="W3",
			activity_type=ActivityType.MATCHING,
			title="Match Words to Their Class",
			instructions="Match each word on the left with its word class on the right.",
			content={"pairs": pairs},
			# The key is the pair list itself
			correct_answer=pairs,
			hints=["Think about what each word does in a sentence."],
		),
		Activity(
			id=base + 5,
			activity_number=5,
			w_level="W4",
			activity_type=ActivityType.FILL_BLANK,
			title="Complete the Sentence",
			instructions="Fill in the missing word with the correct type.",
			content={
				"sentence": f"The ___ {nouns[0]} ___ over the fence.",
				"blanks": ["adjective", "verb"],
				"word_bank": adjectives[:3] + verbs[:3],
			},
			correct_answer=[adjectives[0], verbs[0]],
			hints=["The first blank needs an adjective (describing word), the second needs a verb (doing word)."],
		),
		Activity(
			id=base + 6,
			activity_number=6,
			w_level="W5",
			activity_type=ActivityType.MULTIPLE_CHOICE,
			title="Choose the Best Word",
			instructions="Which word best completes this sentence to match the formula: Subject + Verb + Object?",
			content={
				"question": f'"The {nouns[0]} ___ the {nouns[1]}." Which verb fits best?',
				"options": [verbs[0], adjectives[0], "the", "and"],
			},
			correct_answer=[verbs[0]],
			hints=["We need a verb (doing word) to complete the Subject + Verb + Object formula."],
		),
		Activity(
			id=base + 7,
			activity_number=7,
			w_level="W5",
			activity_type=ActivityType.FILL_BLANK,
			title="Build the Formula",
			instructions="Write a word for each part of the formula: Subject + Verb + Object",
			content={
				"sentence": "Write one word for each: ___ (subject) ___ (verb) ___ (object)",
				"blanks": ["subject", "verb", "object"],
				"word_bank": [],
			},
			correct_answer=["any", "any", "any"],
			hints=["Subject = who/what, Verb = doing word, Object = what they did it to."],
		),
		Activity(
			id=base + 8,
			activity_number=8,
			w_level="W6",
			activity_type=ActivityType.FILL_BLANK,
			title="Write Your Own Sentence",
			instructions="Write a complete sentence using the formula: Subject + Verb + Object. Use your own words!",
			content={"sentence": "", "blanks": ["sentence"], "word_bank": []},
			correct_answer=["any"],
			hints=['Remember: Subject (who?) + Verb (does what?) + Object (to what?). Example: "The cat chased the mouse."'],
		),
	]


def find_activity(activity_id: int, year_group: int = 4) -> Optional[Activity]:
	lesson_number, number = divmod(activity_id, 100)
	if lesson_number < 1 or not 1 <= number <= 8:
		return None
	return default_activities(lesson_number, year_group)[number - 1]


__all__ = ["Activity", "default_activities", "find_activity"]
