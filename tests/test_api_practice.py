from wrife.activities import default_activities, find_activity
from wrife.db import SessionLocal
from wrife.models import PracticeAttempt


def test_activity_bank_shape():
	activities = default_activities(12, year_group=2)
	assert [a.id for a in activities] == list(range(1201, 1209))
	assert activities[0].content["options"][0] == "dog"
	assert default_activities(12, year_group=5)[0].content["options"][0] == "elephant"
	assert find_activity(1204).activity_type.value == "matching"
	assert find_activity(1209) is None
	assert find_activity(7) is None


def test_list_activities_hides_answers(client):
	r = client.get("/practice/activities", params={"lesson": 12, "year_group": 3})
	assert r.status_code == 200
	body = r.json()
	assert body["resume_at"] == 0
	assert len(body["activities"]) == 8
	assert all("correct_answer" not in a for a in body["activities"])
	assert body["activities"][2]["activity_type"] == "sorting"


def test_submit_multiple_choice(client):
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1201, "year_group": 3, "response": {"activity_type": "multiple_choice", "answer": "dog"}},
	)
	assert r.status_code == 200
	assert r.json() == {"activity_id": 1201, "correct": True, "hints": []}

	r = client.post(
		"/practice/submit",
		json={"activity_id": 1201, "year_group": 3, "response": {"activity_type": "multiple_choice", "answer": "runs"}},
	)
	assert r.json()["correct"] is False
	assert r.json()["hints"] == ["A noun is a word that names a person, place, or thing."]


def test_submit_matching_and_sorting(client):
	matching = {"ball": "Noun", "eats": "Verb", "happy": "Adjective", "quickly": "Adverb"}
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1204, "year_group": 2, "response": {"activity_type": "matching", "answer": matching}},
	)
	assert r.json()["correct"] is True

	sorting = {"dog": "Nouns", "cat": "Nouns", "runs": "Verbs", "jumps": "Verbs", "big": "Adjectives", "small": "Adjectives"}
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1203, "year_group": 2, "response": {"activity_type": "sorting", "answer": sorting}},
	)
	assert r.json()["correct"] is True


def test_free_writing_blank_accepts_any_text(client):
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1208, "response": {"activity_type": "fill_blank", "answer": "The cat chased the mouse."}},
	)
	assert r.json()["correct"] is True
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1208, "response": {"activity_type": "fill_blank", "answer": "   "}},
	)
	assert r.json()["correct"] is False


def test_mismatched_or_unknown_answers(client):
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1201, "response": {"activity_type": "sorting", "answer": {"dog": "Nouns"}}},
	)
	assert r.status_code == 422
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1201, "response": {"activity_type": "crossword", "answer": "x"}},
	)
	assert r.status_code == 422
	r = client.post(
		"/practice/submit",
		json={"activity_id": 1299, "response": {"activity_type": "multiple_choice", "answer": "x"}},
	)
	assert r.status_code == 404


def test_submissions_are_recorded_and_resume_point_moves(client):
	for activity_id, answer in ((1201, "dog"), (1202, "jumps")):
		client.post(
			"/practice/submit",
			json={
				"activity_id": activity_id,
				"year_group": 2,
				"learner_id": "pupil-5",
				"elapsed_seconds": 4.5,
				"response": {"activity_type": "multiple_choice", "answer": answer},
			},
		)
	db = SessionLocal()
	try:
		rows = db.query(PracticeAttempt).order_by(PracticeAttempt.id).all()
		assert [r.activity_ref for r in rows] == ["activity:1201", "activity:1202"]
		assert rows[0].activity_type == "multiple_choice"
		assert rows[0].lesson_number == 12
		assert rows[0].elapsed_seconds == 4.5
	finally:
		db.close()

	body = client.get("/practice/activities", params={"lesson": 12, "year_group": 2, "learner_id": "pupil-5"}).json()
	assert body["resume_at"] == 2


def test_practice_hint_uses_service(client, hint_service):
	r = client.post(
		"/practice/hint",
		json={"question": "Which word is a verb?", "activity_type": "multiple_choice", "options": ["dog", "runs"]},
	)
	assert r.status_code == 200
	assert r.json() == {"text": hint_service.text, "source": "ai"}
	assert hint_service.requests[-1].options == ["dog", "runs"]
