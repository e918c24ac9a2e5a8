import json

from wrife.models import ConceptMastery, PracticeAttempt
from wrife.progress import AttemptRecord, ProgressRecorder, load_mastery


def test_record_writes_attempt(db):
	recorder = ProgressRecorder()
	ok = recorder.record(
		AttemptRecord(
			learner_id="pupil-1",
			activity_ref="pwp:formula:2",
			correct=True,
			lesson_number=13,
			activity_type="formula",
			response={"sentence": "Dog quietly runs"},
			elapsed_seconds=12.5,
		)
	)
	assert ok
	row = db.query(PracticeAttempt).one()
	assert row.learner_id == "pupil-1"
	assert row.activity_ref == "pwp:formula:2"
	assert row.correct is True
	assert json.loads(row.response_json) == {"sentence": "Dog quietly runs"}
	assert row.elapsed_seconds == 12.5


def test_record_swallows_storage_errors(caplog):
	def broken_factory():
		raise RuntimeError("database is down")

	recorder = ProgressRecorder(session_factory=broken_factory)
	assert recorder.record(AttemptRecord(learner_id="p", activity_ref="activity:1001", correct=False)) is False
	assert "Failed to save progress" in caplog.text


def test_concept_uses_update_mastery(db):
	recorder = ProgressRecorder()
	for correct in (True, True, True):
		recorder.record(
			AttemptRecord(learner_id="pupil-2", activity_ref="pwp:formula:2", correct=correct, concepts=["adverb"])
		)
	row = db.get(ConceptMastery, ("pupil-2", "adverb"))
	assert row.total_uses == 3
	assert row.correct_uses == 3
	assert row.mastery_status == "MASTERED"
	assert row.score == 100.0


def test_concept_failure_keeps_the_attempt(db, monkeypatch, caplog):
	def clash(session, record):
		raise RuntimeError("UNIQUE constraint failed: concept_mastery")

	monkeypatch.setattr("wrife.progress._tally_concepts", clash)
	ok = ProgressRecorder().record(
		AttemptRecord(learner_id="pupil-6", activity_ref="pwp:formula:3", correct=True, concepts=["adverb"])
	)
	assert ok
	assert db.query(PracticeAttempt).one().activity_ref == "pwp:formula:3"
	assert db.get(ConceptMastery, ("pupil-6", "adverb")) is None
	assert "Failed to update concept mastery" in caplog.text


def test_load_mastery_defaults_for_anonymous_learner(db):
	levels = load_mastery(db, None, ["adverb", "determiner"])
	assert [(l.concept, l.mastery_status, l.score) for l in levels] == [
		("adverb", "NEW", 50.0),
		("determiner", "NEW", 50.0),
	]


def test_load_mastery_reads_stored_rows(db):
	db.add(ConceptMastery(learner_id="pupil-3", concept="adverb", mastery_status="PRACTICING", correct_uses=7, total_uses=10))
	db.commit()
	levels = load_mastery(db, "pupil-3", ["adverb", "adjective"])
	assert levels[0].mastery_status == "PRACTICING"
	assert levels[0].score == 70.0
	assert levels[1].mastery_status == "NEW"
	assert levels[1].score == 50.0


def test_load_mastery_survives_query_errors(caplog):
	class BrokenSession:
		def execute(self, *args, **kwargs):
			raise RuntimeError("no such table")

	levels = load_mastery(BrokenSession(), "pupil-4", ["adverb"])
	assert levels[0].mastery_status == "NEW"
	assert "Failed to load concept mastery" in caplog.text
