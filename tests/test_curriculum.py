from types import SimpleNamespace

from wrife.cleanup import purge_idle_sessions
from wrife.curriculum import builtin_lessons, get_lesson, seed_curriculum


def test_seed_is_idempotent(db):
	first = seed_curriculum(db)
	second = seed_curriculum(db)
	assert first == second == len(builtin_lessons())
	lesson = get_lesson(db, 20)
	assert lesson.lesson_name == "Phrases"
	assert "phrases" in lesson.concepts_cumulative
	assert lesson.pwp_stage == "development"
	assert get_lesson(db, 5) is None


def test_idle_sessions_are_dropped():
	registry = {
		"fresh": SimpleNamespace(last_seen=1000.0),
		"stale": SimpleNamespace(last_seen=10.0),
	}
	assert purge_idle_sessions(registry, max_idle_seconds=500, now=1100.0) == 1
	assert list(registry) == ["fresh"]
