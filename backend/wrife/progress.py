from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import SessionLocal
from .formula_builder import MASTERED, NEW, PRACTICING, MasteryLevel
from .models import ConceptMastery, PracticeAttempt


logger = logging.getLogger(__name__)


# Uses needed before a concept's score can move its status off NEW
MIN_USES_FOR_STATUS = 3


@dataclass
class AttemptRecord:
	learner_id: str
	activity_ref: str
	correct: bool
	lesson_number: Optional[int] = None
	activity_type: Optional[str] = None
	response: Any = None
	elapsed_seconds: float = 0.0
	concepts: List[str] = field(default_factory=list)


def _status_for(correct_uses: int, total_uses: int) -> str:
	if total_uses < MIN_USES_FOR_STATUS:
		return NEW
	score = correct_uses * 100.0 / total_uses
	if score >= 85:
		return MASTERED
	if score >= 65:
		return PRACTICING
	return NEW


def _tally_concepts(db: Session, record: AttemptRecord) -> None:
	for concept in dict.fromkeys(record.concepts):
		row = db.get(ConceptMastery, (record.learner_id, concept))
		if row is None:
			row = ConceptMastery(learner_id=record.learner_id, concept=concept, correct_uses=0, total_uses=0)
			db.add(row)
		row.total_uses = (row.total_uses or 0) + 1
		if record.correct:
			row.correct_uses = (row.correct_uses or 0) + 1
		row.mastery_status = _status_for(row.correct_uses, row.total_uses)
		row.updated_at = datetime.utcnow()


def _rollback(db: Optional[Session]) -> None:
	if db is None:
		return
	try:
		db.rollback()
	except Exception:
		logger.warning("Rollback after failed progress write also failed")


class ProgressRecorder:
	"""Fire-and-forget writer for practice attempts.

	``record`` never raises: a failed write is logged and dropped so that the
	learner's session carries on regardless. The return value says whether the
	attempt row was saved. Concept counts are committed after it, on their own.
	"""

	def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
		self._session_factory = session_factory

	def record(self, record: AttemptRecord) -> bool:
		db: Optional[Session] = None
		try:
			db = self._session_factory()
			db.add(
				PracticeAttempt(
					learner_id=record.learner_id,
					lesson_number=record.lesson_number,
					activity_ref=record.activity_ref,
					activity_type=record.activity_type,
					correct=record.correct,
					response_json=json.dumps(record.response) if record.response is not None else None,
					elapsed_seconds=float(record.elapsed_seconds or 0),
				)
			)
			db.commit()
		except Exception:
			logger.exception("Failed to save progress for %s (%s)", record.learner_id, record.activity_ref)
			_rollback(db)
			if db is not None:
				db.close()
			return False

		try:
			if record.concepts:
				_tally_concepts(db, record)
				db.commit()
		except Exception:
			logger.exception("Failed to update concept mastery for %s (%s)", record.learner_id, record.activity_ref)
			_rollback(db)
		finally:
			db.close()
		return True


def get_recorder() -> ProgressRecorder:
	return ProgressRecorder()


def _defaults(concepts: Sequence[str]) -> List[MasteryLevel]:
	return [MasteryLevel(concept=c, mastery_status=NEW, score=50.0) for c in concepts]


def load_mastery(db: Session, learner_id: Optional[str], concepts: Sequence[str]) -> List[MasteryLevel]:
	if not learner_id or not concepts:
		return _defaults(concepts)
	try:
		rows = db.execute(
			select(ConceptMastery).where(
				ConceptMastery.learner_id == learner_id,
				ConceptMastery.concept.in_(list(concepts)),
			)
		).scalars().all()
	except Exception:
		logger.exception("Failed to load concept mastery for %s", learner_id)
		return _defaults(concepts)
	by_concept: Dict[str, ConceptMastery] = {row.concept: row for row in rows}
	levels: List[MasteryLevel] = []
	for concept in concepts:
		row = by_concept.get(concept)
		if row is None:
			levels.append(MasteryLevel(concept=concept))
		else:
			levels.append(MasteryLevel(concept=concept, mastery_status=(row.mastery_status or NEW).upper(), score=row.score))
	return levels


__all__ = ["AttemptRecord", "ProgressRecorder", "get_recorder", "load_mastery"]
