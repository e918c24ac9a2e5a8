from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..curriculum import get_lesson, lesson_to_dict
from ..db import get_db
from ..formula_builder import (
	CONCEPT_DEFINITIONS,
	MasterySummary,
	categorize_by_mastery,
	generate_formulas,
	map_curriculum_concepts,
)
from ..formulas import Formula, FormulaChainError, demo_formulas
from ..hints import Hint, HintRequest, HintService, get_hint_service
from ..progress import AttemptRecord, ProgressRecorder, get_recorder, load_mastery
from ..session import PWPSession, Phase
from ..tokens import RemovalPolicy


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pwp", tags=["pwp"])


INSTRUCTIONS = {
	"rewrite_rule": "You must REWRITE the entire sentence each time, adding the new element.",
	"word_bank_usage": "Click the words from your previous sentence to build, then type the new element.",
	"progression": "Each formula builds on the previous one by adding ONE new element.",
}


class StartSessionRequest(BaseModel):
	demo: bool = False
	lesson_number: Optional[int] = Field(default=None, ge=1)
	subject: Optional[str] = Field(default=None, max_length=64)
	learner_id: Optional[str] = Field(default=None, max_length=128)
	removal_policy: RemovalPolicy = RemovalPolicy.TYPED_ONLY


class AddWordRequest(BaseModel):
	word: str
	index: int


class TypedRequest(BaseModel):
	text: str


class TokenView(BaseModel):
	token_id: int
	origin: str
	text: str


class SessionView(BaseModel):
	session_id: str
	phase: Phase
	current_step_index: int
	total_formulas: int
	formulas_completed: int
	formula: Formula
	word_bank: List[str]
	used_indices: List[int]
	tokens: List[TokenView]
	attempts: int
	hint_eligible: bool


class StartSessionResponse(SessionView):
	lesson_number: Optional[int] = None
	subject: Optional[str] = None
	stage: Optional[str] = None
	mastery_summary: Dict[str, List[str]] = Field(default_factory=dict)
	instructions: Dict[str, str] = Field(default_factory=dict)


class CheckResponse(BaseModel):
	ignored: bool
	correct: bool
	session: SessionView


class AdvanceResponse(BaseModel):
	advanced: bool
	session: SessionView


class PWPHintResponse(BaseModel):
	eligible: bool
	hint: Optional[Hint] = None


class WordCount(BaseModel):
	word: str
	count: int


class StatsResponse(BaseModel):
	session_id: str
	phase: Phase
	formulas_completed: int
	total_formulas: int
	accuracy: int
	total_attempts: int
	duration_seconds: int
	top_words: List[WordCount]
	word_write_counts: Dict[str, int]


class _SessionEntry:
	def __init__(self, session: PWPSession, *, learner_id: Optional[str], lesson_number: Optional[int]) -> None:
		self.session_id: str = uuid.uuid4().hex
		self.session = session
		self.learner_id = learner_id
		self.lesson_number = lesson_number
		self.step_started_at: float = time.monotonic()
		self.last_seen: float = self.step_started_at
		self.lock = threading.Lock()


_sessions: Dict[str, _SessionEntry] = {}


def _get_entry(session_id: str) -> _SessionEntry:
	entry = _sessions.get(session_id)
	if entry is None:
		raise HTTPException(status_code=404, detail="session not found")
	entry.last_seen = time.monotonic()
	return entry


def _view(entry: _SessionEntry) -> SessionView:
	s = entry.session
	return SessionView(
		session_id=entry.session_id,
		phase=s.phase,
		current_step_index=s.current_step_index,
		total_formulas=s.total_formulas,
		formulas_completed=s.formulas_completed,
		formula=s.current_formula,
		word_bank=s.builder.source_words,
		used_indices=s.builder.used_indices(),
		tokens=[TokenView(token_id=t.token_id, origin=t.origin.value, text=t.text) for t in s.builder.tokens],
		attempts=s.attempts,
		hint_eligible=s.hint_eligible,
	)


@router.get("/curriculum/{lesson_number}")
def curriculum(lesson_number: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
	row = get_lesson(db, lesson_number)
	if row is None:
		raise HTTPException(status_code=404, detail="lesson not found")
	return lesson_to_dict(row)


@router.post("/sessions", response_model=StartSessionResponse)
def start_session(req: StartSessionRequest, db: Session = Depends(get_db)) -> StartSessionResponse:
	stage: Optional[str] = None
	mastery = MasterySummary()
	subject = (req.subject or "").strip() or None
	if req.demo:
		formulas = demo_formulas()
		subject = subject or "Library"
	else:
		if req.lesson_number is None or not subject:
			raise HTTPException(status_code=400, detail="lesson_number and subject are required")
		lesson = get_lesson(db, req.lesson_number)
		if lesson is None:
			raise HTTPException(status_code=404, detail="lesson not found")
		stage = lesson.pwp_stage or "foundation"
		available = map_curriculum_concepts(lesson.concepts_cumulative or ["noun", "verb"])
		mastery = categorize_by_mastery(load_mastery(db, req.learner_id, available))
		try:
			formulas = generate_formulas(
				subject,
				stage,
				lesson.pwp_formula_count_min or 2,
				lesson.pwp_formula_count_max or 4,
				available,
				mastery,
			)
		except FormulaChainError as e:
			logger.exception("Generated formulas for lesson %s broke the chain", req.lesson_number)
			raise HTTPException(status_code=500, detail=str(e))

	entry = _SessionEntry(
		PWPSession(formulas, removal_policy=req.removal_policy),
		learner_id=req.learner_id,
		lesson_number=req.lesson_number,
	)
	_sessions[entry.session_id] = entry
	logger.info("Started PWP session %s with %d formulas", entry.session_id, len(formulas))
	return StartSessionResponse(
		**_view(entry).model_dump(),
		lesson_number=req.lesson_number,
		subject=subject,
		stage=stage,
		mastery_summary={"mastered": mastery.mastered, "practicing": mastery.practicing, "new": mastery.new},
		instructions=INSTRUCTIONS,
	)


@router.get("/sessions/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
	return _view(_get_entry(session_id))


@router.post("/sessions/{session_id}/words", response_model=SessionView)
def add_word(session_id: str, req: AddWordRequest) -> SessionView:
	entry = _get_entry(session_id)
	with entry.lock:
		entry.session.add_reused(req.word, req.index)
		return _view(entry)


@router.post("/sessions/{session_id}/typed", response_model=SessionView)
def add_typed(session_id: str, req: TypedRequest) -> SessionView:
	entry = _get_entry(session_id)
	with entry.lock:
		entry.session.add_typed(req.text)
		return _view(entry)


@router.delete("/sessions/{session_id}/tokens/{position}", response_model=SessionView)
def remove_token(session_id: str, position: int) -> SessionView:
	entry = _get_entry(session_id)
	with entry.lock:
		entry.session.remove(position)
		return _view(entry)


@router.post("/sessions/{session_id}/clear", response_model=SessionView)
def clear_sentence(session_id: str) -> SessionView:
	entry = _get_entry(session_id)
	with entry.lock:
		entry.session.clear()
		return _view(entry)


@router.post("/sessions/{session_id}/check", response_model=CheckResponse)
def check_sentence(
	session_id: str,
	background_tasks: BackgroundTasks,
	recorder: ProgressRecorder = Depends(get_recorder),
) -> CheckResponse:
	entry = _get_entry(session_id)
	with entry.lock:
		s = entry.session
		formula = s.current_formula
		built = s.builder.words
		result = s.check()
		if result.correct and entry.learner_id:
			background_tasks.add_task(
				recorder.record,
				AttemptRecord(
					learner_id=entry.learner_id,
					activity_ref=f"pwp:formula:{formula.formula_number}",
					correct=True,
					lesson_number=entry.lesson_number,
					activity_type="formula",
					response={"sentence": " ".join(built), "failed_attempts": result.attempts},
					elapsed_seconds=round(time.monotonic() - entry.step_started_at, 2),
					concepts=[c for c in formula.concepts_used if c in CONCEPT_DEFINITIONS],
				),
			)
		return CheckResponse(ignored=result.ignored, correct=result.correct, session=_view(entry))


@router.post("/sessions/{session_id}/advance", response_model=AdvanceResponse)
def advance(session_id: str) -> AdvanceResponse:
	entry = _get_entry(session_id)
	with entry.lock:
		advanced = entry.session.advance()
		if advanced:
			entry.step_started_at = time.monotonic()
		return AdvanceResponse(advanced=advanced, session=_view(entry))


@router.post("/sessions/{session_id}/hint", response_model=PWPHintResponse)
async def hint(
	session_id: str,
	year_group: int = Query(default=4, ge=1, le=6),
	service: HintService = Depends(get_hint_service),
) -> PWPHintResponse:
	entry = _get_entry(session_id)
	s = entry.session
	if not s.hint_eligible:
		return PWPHintResponse(eligible=False)
	formula = s.current_formula
	request = HintRequest(
		question=f"{formula.evolution_instruction} Formula: {formula.structure}.",
		activity_type="formula",
		options=formula.new_element.examples or None,
		year_group=year_group,
		fallback=formula.hint_text,
	)
	return PWPHintResponse(eligible=True, hint=await service.get_hint(request))


@router.get("/sessions/{session_id}/stats", response_model=StatsResponse)
def stats(session_id: str) -> StatsResponse:
	entry = _get_entry(session_id)
	summary = entry.session.stats()
	return StatsResponse(
		session_id=entry.session_id,
		phase=entry.session.phase,
		formulas_completed=summary.formulas_completed,
		total_formulas=summary.total_formulas,
		accuracy=summary.accuracy,
		total_attempts=summary.total_attempts,
		duration_seconds=summary.duration_seconds,
		top_words=[WordCount(word=w, count=c) for w, c in summary.top_words],
		word_write_counts=summary.word_write_counts,
	)


@router.delete("/sessions/{session_id}")
def abandon(session_id: str) -> Dict[str, bool]:
	if _sessions.pop(session_id, None) is None:
		raise HTTPException(status_code=404, detail="session not found")
	return {"ok": True}
