from __future__ import annotations

import logging
from datetime import datetime, time as dtime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..activities import default_activities, find_activity
from ..db import get_db
from ..grading import grade
from ..hints import Hint, HintRequest, HintService, get_hint_service
from ..models import PracticeAttempt
from ..progress import AttemptRecord, ProgressRecorder, get_recorder


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/practice", tags=["practice"])


class MultipleChoiceAnswer(BaseModel):
	activity_type: Literal["multiple_choice"]
	answer: str


class FillBlankAnswer(BaseModel):
	activity_type: Literal["fill_blank"]
	answer: Union[List[str], str]


class SortingAnswer(BaseModel):
	activity_type: Literal["sorting"]
	answer: Dict[str, str]


class MatchingAnswer(BaseModel):
	activity_type: Literal["matching"]
	answer: Dict[str, str]


class DragDropAnswer(BaseModel):
	activity_type: Literal["drag_drop"]
	answer: List[str]


PracticeAnswer = Annotated[
	Union[MultipleChoiceAnswer, FillBlankAnswer, SortingAnswer, MatchingAnswer, DragDropAnswer],
	Field(discriminator="activity_type"),
]


class SubmitRequest(BaseModel):
	activity_id: int
	year_group: int = Field(default=4, ge=1, le=6)
	learner_id: Optional[str] = Field(default=None, max_length=128)
	elapsed_seconds: float = Field(default=0, ge=0)
	response: PracticeAnswer


class SubmitResponse(BaseModel):
	activity_id: int
	correct: bool
	hints: List[str] = Field(default_factory=list)


def _resume_at(db: Session, learner_id: str, lesson_number: int) -> int:
	start_of_day = datetime.combine(datetime.utcnow().date(), dtime.min)
	refs = db.execute(
		select(PracticeAttempt.activity_ref).where(
			PracticeAttempt.learner_id == learner_id,
			PracticeAttempt.lesson_number == lesson_number,
			PracticeAttempt.correct.is_(True),
			PracticeAttempt.created_at >= start_of_day,
			PracticeAttempt.activity_ref.like("activity:%"),
		)
	).scalars().all()
	done = [0]
	for ref in refs:
		try:
			done.append(int(ref.split(":", 1)[1]) % 100)
		except ValueError:
			logger.warning("Skipping malformed activity reference %r", ref)
	return max(done)


@router.get("/activities")
def list_activities(
	lesson: int = Query(..., ge=1),
	year_group: int = Query(default=4, ge=1, le=6),
	learner_id: Optional[str] = None,
	db: Session = Depends(get_db),
) -> Dict[str, Any]:
	activities = default_activities(lesson, year_group)
	return {
		"lesson_number": lesson,
		"activities": [a.model_dump(mode="json", exclude={"correct_answer"}) for a in activities],
		"resume_at": _resume_at(db, learner_id, lesson) if learner_id else 0,
	}


@router.post("/submit", response_model=SubmitResponse)
def submit(
	req: SubmitRequest,
	background_tasks: BackgroundTasks,
	recorder: ProgressRecorder = Depends(get_recorder),
) -> SubmitResponse:
	activity = find_activity(req.activity_id, req.year_group)
	if activity is None:
		raise HTTPException(status_code=404, detail="activity not found")
	if req.response.activity_type != activity.activity_type.value:
		raise HTTPException(
			status_code=422,
			detail=f"activity {activity.id} expects a {activity.activity_type.value} answer",
		)
	correct = grade(activity.activity_type, req.response.answer, activity.correct_answer)
	if req.learner_id:
		background_tasks.add_task(
			recorder.record,
			AttemptRecord(
				learner_id=req.learner_id,
				activity_ref=f"activity:{activity.id}",
				correct=correct,
				lesson_number=activity.id // 100,
				activity_type=activity.activity_type.value,
				response=req.response.answer,
				elapsed_seconds=req.elapsed_seconds,
			),
		)
	return SubmitResponse(activity_id=activity.id, correct=correct, hints=[] if correct else activity.hints)


@router.post("/hint", response_model=Hint)
async def practice_hint(req: HintRequest, service: HintService = Depends(get_hint_service)) -> Hint:
	return await service.get_hint(req)
