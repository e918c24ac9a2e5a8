from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text, Boolean, Float, JSON
from .db import Base


class CurriculumLesson(Base):
	__tablename__ = "curriculum_map"
	lesson_number = Column(Integer, primary_key=True)
	lesson_name = Column(String(256), nullable=False)
	concepts_introduced = Column(JSON, nullable=False, default=list)
	concepts_cumulative = Column(JSON, nullable=False, default=list)
	pwp_stage = Column(String(32), nullable=False, default="foundation")
	pwp_duration_minutes = Column(Integer, nullable=False, default=5)
	pwp_formula_count_min = Column(Integer, nullable=False, default=2)
	pwp_formula_count_max = Column(Integer, nullable=False, default=4)
	subject_ideas = Column(JSON, nullable=False, default=list)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ConceptMastery(Base):
	__tablename__ = "concept_mastery"
	# One row per learner and grammar concept
	learner_id = Column(String(128), primary_key=True)
	concept = Column(String(64), primary_key=True)
	mastery_status = Column(String(16), nullable=False, default="NEW")
	correct_uses = Column(Integer, default=0, nullable=False)
	total_uses = Column(Integer, default=0, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	@property
	def score(self) -> float:
		if not self.total_uses:
			return 50.0
		return self.correct_uses * 100.0 / self.total_uses


class PracticeAttempt(Base):
	__tablename__ = "practice_attempts"
	id = Column(Integer, primary_key=True, autoincrement=True)
	learner_id = Column(String(128), nullable=False, index=True)
	lesson_number = Column(Integer, nullable=True)
	# e.g. "pwp:formula:3" or "activity:1001"
	activity_ref = Column(String(64), nullable=False)
	activity_type = Column(String(32), nullable=True)
	correct = Column(Boolean, nullable=False)
	response_json = Column(Text, nullable=True)
	elapsed_seconds = Column(Float, default=0, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
