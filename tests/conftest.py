import os
import tempfile
from pathlib import Path

# Point the app at a throwaway database before anything imports wrife.db
_DB_DIR = Path(tempfile.mkdtemp(prefix="wrife-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("OPENROUTER_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

from wrife.db import Base, SessionLocal, engine
from wrife.hints import Hint, HintRequest, fallback_hint, get_hint_service
from wrife.main import app
from wrife.models import ConceptMastery, PracticeAttempt
from wrife.progress import ProgressRecorder, get_recorder
from wrife.routers import pwp


class FakeHintService:
	def __init__(self, text="Try adding the new word before the verb.", fail=False):
		self.text = text
		self.fail = fail
		self.requests = []

	async def get_hint(self, request: HintRequest) -> Hint:
		self.requests.append(request)
		if self.fail:
			return fallback_hint(request)
		return Hint(text=self.text, source="ai")


@pytest.fixture(scope="session", autouse=True)
def _schema():
	Base.metadata.create_all(bind=engine)
	yield


@pytest.fixture
def db():
	session = SessionLocal()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture(autouse=True)
def _clean_tables():
	yield
	session = SessionLocal()
	try:
		session.query(PracticeAttempt).delete()
		session.query(ConceptMastery).delete()
		session.commit()
	finally:
		session.close()
	pwp._sessions.clear()


@pytest.fixture
def hint_service():
	return FakeHintService()


@pytest.fixture
def client(hint_service):
	app.dependency_overrides[get_hint_service] = lambda: hint_service
	app.dependency_overrides[get_recorder] = lambda: ProgressRecorder(SessionLocal)
	with TestClient(app) as c:
		yield c
	app.dependency_overrides.clear()
