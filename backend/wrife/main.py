import asyncio
import logging

from fastapi import FastAPI

from .db import Base, engine, ensure_schema, SessionLocal
from .cleanup import purge_idle_sessions
from .curriculum import seed_curriculum
from .logging_setup import setup_logging
from .settings import settings
from .routers import health
from .routers import pwp
from .routers import practice

logger = logging.getLogger(__name__)

app = FastAPI(title="WriFe Writing Practice API")
app.include_router(health.router)
app.include_router(pwp.router)
app.include_router(practice.router)


async def _cleanup_watcher():
	# Hourly sweep of abandoned practice sessions
	while True:
		await asyncio.sleep(60 * 60)
		try:
			purge_idle_sessions(pwp._sessions, settings.session_idle_hours * 60 * 60)
		except Exception:
			logger.exception("Idle session sweep failed")


@app.on_event("startup")
async def startup_event():
	setup_logging(settings.log_level, settings.log_file)
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
	# Apply lightweight dev migrations
	try:
		ensure_schema()
	except Exception:
		logger.exception("Schema backfill failed")
	db = SessionLocal()
	try:
		seed_curriculum(db)
	finally:
		db.close()
	asyncio.create_task(_cleanup_watcher())
