from __future__ import annotations
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./wrife.db"

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


# Lightweight column backfill for databases created before a column existed (SQLite-friendly)
def ensure_schema() -> None:
	inspector = inspect(engine)
	tables = set(inspector.get_table_names())
	if "practice_attempts" in tables:
		cols = {c["name"] for c in inspector.get_columns("practice_attempts")}
		with engine.begin() as conn:
			if "elapsed_seconds" not in cols:
				conn.exec_driver_sql("ALTER TABLE practice_attempts ADD COLUMN elapsed_seconds REAL DEFAULT 0 NOT NULL")
			if "activity_type" not in cols:
				conn.exec_driver_sql("ALTER TABLE practice_attempts ADD COLUMN activity_type VARCHAR(32)")
