# File: scribe/core/database/connection.py

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from scribe.core.config.settings import settings
from .base import Base

DATABASE_URL = settings.DATABASE_URL
IS_SQLITE = DATABASE_URL.startswith("sqlite")

if IS_SQLITE:
    # The sqlite driver will not create missing parent folders
    db_file = make_url(DATABASE_URL).database
    if db_file and db_file != ":memory:":
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    # Job handlers may run outside the thread that opened the connection
    connect_args={"check_same_thread": False} if IS_SQLITE else {}
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Registers every mapped model and creates the missing tables."""
    import scribe.core.jobs.models  # noqa: F401
    import scribe.features.transcription.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for obtaining a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
