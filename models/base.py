"""
Database configuration and base model.

Uses SQLAlchemy 2.0 declarative style with SQLite.
"""

from pathlib import Path
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from config import PATHS


def get_database_path() -> Path:
    """Get the path to the SQLite database file."""
    PATHS.data_dir.mkdir(parents=True, exist_ok=True)
    return PATHS.database


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def make_engine(url: str) -> Engine:
    """Create an engine for the given database URL."""
    return create_engine(
        url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def make_session_factory(bind: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(bind=bind, autocommit=False, autoflush=False)


# Default application database
DATABASE_URL = f"sqlite:///{get_database_path()}"
engine = make_engine(DATABASE_URL)

# Session factory
SessionLocal = make_session_factory(engine)


@contextmanager
def get_session(factory: sessionmaker = SessionLocal) -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Engine = engine) -> None:
    """Initialize the database, creating all tables."""
    # Import models so their tables are registered on the metadata
    import models.match  # noqa: F401
    Base.metadata.create_all(bind=bind)
