from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .schema import create_all

MEMORY_PATH = ":memory:"


def get_engine(sqlite_path: str) -> Engine:
    """
    Create an engine for the given SQLite path and make sure tables exist.

    ':memory:' databases share one connection across threads so that every
    session (and every worker thread) sees the same data.
    """
    if sqlite_path == MEMORY_PATH:
        engine = create_engine(
            "sqlite://",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            f"sqlite:///{sqlite_path}",
            future=True,
            connect_args={"check_same_thread": False},
        )
    create_all(engine)
    return engine


def get_session(engine: Engine) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


@contextmanager
def session_context(engine: Engine) -> Generator[Session, None, None]:
    """
    Context manager for SQLAlchemy sessions.

    Ensures rollback on error and session cleanup. Callers commit explicitly.

    Usage:
        with session_context(engine) as session:
            # use session
            session.commit()
    """
    session = get_session(engine)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
