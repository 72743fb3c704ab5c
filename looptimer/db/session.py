from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from looptimer.config.settings import settings
from looptimer.core.errors import LooptimerError

# Created on first use so importing the app never opens a connection
_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        logger.info("Initializing database engine")
        connect_args = {}
        if settings.database_url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine() -> Engine:
    return _get_engine()


def _get_session_local() -> sessionmaker[Session]:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine(), expire_on_commit=False)
        logger.debug("Database session factory initialized")
    return _SessionLocal


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session context manager that commits on success and rolls back on error.

    HTTPException and domain errors are expected outcomes and are re-raised
    without error logging; anything else is logged as a database failure.
    """
    session = _get_session_local()()
    try:
        yield session
        session.commit()
    except (HTTPException, LooptimerError):
        session.rollback()
        raise
    except Exception as e:
        logger.error(f"Database session error, rolling back: {type(e).__name__}: {e}")
        session.rollback()
        raise
    finally:
        session.close()
