"""Database connection and session management."""

import functools
import logging
from typing import Callable, Generator, Optional, TypeVar

from sqlalchemy import create_engine, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from fincore.config.settings import get_settings
from fincore.core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()

F = TypeVar("F", bound=Callable)

# Module-level database state (can be reconfigured at runtime)
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _engine_options(database_url: str) -> dict:
    """Driver-specific create_engine keyword arguments."""
    if database_url.startswith("sqlite"):
        # Sessions cross threads (request pool, simulation scheduler)
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1800,
    }


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        _engine = create_engine(database_url, echo=False, **_engine_options(database_url))
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session() -> Session:
    """Get a new database session (for non-generator use)."""
    SessionLocal = get_session_factory()
    return SessionLocal()


def store_operation(method: F) -> F:
    """
    Wrap a repository method so driver failures surface as
    UpstreamUnavailableError.

    The repository's session (self._db) is rolled back first so it stays
    usable for the rest of the request.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error(f"Store failure in {type(self).__name__}.{method.__name__}: {exc}")
            try:
                self._db.rollback()
            except SQLAlchemyError:
                logger.warning("Rollback after store failure also failed", exc_info=True)
            raise UpstreamUnavailableError("Data store unavailable") from exc

    return wrapper  # type: ignore[return-value]


def init_db() -> None:
    """Initialize database tables."""
    from fincore.repositories.sqlalchemy import orm_models  # noqa: F401

    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def reset_database() -> None:
    """Reset database state (for reconfiguration)."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _SessionLocal = None
