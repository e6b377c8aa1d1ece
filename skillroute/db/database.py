from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from functools import lru_cache

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from skillroute.config import get_settings
from skillroute.db.models import Base


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the review item store.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Get the engine configured by settings."""
    settings = get_settings()
    return create_db_engine(settings.database_url, echo=settings.log_level == "DEBUG")


def make_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Build a session factory bound to ``engine`` (settings engine by default)."""
    return sessionmaker(
        bind=engine or get_engine(),
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine | None = None) -> None:
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine or get_engine())
    logger.info("Database tables initialized")


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
