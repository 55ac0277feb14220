"""
db/session.py

Engine, session factory and schema bootstrap for the dataset store.
"""

from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_store_settings, resolve_database_url


def create_db_engine(database_url: str | None = None) -> Engine:
    url = database_url or resolve_database_url()
    settings = get_store_settings()
    if url.startswith("sqlite"):
        return create_engine(url, echo=settings.echo)

    return create_engine(
        url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle_seconds,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Shared engine, created on first use."""
    return create_db_engine()


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def SessionLocal() -> Session:
    return _session_factory()()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_schema(engine: Engine | None = None) -> None:
    """
    Create missing dataset store tables. Existing tables are left untouched.
    """

    import db.models  # noqa: F401 - registers models on Base.metadata
    from db.base import Base

    Base.metadata.create_all(engine or get_engine())
