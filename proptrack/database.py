# proptrack/database.py
"""
Engine, session factory and connectivity check.

Portfolio reports only read through these sessions. Properties, loans,
valuations and bank transactions are written by other parts of the
platform, so nothing here commits.
"""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import settings

logger = logging.getLogger(__name__)

POOL_TIMEOUT_SECONDS = 30


def engine_options() -> dict[str, Any]:
    """Keyword arguments for ``create_engine`` matching the configured backend."""
    if settings.is_sqlite:
        # One shared connection, otherwise each checkout sees an empty :memory: db
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
            "echo": settings.debug,
        }

    return {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_pool_max_overflow,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_timeout": POOL_TIMEOUT_SECONDS,
        "echo": settings.debug,
    }


def build_engine(url: str | None = None) -> Engine:
    options = engine_options()
    backend = "sqlite" if settings.is_sqlite else "postgresql"
    logger.info(f"Creating {backend} engine (pool={options['poolclass'].__name__})")
    return create_engine(url or settings.database_url, **options)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is closed after the request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def check_database_health(db: Session | None = None) -> dict:
    """
    Run ``SELECT 1`` against the database.

    Uses the given session when there is one, so request-scoped overrides
    are checked too. Returns ``{"status": "healthy", "database": ...}`` or
    ``{"status": "unhealthy", "error": ...}``.
    """
    ping = text("SELECT 1")
    try:
        if db is None:
            with engine.connect() as conn:
                conn.execute(ping)
        else:
            db.execute(ping)
    except Exception as exc:
        logger.error(f"Database health check failed: {exc}")
        return {"status": "unhealthy", "error": str(exc)}

    return {
        "status": "healthy",
        "database": "sqlite" if settings.is_sqlite else "postgresql",
    }
