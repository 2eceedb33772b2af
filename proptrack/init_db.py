# proptrack/init_db.py
"""
Database initialization script.

Creates every table defined in proptrack.models:
    python -m proptrack.init_db
"""

import logging

from sqlalchemy.engine import Engine

from proptrack.database import engine as default_engine
from proptrack.models import Base
from proptrack.utils import setup_logging

logger = logging.getLogger(__name__)


def init_db(bind: Engine | None = None) -> None:
    """Create all database tables defined in models (existing tables are left alone)."""
    bind = bind or default_engine
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    setup_logging()
    init_db()
