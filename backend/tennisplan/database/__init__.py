"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from ..core.config import settings

logger = logging.getLogger(__name__)

_DEFAULT_POOL_KWARGS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 10,
    # Recycle before typical idle timeouts of managed Postgres poolers
    "pool_recycle": 1800,
    "pool_pre_ping": True,
}


def _build_engine_kwargs(db_url: str) -> dict[str, Any]:
    """Return engine kwargs for the configured dialect."""
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if db_url.lower().startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if db_url.rstrip("/") in {"sqlite:", "sqlite:///:memory:"} or ":memory:" in db_url:
            # In-memory databases live inside one connection
            kwargs["poolclass"] = StaticPool
        return kwargs

    kwargs["poolclass"] = QueuePool
    kwargs.update(_DEFAULT_POOL_KWARGS)
    kwargs["connect_args"] = {"connect_timeout": 10, "application_name": "tennisplan_backend"}
    return kwargs


def create_db_engine(db_url: str) -> Engine:
    new_engine = create_engine(db_url, **_build_engine_kwargs(db_url))
    if db_url.lower().startswith("sqlite"):
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ignores ON DELETE clauses unless foreign keys are switched on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("SQLite connection established with foreign keys enabled")


engine: Engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register on Base.metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
