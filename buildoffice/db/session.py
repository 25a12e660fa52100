"""
BuildOffice Database Session Management.

Single entry point for database initialisation plus the session context
manager used by the SQL repository.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Generator, Optional

from sqlalchemy.orm import Session, sessionmaker

from buildoffice.db.base import Base, engine_registry
from buildoffice.engine.config import DatabaseConfig

logger = logging.getLogger("buildoffice.db")

ENGINE_NAME = "buildoffice"


def init_db(config: DatabaseConfig, create_tables: bool = False) -> sessionmaker:
    """
    Register the "buildoffice" engine and return its session factory.

    Args:
        config:        Database section of buildoffice.yaml.
        create_tables: When True, run Base.metadata.create_all(). Used by
                       ``buildoffice init`` and tests.
    """
    # Table classes must be imported before create_all sees them
    from buildoffice.db import models  # noqa: F401

    engine_registry.register(
        ENGINE_NAME,
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=config.pool_pre_ping,
    )
    engine = engine_registry.get(ENGINE_NAME)

    if create_tables:
        Base.metadata.create_all(engine)
        logger.info(f"Created tables on {engine.url.render_as_string(hide_password=True)}")

    return engine_registry.get_session_factory(ENGINE_NAME)


@contextmanager
def session_scope(factory: Callable[[], Session]) -> Generator[Session, None, None]:
    """
    Context manager for DB sessions with auto-commit/rollback.

    Usage:
        with session_scope(factory) as session:
            session.add(record)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Re-attach UTC to datetimes read back without tzinfo (SQLite drops it)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def close_db() -> None:
    """Dispose the BuildOffice engine. Used during shutdown and test teardown."""
    engine_registry.dispose(ENGINE_NAME)
