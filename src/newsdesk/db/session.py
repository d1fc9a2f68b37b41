"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from newsdesk.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import newsdesk.models  # noqa: E402,F401


def timeout_connect_args(url: str, timeout_seconds: float) -> dict[str, Any]:
    """Return driver arguments bounding how long a single statement may wait."""
    if url.startswith("sqlite"):
        # Seconds to wait on a locked database before raising OperationalError.
        return {"timeout": timeout_seconds}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={int(timeout_seconds * 1000)}"}
    return {}


engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args=timeout_connect_args(
        settings.effective_database_url,
        settings.db_command_timeout_seconds,
    ),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
