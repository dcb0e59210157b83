"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

# Postgres pool tuning for the managed database:
# - pool_pre_ping + pool_recycle drop connections the pooler has already closed.
# - statement_timeout caps runaway queries so a booking request fails fast.
_POSTGRES_ENGINE_KWARGS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 5,
    "pool_timeout": 5,
    "pool_recycle": 300,
    "pool_pre_ping": True,
    "connect_args": {
        "connect_timeout": 5,
        "options": "-c statement_timeout=15000",
        "application_name": "studio_booking_api",
    },
}

_SQLITE_ENGINE_KWARGS: dict[str, Any] = {
    "connect_args": {"check_same_thread": False},
}


def enable_sqlite_write_locking(sqlite_engine: Engine) -> None:
    """
    Start every SQLite transaction with ``BEGIN IMMEDIATE``.

    pysqlite defers BEGIN until the first write, so two booking requests could
    both read a free slot before either inserts. Taking the database write
    lock at transaction start makes the overlap read and the insert one step.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection: Any, connection_record: Any) -> None:
        # pysqlite's own BEGIN handling is replaced by the begin hook below
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(db_url: str, *, echo: bool = False) -> Engine:
    """Create an engine with dialect-appropriate pool settings."""
    if db_url.startswith("sqlite"):
        sqlite_engine = create_engine(db_url, echo=echo, future=True, **_SQLITE_ENGINE_KWARGS)
        enable_sqlite_write_locking(sqlite_engine)
        return sqlite_engine
    return create_engine(db_url, echo=echo, future=True, **_POSTGRES_ENGINE_KWARGS)


engine: Engine = build_engine(settings.database_url, echo=settings.database_echo)


# Log pool events for monitoring
@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_connection: Any, connection_record: Any, connection_proxy: Any) -> None:
    logger.debug("Connection checked out from pool")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


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


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """Return the dialect name of the engine bound to ``session``."""
    bind = session.get_bind()
    if bind is None:
        return default
    return bind.dialect.name or default


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "enable_sqlite_write_locking",
    "engine",
    "get_db",
    "get_dialect_name",
]
