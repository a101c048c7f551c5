from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from estate_api.config import settings
from estate_api.utils.exceptions import PoolExhaustedError, StoreError
from estate_api.utils.trigram import similarity

logger = logging.getLogger(__name__)


def register_sqlite_functions(engine: Engine) -> None:
    """Expose pg_trgm's ``similarity()`` on every new SQLite connection."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # noqa: ARG001
        dbapi_connection.create_function("similarity", 2, similarity, deterministic=True)


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        new_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )
        register_sqlite_functions(new_engine)
        return new_engine

    return create_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        echo=settings.debug,
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors() -> Iterator[None]:
    """Translate SQLAlchemy failures into the service-level error types."""
    try:
        yield
    except PoolTimeoutError as e:
        logger.error("Connection pool exhausted: %s", e)
        raise PoolExhaustedError(str(e)) from e
    except SQLAlchemyError as e:
        logger.error("Store error: %s", e)
        raise StoreError(str(e)) from e


def create_tables() -> None:
    """Create any missing tables. SQLAlchemy's create_all is idempotent:
    it only creates tables that don't already exist (never drops/recreates)."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured (%d models registered)", len(Base.metadata.tables))
