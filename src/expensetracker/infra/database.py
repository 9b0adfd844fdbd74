"""Database infrastructure: engine, schema and the per-call session provider."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import Callable, Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..errors import ConnectivityError
from ..logging_config import get_logger

SessionFactory = Callable[[], AbstractContextManager[Session]]

logger = get_logger(__name__)


def _install_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    """Apply PRAGMA settings on every new SQLite DBAPI connection."""

    @event.listens_for(engine, "connect")
    def _set_pragmas(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        try:
            for name, value in pragmas.items():
                cursor.execute(f"PRAGMA {name}={value}")
        finally:
            cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite" and config.SQLITE_PRAGMAS:
        _install_sqlite_pragmas(engine, dict(config.SQLITE_PRAGMAS))
    return engine


def check_connection(engine: Engine) -> None:
    """Open and release one connection.

    Raises:
        ConnectivityError: the store is unreachable or refused the connection.
    """
    try:
        with engine.connect():
            pass
    except (OperationalError, InterfaceError) as exc:
        logger.error(
            "Database unreachable",
            extra={"url": engine.url.render_as_string(), "error": str(exc.orig or exc)},
        )
        raise ConnectivityError(f"Could not connect to the database: {exc.orig or exc}") from exc


def init_database(engine: Engine) -> None:
    """Create the schema and check the repositories' column maps against it."""
    # Import models and column maps so every table is registered
    from .. import models  # noqa: F401
    from .repositories.columns import verify_column_maps

    verify_column_maps(SQLModel.metadata)
    check_connection(engine)
    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ready", extra={"url": engine.url.render_as_string()})


def create_session_factory(engine: Engine) -> SessionFactory:
    """Create a session factory function.

    Each call yields a fresh session holding its own connection. The session
    commits when the block exits cleanly, rolls back on any exception and is
    always closed.
    """

    @contextmanager
    def factory() -> Iterator[Session]:
        """Create a new session."""
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Convenience bootstrap for engine + session_factory with schema init.

    Used by the CLI and tests to ensure consistent engine options and
    session configuration. Returns (engine, session_factory).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)
