"""Database engine and session factory.

Builds the SQLAlchemy engine for the notification record store and hands
out a ``sessionmaker``. Every store operation opens its own short-lived
session, so the factory is safe to share across worker threads.
"""

import time
from typing import TYPE_CHECKING, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from infrastructure.logging import get_module_logger
from infrastructure.persistence.models import Base

if TYPE_CHECKING:
    from infrastructure.configuration import DatabaseSettings

logger = get_module_logger()

SLOW_QUERY_SECONDS = 0.5


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_sqlite_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in url


def build_engine(
    database_url: str,
    echo: bool = False,
    pool_pre_ping: bool = True,
) -> Engine:
    """Create a SQLAlchemy engine for the given URL.

    SQLite engines allow cross-thread use since channel and bulk fan-out run
    on worker threads; in-memory SQLite shares one connection so every
    session sees the same database.

    Args:
        database_url: SQLAlchemy database URL
        echo: Echo SQL statements
        pool_pre_ping: Check connections before handing them out

    Returns:
        Configured Engine
    """
    kwargs: dict = {"echo": echo}
    if _is_sqlite(database_url):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_sqlite_memory(database_url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = pool_pre_ping

    engine = create_engine(database_url, **kwargs)
    _install_slow_query_logging(engine)

    logger.info(
        "database_engine_created",
        dialect=engine.dialect.name,
        echo=echo,
    )
    return engine


def _install_slow_query_logging(engine: Engine) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.monotonic())

    @event.listens_for(engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        started = conn.info["query_start_time"].pop()
        elapsed = time.monotonic() - started
        if elapsed > SLOW_QUERY_SECONDS:
            logger.warning(
                "slow_query_detected",
                elapsed_seconds=round(elapsed, 4),
                statement=statement[:100],
            )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create the session factory used by the record store."""
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def create_schema(engine: Engine) -> None:
    """Create all notification tables that do not exist yet."""
    Base.metadata.create_all(engine)
    logger.info("database_schema_ensured", tables=sorted(Base.metadata.tables))


def engine_from_settings(
    database_settings: "DatabaseSettings",
    echo: Optional[bool] = None,
) -> Engine:
    """Build an engine from DatabaseSettings."""
    return build_engine(
        database_settings.DATABASE_URL,
        echo=database_settings.DATABASE_ECHO if echo is None else echo,
        pool_pre_ping=database_settings.DATABASE_POOL_PRE_PING,
    )
