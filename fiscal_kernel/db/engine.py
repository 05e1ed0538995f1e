"""
Module: fiscal_kernel.db.engine
Responsibility: Process-wide SQLAlchemy engine and session factory for the
    tax rule tables, plus the transactional scope used by the seeding tool.
Architecture position: Kernel > DB.  May import from db/base.py.
    create_tables/drop_tables import models/ lazily to register the tables.

Invariants enforced:
    - PostgreSQL is the production backend: QueuePool with pre-ping and
      READ COMMITTED isolation.
    - SQLite is accepted for tests and local tooling.  An in-memory SQLite
      database uses a StaticPool so every session sees the same connection.
    - session_scope() commits on success and rolls back on any exception.

Failure modes:
    - RuntimeError if the engine or a session is requested before
      init_engine_from_url().
"""

import atexit
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from fiscal_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None

_NOT_INITIALIZED = "Engine not initialized. Call init_engine_from_url() first."


def _engine_options(url: URL, pool_size: int, max_overflow: int) -> dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 5,
) -> Engine:
    """
    Create the engine and session factory.  A second call replaces the first.

    Args:
        database_url: postgresql://... in production, sqlite://... for tests.
        echo: If True, log all SQL statements.
        pool_size: Pooled connections kept open (PostgreSQL only).
        max_overflow: Connections allowed beyond pool_size (PostgreSQL only).
    """
    global _engine, _SessionFactory

    url = make_url(database_url)
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, echo=echo, **_engine_options(url, pool_size, max_overflow))
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info("engine_initialized", extra={
        "dialect": url.get_backend_name(),
        "database": url.render_as_string(hide_password=True),
    })
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """
    Session factory bound to the current engine.

    The database-backed rule store keeps this factory and opens one
    short-lived session per read.
    """
    if _SessionFactory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Transactional scope: commit on success, roll back and re-raise on error.

    Usage:
        with session_scope() as session:
            TaxRuleService.add_rules(session, rules)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create every table registered on Base.metadata (existing ones are kept)."""
    from fiscal_kernel.db.base import Base
    import fiscal_kernel.models  # noqa: F401  -- registers tables on Base.metadata

    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables() -> None:
    """Drop every fiscal table. Tests only."""
    from fiscal_kernel.db.base import Base
    import fiscal_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


@atexit.register
def _dispose_on_exit() -> None:
    if _engine is not None:
        _engine.dispose()
