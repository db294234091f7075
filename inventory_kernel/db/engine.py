"""
Engine and session management.

One process-wide engine is built from a database URL.  PostgreSQL gets a
pooled engine at READ COMMITTED; quantity updates take an explicit
``SELECT ... FOR UPDATE`` on the asset row.  SQLite (tests and local tools)
shares a single connection, which serializes writers in place of the row
lock that SQLite ignores.

Transactions are not owned here: services open a unit of work on the
session they are given (see ``inventory_kernel.db.unit_of_work``).
"""

import atexit
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from inventory_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _pool_options(
    dialect: str,
    *,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
    pool_timeout: int,
    pool_recycle: int,
) -> dict[str, Any]:
    if dialect == "sqlite":
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": pool_pre_ping,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Build the process engine and session factory, replacing any previous one.

    ``database_url`` is a ``postgresql+psycopg2://`` or ``sqlite://`` URL.
    The pool arguments apply to PostgreSQL only.
    """
    global _engine, _SessionFactory

    dialect = make_url(database_url).get_backend_name()
    options = _pool_options(
        dialect,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
    )

    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(database_url, echo=echo, **options)
    # Services read back what they wrote after commit
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={
            "dialect": dialect,
            "pool_size": options.get("pool_size", 1),
            "echo": echo,
        },
    )
    return _engine


def _not_initialized() -> RuntimeError:
    return RuntimeError("Engine not initialized. Call init_engine_from_url() first.")


def get_engine() -> Engine:
    if _engine is None:
        raise _not_initialized()
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise _not_initialized()
    return _SessionFactory


def get_session() -> Session:
    """A new session from the process factory."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Session closed when the block exits.

    Nothing is committed here.  An exception escaping the block rolls back
    whatever was left pending outside a unit of work and is re-raised.

        with session_scope() as session:
            StockLedgerService(session, clock).create_stock(request)
    """
    session = get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        logger.warning("session_scope_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create the kernel and module tables on the current engine."""
    from inventory_kernel.db.base import Base
    from inventory_modules._orm_registry import import_all_orm_models

    import_all_orm_models()
    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"table_count": len(Base.metadata.tables)})


def drop_tables() -> None:
    from inventory_kernel.db.base import Base

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


def is_postgres() -> bool:
    return _engine is not None and _engine.dialect.name == "postgresql"


atexit.register(reset_engine)
