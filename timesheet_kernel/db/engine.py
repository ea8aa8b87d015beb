"""
Module: timesheet_kernel.db.engine
Responsibility: SQLAlchemy engine construction, table creation and the
    transactional scope used by the store facade.
Architecture position: Kernel > DB.  May import from db/base.py and models/.

Invariants enforced:
    - In-memory SQLite engines use a StaticPool so every session of one store
      sees the same database.
    - session_scope() commits on success and rolls back on any exception;
      services themselves never commit (they only flush).

Failure modes:
    - sqlalchemy.exc.ArgumentError on a malformed database URL.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from timesheet_kernel.logging_config import get_logger

logger = get_logger("db.engine")

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def build_engine(
    database_url: str = DEFAULT_DATABASE_URL,
    echo: bool = False,
) -> Engine:
    """
    Create an engine for ``database_url``.

    Postconditions: for in-memory SQLite the engine holds a single shared
        connection (StaticPool); other backends get pre-ping pooling.
    """
    if _is_memory_sqlite(database_url):
        engine = create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=True)

    logger.info(
        "engine_initialized",
        extra={"dialect": engine.dialect.name, "echo": echo},
    )
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create every table known to the ORM models (idempotent)."""
    import timesheet_kernel.models  # noqa: F401  registers the mappers
    from timesheet_kernel.db.base import Base

    Base.metadata.create_all(engine)
    logger.debug("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables(engine: Engine) -> None:
    import timesheet_kernel.models  # noqa: F401
    from timesheet_kernel.db.base import Base

    Base.metadata.drop_all(engine)
    logger.debug("tables_dropped")


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    Provide a transactional scope around a series of operations.

    Postconditions: On normal exit, session is committed and closed.
        On exception, session is rolled back and closed, and the exception
        is re-raised to the caller.
    """
    session = factory()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception:
        session.rollback()
        logger.debug("transaction_rolled_back")
        raise
    finally:
        session.close()
