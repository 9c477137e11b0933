"""
Database engine, session factory and unit-of-work helper.

Every public engine operation runs inside unit_of_work(): one transaction,
committed on success and rolled back on any exception. On SQLite a unit of
work is opened with BEGIN IMMEDIATE so concurrent writers are serialized and
check-then-write sequences stay indivisible. Plain reads outside a unit of
work use a deferred BEGIN and never take the write lock.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from questforge.constants import DATABASE_URL

logger = logging.getLogger("questforge.database")

Base = declarative_base()

# Connection execution option read by the SQLite "begin" hook
BEGIN_IMMEDIATE_OPTION = "questforge_begin_immediate"


def create_db_engine(url: str = DATABASE_URL, serialize_writes: bool = True, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    Args:
        url: SQLAlchemy database URL
        serialize_writes: For SQLite, start unit-of-work transactions with BEGIN IMMEDIATE
        **kwargs: Passed through to create_engine

    Returns:
        Configured engine
    """
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args

    engine = create_engine(url, **kwargs)

    if is_sqlite and serialize_writes:
        # Take over transaction control from pysqlite so the BEGIN mode
        # can be chosen per transaction.
        @event.listens_for(engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin(conn):
            if conn.get_execution_options().get(BEGIN_IMMEDIATE_OPTION):
                conn.exec_driver_sql("BEGIN IMMEDIATE")
            else:
                conn.exec_driver_sql("BEGIN")

    return engine


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block as one atomic unit against the store.

    Opens the transaction in write mode when the session has none yet,
    commits when the block finishes, rolls back and re-raises otherwise.
    """
    try:
        if not db.in_transaction():
            db.connection(execution_options={BEGIN_IMMEDIATE_OPTION: True})
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
