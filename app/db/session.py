"""Session forge."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.common.errors import ConflictError, StorageFailureError, WorkflowError
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger("db.session")


def get_database_url() -> str:
    return settings.get_database_url()


runtime_url = get_database_url()
if not runtime_url:
    raise RuntimeError("DATABASE_URL not configured")


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # check_same_thread off: FastAPI sync endpoints run in a threadpool
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    connect_args = {"sslmode": "require"} if "sslmode=" not in runtime_url else {}
    connect_args = {**connect_args, "connect_timeout": settings.db_connect_timeout}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": 300,
        "connect_args": connect_args,
    }


engine = create_engine(
    runtime_url,
    pool_pre_ping=True,
    echo=settings.debug,
    **_engine_kwargs(),
)

if settings.is_sqlite:
    # SQLite has no row locks; take the write lock when the transaction
    # starts so concurrent writers serialize like SELECT ... FOR UPDATE.
    @event.listens_for(engine, "connect")
    def _sqlite_on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db():
    t0 = time.perf_counter()
    db = SessionLocal()
    acquire_ms = int((time.perf_counter() - t0) * 1000)
    # Lightweight visibility into pool waits
    if acquire_ms > 50:
        logger.warning("db_acquire_ms=%d", acquire_ms)
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction() -> Iterator[Session]:
    """Run a unit of work in one transaction.

    Commits when the block exits normally and rolls back on any exception,
    so a failed precondition halfway through a group write leaves no rows
    touched. Driver errors are translated into tagged workflow errors.
    """
    db = SessionLocal()
    try:
        with db.begin():
            yield db
    except WorkflowError:
        raise
    except IntegrityError as exc:
        logger.warning("transaction.integrity_conflict %s", exc.orig)
        raise ConflictError("The record was changed by a concurrent request, please retry") from exc
    except SQLAlchemyError as exc:
        logger.exception("transaction.failed")
        raise StorageFailureError() from exc
    finally:
        db.close()
