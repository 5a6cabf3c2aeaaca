"""Engine, session factory and declarative base."""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .core.config import settings

DATABASE_URL = settings.database_url


def is_postgresql() -> bool:
    return DATABASE_URL.startswith("postgresql")


if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _configure_sqlite(dbapi_connection, connection_record):
        # Take transaction control away from pysqlite so SAVEPOINT works;
        # BEGIN is emitted by _begin_sqlite instead.
        dbapi_connection.isolation_level = None
        # Off by default in SQLite; ON DELETE CASCADE depends on it.
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _begin_sqlite(conn):
        conn.exec_driver_sql("BEGIN")
else:
    _connect_args = {}
    if settings.db_statement_timeout_ms > 0:
        _connect_args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"
    engine = create_engine(
        DATABASE_URL,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
        connect_args=_connect_args,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    """Create missing tables for every model."""
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db():
    """Request-scoped session. Anything left uncommitted by a failing request is rolled back."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
