"""Database configuration and session management.

The engine is created once per process from ``settings.database_url`` and
handed to request handlers through the ``get_session`` dependency, so tests
(or an alternative deployment) can substitute their own engine by
overriding that dependency.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while one
      request is writing attendance, instead of blocking every reader for
      the duration of the write.

    - **Foreign Keys**: SQLite ships with foreign key enforcement disabled.
      It must be on for ``ON DELETE CASCADE`` to remove a member's or a
      service's attendance records.

    - **check_same_thread=False**: FastAPI may hand a session to a different
      worker thread than the one that opened its connection.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from attendance_tracker.core.config import settings

is_sqlite = settings.database_url.startswith("sqlite")

connect_args = {"check_same_thread": False} if is_sqlite else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if is_sqlite:
    sa_event.listen(engine, "connect", set_sqlite_pragma)


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
