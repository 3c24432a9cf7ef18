"""Database configuration and session management for SQLite.

This module configures the SQLite database engine for the poll store:
WAL mode so respondents can read summaries while another submission is
being written, and foreign key enforcement so deleting an Event removes
its slots, respondents and responses.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Readers are not blocked while a
      submission replaces a respondent's answers.

    - **Foreign Keys**: Disabled by default in SQLite. The ``ON DELETE
      CASCADE`` clauses on the poll tables only take effect when enabled.

    - **check_same_thread=False**: Required for FastAPI, which may hand a
      session created in one thread to a handler running in another.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from slotpoll.core.config import settings

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    if not settings.database_url.startswith("sqlite"):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    # Import for side effect: registers every table on SQLModel.metadata
    import slotpoll.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
