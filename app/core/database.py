"""Database configuration and session management.

SQLite is the default store. Registration reads attendee counts and then
inserts, so the engine relies on the database to serialize writers:

    - **BEGIN IMMEDIATE**: pysqlite defers BEGIN until the first write, which
      would leave the capacity count outside the transaction. The driver's
      own transaction handling is switched off and every transaction starts
      with BEGIN IMMEDIATE, taking the write lock before the first read.
      Two registrations for the last spot are therefore run one after the
      other.

    - **WAL (Write-Ahead Logging)**: reads outside a transaction keep working
      while a registration holds the write lock.

    - **Foreign Keys**: disabled by default in SQLite. Enabled so attendee,
      team and contact rows always reference an existing event.

    - **check_same_thread=False**: FastAPI may hand a session to a different
      worker thread than the one that opened the connection.

On other backends (PostgreSQL) the engine takes a row lock on the event with
``SELECT ... FOR UPDATE`` instead; see ``app.registration.engine``.
"""

from sqlalchemy import Engine
from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def configure_sqlite(engine: Engine) -> None:
    """Install the SQLite connection and transaction listeners on ``engine``."""

    @sa_event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Configure SQLite pragmas on each new connection.

        These settings are connection-level, not database-level, so they must
        be set each time a new connection is established from the pool.
        """
        # Let the "begin" listener emit BEGIN instead of pysqlite
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @sa_event.listens_for(engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


connect_args = {"check_same_thread": False} if is_sqlite(settings.database_url) else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)

if is_sqlite(settings.database_url):
    configure_sqlite(engine)


def create_db_and_tables():
    """Create all database tables."""
    # Register every table on the metadata before create_all
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
