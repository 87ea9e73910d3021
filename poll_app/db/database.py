from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from poll_app.core.config import get_settings
from poll_app.core.constants import DatabaseConfig
from poll_app.core.exception import StorageError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Build an engine for ``database_url`` with the settings its backend needs."""
    if database_url.startswith("sqlite"):
        # SQLite specific configuration
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)  # Needed for SQLite with FastAPI
        engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # PostgreSQL or other databases
    return create_engine(
        database_url,
        pool_size=DatabaseConfig.POOL_SIZE,
        max_overflow=DatabaseConfig.MAX_OVERFLOW,
        pool_timeout=DatabaseConfig.POOL_TIMEOUT,
        pool_recycle=DatabaseConfig.POOL_RECYCLE,
        pool_pre_ping=True,
        **kwargs,
    )


engine = create_db_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Define the base class for declarative models
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Closing without a commit rolls back whatever is still open
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Unit of work over ``db``.

    Commits when the block finishes, rolls back on any error. Database
    failures surface as ``StorageError`` so callers never see a half-applied
    change.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {type(e).__name__}: {e}")
        raise StorageError() from e
    except Exception:
        db.rollback()
        raise
