"""
Database connection and session management
"""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

logger = logging.getLogger(__name__)

_url = settings.database_connection_string

if _url.startswith("sqlite"):
    # SQLite connections are shared across the threadpool FastAPI runs sync handlers in
    engine = create_engine(
        _url,
        connect_args={"check_same_thread": False},
        echo=settings.DEBUG,
    )
else:
    engine = create_engine(
        _url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=3600,  # Recycle connections after 1 hour
        connect_args={"connect_timeout": 10},
        echo=settings.DEBUG,
    )

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def _configure_sqlite_connection(dbapi_connection, connection_record):
    """
    SQLite ignores ON DELETE rules unless foreign keys are switched on per connection,
    and its built-in lower() only folds ASCII ("Électrique" stays as is). Replace it
    with Python's str.lower so case-insensitive lookups behave as on Postgres.
    """
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def init_db(bind=None) -> None:
    """Create all tables for registered models (idempotent)."""
    from app import models  # noqa: F401  registers tables on Base.metadata
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")


def get_db():
    """
    Dependency for FastAPI to get database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
