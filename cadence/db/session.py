"""
Database session management for Cadence.

This module provides:
1. Engine creation from settings.DATABASE_URL
2. Session management with SQLAlchemy
3. Schema initialization

Usage:
    from cadence.db.session import get_db

    # In FastAPI dependency
    def some_endpoint(db: Session = Depends(get_db)):
        # Use db for database operations
        ...
"""

import logging
import threading
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session

from cadence.core.config import settings
from cadence.db.models import Base

# Configure module logger
logger = logging.getLogger(__name__)


def create_db_engine(database_url: str):
    """
    Create an SQLAlchemy engine, enabling foreign keys for SQLite.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Configured engine
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    db_engine = create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
    )

    if is_sqlite:
        @event.listens_for(db_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()

    logger.info(f"Created SQLAlchemy engine for {db_engine.url.render_as_string(hide_password=True)}")
    return db_engine


engine = create_db_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session with proper resource management.

    Returns:
        SQLAlchemy Session for database operations
    """
    thread_id = threading.get_ident()
    logger.debug(f"Creating DB session for thread {thread_id}")

    db = SessionLocal()

    try:
        yield db
    except Exception as e:
        logger.error(f"Error in get_db for thread {thread_id}: {e}")
        raise
    finally:
        db.close()
        logger.debug(f"Closed DB session for thread {thread_id}")


def verify_db_connection(db_engine=None) -> bool:
    """
    Verify that we can connect to the database.

    Returns:
        True if connection succeeds, False otherwise
    """
    db_engine = db_engine or engine
    try:
        with db_engine.connect() as connection:
            result = connection.execute(text("SELECT 1")).scalar()
            logger.info(f"Database connection verified: {result}")
            return True
    except Exception as e:
        logger.error(f"Database connection verification failed: {e}")
        return False


def init_db(reset: bool = False, db_engine=None) -> bool:
    """
    Initialize the database schema.

    Args:
        reset: Whether to reset (drop and recreate) the database
        db_engine: Engine to initialize, defaults to the module engine

    Returns:
        True if initialization succeeds, False otherwise
    """
    db_engine = db_engine or engine
    logger.info("Initializing database schema...")

    if not verify_db_connection(db_engine):
        logger.error("Engine connection test failed before create_all")
        return False

    try:
        if reset:
            logger.info("Dropping all tables for reset...")
            Base.metadata.drop_all(bind=db_engine)

        Base.metadata.create_all(bind=db_engine)
        logger.info(f"Database schema initialized with {len(Base.metadata.tables)} tables")
        return True
    except Exception as e:
        logger.error(f"Database schema initialization failed: {str(e)}")
        logger.exception("Database initialization error details:")
        return False
