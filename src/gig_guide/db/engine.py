"""
Database engine and session management
PostgreSQL in staging/prod; SQLite is accepted for local development and tests
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import config

logger = logging.getLogger(__name__)


def build_engine(database_url: str):
    """Create an engine with settings appropriate for the backend"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases must share one connection across threads
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(database_url, **kwargs)

        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        logger.info("SQLite engine configured (development/test only)")
        return sqlite_engine

    pg_engine = create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_recycle=config.DB_POOL_RECYCLE,
        pool_timeout=config.DB_POOL_TIMEOUT,
        echo=False,
        connect_args={
            "connect_timeout": 10,
            "application_name": "gig_guide",
            # statement_timeout is in milliseconds
            "options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT}",
        },
    )

    logger.info("PostgreSQL engine configured:")
    logger.info(f"  - Pool size: {config.DB_POOL_SIZE}")
    logger.info(f"  - Max overflow: {config.DB_MAX_OVERFLOW}")
    logger.info(f"  - Pool timeout: {config.DB_POOL_TIMEOUT}s")
    logger.info(f"  - Pool recycle: {config.DB_POOL_RECYCLE}s")
    logger.info(f"  - Statement timeout: {config.DB_STATEMENT_TIMEOUT}ms")
    return pg_engine


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator:
    """
    Get a database session.
    Use as FastAPI dependency: db: Session = Depends(get_db)

    Commits when the request handler returns, rolls back if it raises.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Create all tables directly (SQLite dev/test databases; PostgreSQL uses Alembic)"""
    from .base import Base
    from . import models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("✓ Database tables created")


def test_connection() -> bool:
    """Test database connection"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✓ Database connection test successful")
        return True
    except Exception as e:
        logger.error(f"✗ Database connection test failed: {e}", exc_info=True)
        return False
