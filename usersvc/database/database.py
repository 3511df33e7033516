"""Database connection and session management for usersvc.

This module supports both:
- Local SQLite (default for dev/tests)
- PostgreSQL (production) via `DATABASE_URL`
"""

import logging
import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> str:
    """Map libpq-style URLs onto the psycopg (v3) SQLAlchemy dialect.

    Hosting platforms hand out `postgres://` or `postgresql://` URLs; SQLAlchemy
    needs an explicit driver for them.
    """
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return database_url


# Database URL - SQLite by default (local dev)
DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///./usersvc.db"))


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        # Drops stale pooled connections before handing them to a request.
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # Handlers run in FastAPI's threadpool, so connections cross threads.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    # The pool is the only shared resource between requests; keep it bounded.
    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


# Create engine (module-level singleton)
engine = build_engine(DATABASE_URL)


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Set SQLite PRAGMA statements on connection for better concurrency."""
    if _is_sqlite_url(DATABASE_URL):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # WAL allows concurrent reads during writes
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Session:
    """Get database session (dependency for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database schema.

    - SQLite (default dev): use `create_all()`, which skips existing tables.
    - PostgreSQL: prefer Alembic migrations for deterministic schema.
      Enable by setting `RUN_MIGRATIONS=true` in the environment.
    """
    # Register table models on Base.metadata before create_all().
    from usersvc.database import models  # noqa: F401

    run_migrations = os.getenv("RUN_MIGRATIONS", "False").lower() == "true"
    if run_migrations and not _is_sqlite_url(DATABASE_URL):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
        # Ensure Alembic uses the same runtime DB URL.
        alembic_cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
        logger.info("Running Alembic migrations")
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")
