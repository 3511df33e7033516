"""Database migration runner for production.

Goal:
- Prefer Alembic migrations for deterministic schema management.
- If the users table already exists but Alembic history is out of sync
  (e.g. it was created by `create_all()` at startup), detect that safely and
  `stamp head`.

Run once per deploy: `python -m usersvc.database.migrate_runner`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Tuple

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from usersvc.database.database import DATABASE_URL, _is_sqlite_url, build_engine

logger = logging.getLogger(__name__)


def _alembic_cfg() -> Config:
    cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
    return cfg


def _required_schema_checks() -> List[Tuple[str, str]]:
    """Return (kind, name) checks required to safely stamp head."""
    return [
        ("table", "users"),
        ("column:users", "id"),
        ("column:users", "name"),
        ("column:users", "email"),
    ]


def missing_requirements(engine) -> List[str]:
    """List schema pieces the runtime needs that the database lacks."""
    inspector = inspect(engine)
    tables = set(inspector.get_table_names())
    missing: List[str] = []
    for kind, name in _required_schema_checks():
        if kind == "table":
            if name not in tables:
                missing.append(f"missing table: {name}")
        elif kind.startswith("column:"):
            table = kind.split(":", 1)[1]
            if table not in tables:
                missing.append(f"missing column: {table}.{name}")
                continue
            columns = {c["name"] for c in inspector.get_columns(table)}
            if name not in columns:
                missing.append(f"missing column: {table}.{name}")
        else:
            missing.append(f"unknown check: {kind} {name}")
    return missing


def looks_like_already_applied(exc: Exception) -> bool:
    """True when an upgrade failure reads like the schema already exists."""
    msg = str(exc).lower()
    return any(s in msg for s in ["duplicate", "already exists", "duplicate_table"])


def main() -> int:
    logging.basicConfig(level=logging.INFO)

    if _is_sqlite_url(DATABASE_URL):
        # In dev/test, Alembic isn't required; but running upgrade is harmless when used.
        command.upgrade(_alembic_cfg(), "head")
        return 0

    engine = build_engine(DATABASE_URL)

    try:
        command.upgrade(_alembic_cfg(), "head")
        return 0
    except Exception as e:
        if not looks_like_already_applied(e):
            raise

        # Only stamp head if we can verify the expected schema is present.
        missing = missing_requirements(engine)
        if missing:
            raise RuntimeError(
                "Alembic upgrade failed and schema is not at expected baseline; refusing to stamp head. "
                + "; ".join(missing)
            ) from e

        logger.info("Schema already present; stamping Alembic head")
        command.stamp(_alembic_cfg(), "head")
        return 0


if __name__ == "__main__":
    sys.exit(main())
