"""Tests for the Alembic migration and the migration runner's schema checks."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

from usersvc.database import migrate_runner

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def _sqlite_engine(tmp_path, name="migrate.db"):
    url = f"sqlite:///{tmp_path / name}"
    return url, create_engine(url, connect_args={"check_same_thread": False})


def test_missing_requirements_on_empty_database(tmp_path):
    _, engine = _sqlite_engine(tmp_path)

    missing = migrate_runner.missing_requirements(engine)

    assert "missing table: users" in missing
    assert "missing column: users.email" in missing
    engine.dispose()


def test_missing_requirements_reports_missing_column(tmp_path):
    _, engine = _sqlite_engine(tmp_path)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR(255))"))

    assert migrate_runner.missing_requirements(engine) == ["missing column: users.email"]
    engine.dispose()


def test_alembic_upgrade_creates_users_table(tmp_path):
    url, engine = _sqlite_engine(tmp_path)
    cfg = Config(str(ALEMBIC_INI))
    cfg.set_main_option("sqlalchemy.url", url)

    command.upgrade(cfg, "head")

    assert migrate_runner.missing_requirements(engine) == []
    unique_names = {c["name"] for c in inspect(engine).get_unique_constraints("users")}
    assert {"uq_users_name", "uq_users_email"} <= unique_names
    engine.dispose()


def test_looks_like_already_applied():
    assert migrate_runner.looks_like_already_applied(Exception('relation "users" already exists'))
    assert migrate_runner.looks_like_already_applied(Exception("DuplicateTable"))
    assert not migrate_runner.looks_like_already_applied(Exception("connection refused"))
