from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from restaurant_api.core import startup_checks
from restaurant_api.core.database import Base
from restaurant_api.core.startup_checks import ensure_catalog_tables_exist, ensure_migrations_applied


def _memory_engine():
    return create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def test_missing_tables_block_startup():
    engine = _memory_engine()

    with pytest.raises(RuntimeError, match="tables missing"):
        ensure_catalog_tables_exist(engine)

    Base.metadata.create_all(bind=engine)
    ensure_catalog_tables_exist(engine)


def test_migration_check_is_skipped_in_test_env(monkeypatch):
    monkeypatch.setattr(startup_checks, "IS_TEST", True)

    ensure_migrations_applied(engine=_memory_engine(), alembic_config_path=Path("/nonexistent/alembic.ini"))


def test_unmigrated_database_is_refused(monkeypatch):
    monkeypatch.setattr(startup_checks, "IS_TEST", False)
    alembic_ini = Path(__file__).resolve().parents[1] / "alembic.ini"

    with pytest.raises(RuntimeError, match="no migration state"):
        ensure_migrations_applied(engine=_memory_engine(), alembic_config_path=alembic_ini)


def test_sqlite_is_refused_in_production(monkeypatch):
    monkeypatch.setattr(startup_checks, "IS_PROD", True)
    monkeypatch.setattr(startup_checks, "DATABASE_URL", "sqlite:///./catalog.db")

    with pytest.raises(RuntimeError, match="forbidden in production"):
        startup_checks.validate_database_environment()
