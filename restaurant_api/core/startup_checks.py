from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from restaurant_api.core.config import DATABASE_URL, IS_PROD, IS_TEST

logger = logging.getLogger(__name__)
MIGRATIONS_PREFIX = "[MIGRATIONS]"

CATALOG_TABLES = frozenset(
    {
        "users",
        "categories",
        "products",
        "product_modifiers",
        "product_modifier_options",
    }
)


def validate_database_environment() -> None:
    if IS_PROD and DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def ensure_catalog_tables_exist(engine: Engine) -> None:
    missing = sorted(CATALOG_TABLES - set(inspect(engine).get_table_names()))
    if missing:
        logger.error("%s catalog tables missing=%s", MIGRATIONS_PREFIX, ",".join(missing))
        raise RuntimeError("tables missing / migrations not applied")


def _expected_heads(alembic_config_path: Path) -> set[str]:
    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")
    return set(ScriptDirectory.from_config(Config(str(alembic_config_path))).get_heads())


def _current_heads(engine: Engine) -> set[str]:
    with engine.connect() as connection:
        if not inspect(connection).has_table("alembic_version"):
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise RuntimeError("Database has no migration state")
        rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()
    return {row[0] for row in rows if row[0]}


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path) -> None:
    """Refuse to start when the database is not at the alembic head."""
    if IS_TEST:
        logger.info("%s skipped migration check in test environment", MIGRATIONS_PREFIX)
        return

    expected = _expected_heads(alembic_config_path)
    current = _current_heads(engine)
    if current != expected:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current),
            sorted(expected),
        )
        raise RuntimeError("Pending migrations detected")

    logger.info("%s migration state verified heads=%s", MIGRATIONS_PREFIX, sorted(current))
