import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from restaurant_api.core.config import CORS_ORIGINS, DATABASE_URL
from restaurant_api.core.database import Base, engine
from restaurant_api.core.error_handlers import register_error_handlers
from restaurant_api.core.logging_setup import configure_logging
from restaurant_api.core.startup_checks import (
    ensure_catalog_tables_exist,
    ensure_migrations_applied,
    validate_database_environment,
)
from restaurant_api.middleware.observability import ObservabilityMiddleware
import restaurant_api.models  # garante que os models são importados antes do create_all

from restaurant_api.routers.auth import router as auth_router
from restaurant_api.routers.categories import router as categories_router
from restaurant_api.routers.menus import router as menus_router
from restaurant_api.routers.product_modifiers import router as product_modifiers_router
from restaurant_api.routers.products import router as products_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Restaurant Catalog API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

register_error_handlers(app)


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        # Cria tabelas (dev). Em produção, use migrations.
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        else:
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        ensure_catalog_tables_exist(engine)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise
    logger.info("%s ready database=%s", STARTUP_PREFIX, engine.url.render_as_string(hide_password=True))


# Routers
app.include_router(auth_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(product_modifiers_router)
app.include_router(menus_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
