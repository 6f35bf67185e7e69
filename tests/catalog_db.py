from types import SimpleNamespace

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restaurant_api.core.database import Base, get_db
from restaurant_api.core.error_handlers import register_error_handlers
from restaurant_api.deps import get_current_user
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.models.user import User
from tests.fixtures_data import ADMIN_USER, MODIFIERS, OPTIONS, PRODUCTS, ROOT_CATEGORIES, SUBCATEGORIES


def build_session() -> Session:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return testing_session_local()


def seed_catalog(db: Session) -> None:
    db.add(User(**ADMIN_USER))
    for row in ROOT_CATEGORIES + SUBCATEGORIES:
        db.add(Category(**row))
    db.flush()
    for row in PRODUCTS:
        db.add(Product(**row))
    db.flush()
    for row in MODIFIERS:
        db.add(ProductModifier(**row))
    db.flush()
    for row in OPTIONS:
        db.add(ProductModifierOption(**row))
    db.commit()


def build_client(db: Session, *routers, authenticated: bool = True) -> TestClient:
    app = FastAPI()
    register_error_handlers(app)
    for router in routers:
        app.include_router(router)

    app.dependency_overrides[get_db] = lambda: db
    if authenticated:
        app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(**ADMIN_USER)
    return TestClient(app)
