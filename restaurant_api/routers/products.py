from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from restaurant_api.core.pagination import paginate
from restaurant_api.deps import get_catalog_store, get_current_user, get_integrity_guard
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.user import User
from restaurant_api.schemas.catalog import ProductCreate, ProductUpdate
from restaurant_api.services.catalog_store import CatalogStore
from restaurant_api.services.integrity_guard import IntegrityGuard
from restaurant_api.services.presenters import product_to_dict

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(
    page: Optional[int] = Query(None),
    per_page: Optional[int] = Query(None),
    available: Optional[bool] = Query(None),
    category_id: Optional[int] = Query(None),
    store: CatalogStore = Depends(get_catalog_store),
):
    filters = {}
    if available is not None:
        filters["available"] = available
    if category_id is not None:
        filters["category_id"] = category_id

    result = paginate(store.query(Product, filters), page, per_page)
    result["data"] = [product_to_dict(product) for product in result["data"]]
    return result


@router.get("/{product_id}")
def get_product(product_id: int, store: CatalogStore = Depends(get_catalog_store)):
    product = store.get_or_404(Product, product_id)
    return product_to_dict(product, store.read(Category, product.category_id))


@router.post("", status_code=201)
def create_product(
    payload: ProductCreate,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    fields = payload.model_dump(exclude_unset=True)
    guard.check_product_category(fields)
    return product_to_dict(store.create(Product, fields))


@router.put("/{product_id}")
def update_product(
    product_id: int,
    payload: ProductUpdate,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    product = store.get_or_404(Product, product_id)
    fields = payload.model_dump(exclude_unset=True)
    guard.check_product_category(fields)
    return product_to_dict(store.update(Product, product.id, fields))


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    product = store.get_or_404(Product, product_id)
    guard.check_product_delete(product)
    store.delete(Product, product.id)
    return {"message": "Product deleted successfully"}
