from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from restaurant_api.core.pagination import paginate
from restaurant_api.deps import get_catalog_store, get_current_user, get_integrity_guard, get_tree_builder
from restaurant_api.models.category import Category
from restaurant_api.models.user import User
from restaurant_api.schemas.catalog import CategoryCreate, CategoryUpdate
from restaurant_api.services.catalog_store import CatalogStore
from restaurant_api.services.category_tree import TreeBuilder
from restaurant_api.services.integrity_guard import IntegrityGuard
from restaurant_api.services.presenters import category_to_dict

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
def list_categories(
    page: Optional[int] = Query(None),
    per_page: Optional[int] = Query(None),
    store: CatalogStore = Depends(get_catalog_store),
):
    result = paginate(store.query(Category), page, per_page)
    result["data"] = [category_to_dict(category) for category in result["data"]]
    return result


# /tree antes de /{category_id}
@router.get("/tree")
def category_tree(tree: TreeBuilder = Depends(get_tree_builder)):
    return tree.build_tree()


@router.get("/{category_id}")
def get_category(category_id: int, store: CatalogStore = Depends(get_catalog_store)):
    return category_to_dict(store.get_or_404(Category, category_id))


@router.post("", status_code=201)
def create_category(
    payload: CategoryCreate,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    fields = payload.model_dump(exclude_unset=True)
    guard.check_category_parent(fields)
    return category_to_dict(store.create(Category, fields))


@router.put("/{category_id}")
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    category = store.get_or_404(Category, category_id)
    fields = payload.model_dump(exclude_unset=True)
    guard.check_category_parent(fields, current=category)
    return category_to_dict(store.update(Category, category.id, fields))


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    category = store.get_or_404(Category, category_id)
    guard.check_category_delete(category)
    store.delete(Category, category.id)
    return {"message": "Category deleted successfully"}
