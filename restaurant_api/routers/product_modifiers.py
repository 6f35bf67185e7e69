from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from restaurant_api.core.database import get_db
from restaurant_api.core.pagination import paginate
from restaurant_api.deps import get_catalog_store, get_current_user, get_integrity_guard
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.models.user import User
from restaurant_api.schemas.catalog import ProductModifierOptionPayload, ProductModifierUpdate
from restaurant_api.services.catalog_store import CatalogStore
from restaurant_api.services.integrity_guard import IntegrityGuard
from restaurant_api.services.presenters import modifier_to_dict, option_to_dict, options_to_dicts

router = APIRouter(prefix="/product-modifiers", tags=["product-modifiers"])

logger = logging.getLogger(__name__)


def _product_ref(product: Optional[Product]) -> Optional[dict]:
    if product is None:
        return None
    return {"id": product.id, "name": product.name}


def _options_with_products(db: Session, modifier_id: int):
    return (
        db.query(ProductModifierOption, Product)
        .join(Product, Product.id == ProductModifierOption.product_id)
        .filter(ProductModifierOption.product_modifier_id == modifier_id)
        .order_by(ProductModifierOption.id.asc())
    )


def _modifier_detail(db: Session, store: CatalogStore, modifier: ProductModifier) -> dict:
    product = store.read(Product, modifier.product_id)
    product_payload = _product_ref(product)
    if product_payload is not None:
        category = store.read(Category, product.category_id)
        product_payload["category"] = category.name if category else None

    payload = modifier_to_dict(modifier)
    payload["product"] = product_payload
    payload["options"] = options_to_dicts(_options_with_products(db, modifier.id).all())
    return payload


# =========================
# MODIFIERS
# =========================
@router.get("")
def list_product_modifiers(
    page: Optional[int] = Query(None),
    per_page: Optional[int] = Query(None),
    product_id: Optional[int] = Query(None),
    store: CatalogStore = Depends(get_catalog_store),
    db: Session = Depends(get_db),
):
    filters = {"product_id": product_id} if product_id is not None else None
    result = paginate(store.query(ProductModifier, filters), page, per_page)
    modifiers = result["data"]

    product_ids = {modifier.product_id for modifier in modifiers}
    modifier_ids = [modifier.id for modifier in modifiers]

    products = {}
    counts = {}
    if modifiers:
        products = {
            product.id: product
            for product in db.query(Product).filter(Product.id.in_(product_ids)).all()
        }
        # uma contagem agrupada para a página inteira
        counts = dict(
            db.query(ProductModifierOption.product_modifier_id, func.count(ProductModifierOption.id))
            .filter(ProductModifierOption.product_modifier_id.in_(modifier_ids))
            .group_by(ProductModifierOption.product_modifier_id)
            .all()
        )

    data = []
    for modifier in modifiers:
        payload = modifier_to_dict(modifier)
        payload["product"] = _product_ref(products.get(modifier.product_id))
        payload["options_count"] = counts.get(modifier.id, 0)
        data.append(payload)

    result["data"] = data
    return result


@router.get("/{modifier_id}")
def get_product_modifier(
    modifier_id: int,
    store: CatalogStore = Depends(get_catalog_store),
    db: Session = Depends(get_db),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    return _modifier_detail(db, store, modifier)


@router.post("", status_code=201)
def create_product_modifier(
    payload: ProductModifierUpdate,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
):
    fields = payload.model_dump(exclude_unset=True)
    guard.check_modifier(fields)
    modifier = store.create(ProductModifier, fields)
    return _modifier_detail(db, store, modifier)


@router.put("/{modifier_id}")
def update_product_modifier(
    modifier_id: int,
    payload: ProductModifierUpdate,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    fields = payload.model_dump(exclude_unset=True)
    guard.check_modifier(fields, current=modifier)
    modifier = store.update(ProductModifier, modifier.id, fields)
    return _modifier_detail(db, store, modifier)


@router.delete("/{modifier_id}")
def delete_product_modifier(
    modifier_id: int,
    store: CatalogStore = Depends(get_catalog_store),
    _user: User = Depends(get_current_user),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    # options caem junto, na mesma transação
    store.delete(ProductModifier, modifier.id)
    return {"message": "Product modifier deleted successfully"}


# =========================
# OPTIONS
# =========================
@router.get("/{modifier_id}/options")
def list_modifier_options(
    modifier_id: int,
    page: Optional[int] = Query(None),
    per_page: Optional[int] = Query(None),
    store: CatalogStore = Depends(get_catalog_store),
    db: Session = Depends(get_db),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    result = paginate(_options_with_products(db, modifier.id), page, per_page)
    result["data"] = options_to_dicts(result["data"], include_sellable=True)
    return result


@router.post("/{modifier_id}/options", status_code=201)
def create_modifier_option(
    modifier_id: int,
    payload: ProductModifierOptionPayload,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    # null explícito conta como ausente: vale o default (preço 0, não selecionado)
    fields = payload.model_dump(exclude_none=True)
    guard.check_option(modifier, fields)

    fields["product_modifier_id"] = modifier.id
    option = store.create(ProductModifierOption, fields)
    return option_to_dict(option, store.get_or_404(Product, option.product_id))


@router.put("/{modifier_id}/options/{option_id}")
def update_modifier_option(
    modifier_id: int,
    option_id: int,
    payload: ProductModifierOptionPayload,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    option = store.get_or_404(ProductModifierOption, option_id)
    fields = payload.model_dump(exclude_none=True)
    guard.check_option(modifier, fields, current=option)

    option = store.update(ProductModifierOption, option.id, fields)
    return option_to_dict(option, store.get_or_404(Product, option.product_id))


@router.delete("/{modifier_id}/options/{option_id}")
def delete_modifier_option(
    modifier_id: int,
    option_id: int,
    store: CatalogStore = Depends(get_catalog_store),
    guard: IntegrityGuard = Depends(get_integrity_guard),
    _user: User = Depends(get_current_user),
):
    modifier = store.get_or_404(ProductModifier, modifier_id)
    option = store.get_or_404(ProductModifierOption, option_id)
    guard.check_option_membership(modifier, option)

    store.delete(ProductModifierOption, option_id)
    logger.info("[CATALOG] option removed modifier_id=%s option_id=%s", modifier_id, option_id)
    return {"message": "Option deleted successfully"}
