from __future__ import annotations

from typing import Iterable, Optional

from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.models.user import User
from restaurant_api.services.pricing import format_compact_price, format_price_2dp


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def user_to_dict(user: User) -> dict:
    # password_hash nunca sai
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "active": bool(user.active),
        "created_at": _iso(user.created_at),
        "updated_at": _iso(user.updated_at),
    }


def category_to_dict(category: Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "parent_id": category.parent_id,
        "sort_order": category.sort_order,
        "active": bool(category.active),
        "created_at": _iso(category.created_at),
        "updated_at": _iso(category.updated_at),
    }


def product_to_dict(product: Product, category: Optional[Category] = None) -> dict:
    """Standalone product representation.

    ``category`` is only embedded when the product is assigned to one; an
    unassigned product has no ``category`` key at all.
    """
    payload = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": format_compact_price(product.price) if product.price is not None else None,
        "category_id": product.category_id,
        "available": bool(product.available),
        "can_be_sold_separately": bool(product.can_be_sold_separately),
        "image_url": product.image_url,
        "created_at": _iso(product.created_at),
        "updated_at": _iso(product.updated_at),
    }
    if category is not None:
        payload["category"] = {"id": category.id, "name": category.name}
    return payload


def modifier_to_dict(modifier: ProductModifier) -> dict:
    return {
        "id": modifier.id,
        "product_id": modifier.product_id,
        "name": modifier.name,
        "description": modifier.description,
        "required": bool(modifier.required),
        "min_selections": modifier.min_selections,
        "max_selections": modifier.max_selections,
        "created_at": _iso(modifier.created_at),
        "updated_at": _iso(modifier.updated_at),
    }


def option_to_dict(option: ProductModifierOption, product: Product, *, include_sellable: bool = False) -> dict:
    product_payload = {
        "id": product.id,
        "name": product.name,
        "price": format_price_2dp(product.price),
    }
    if include_sellable:
        product_payload["can_be_sold_separately"] = bool(product.can_be_sold_separately)
    return {
        "id": option.id,
        "product_modifier_id": option.product_modifier_id,
        "product": product_payload,
        "additional_price": format_price_2dp(option.additional_price),
        "default_selected": bool(option.default_selected),
    }


def options_to_dicts(pairs: Iterable[tuple[ProductModifierOption, Product]], *, include_sellable: bool = False) -> list[dict]:
    return [option_to_dict(option, product, include_sellable=include_sellable) for option, product in pairs]
