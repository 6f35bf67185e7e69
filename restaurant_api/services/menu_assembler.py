"""Nested menu assembly.

The menu is fetched level by level, one ``IN (...)`` query per level, and
grouped in memory by parent key:

    roots -> subcategories -> products -> modifiers -> options (+ target product)

Assembly only walks those groupings, so the number of queries is fixed no
matter how many rows each level holds. The reads are not wrapped in a
snapshot; callers that need strict consistency should open a read
transaction around the call.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from sqlalchemy.orm import Session

from restaurant_api.core.errors import NotFoundError
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.services.category_tree import TreeBuilder
from restaurant_api.services.presenters import product_to_dict
from restaurant_api.services.pricing import format_menu_price

logger = logging.getLogger(__name__)
MENU_PREFIX = "[MENU]"


def _group_by(rows: Iterable, key) -> dict[int, list]:
    grouped: dict[int, list] = defaultdict(list)
    for row in rows:
        grouped[key(row)].append(row)
    return grouped


class MenuAssembler:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.tree = TreeBuilder(db)

    # -------------------------
    # batched fetches
    # -------------------------
    def _products_by_category(self, category_ids: list[int]) -> dict[int, list[Product]]:
        if not category_ids:
            return {}
        products = (
            self.db.query(Product)
            .filter(Product.category_id.in_(category_ids))
            .order_by(Product.id.asc())
            .all()
        )
        return _group_by(products, lambda product: product.category_id)

    def _modifiers_by_product(self, product_ids: list[int]) -> dict[int, list[ProductModifier]]:
        if not product_ids:
            return {}
        modifiers = (
            self.db.query(ProductModifier)
            .filter(ProductModifier.product_id.in_(product_ids))
            .order_by(ProductModifier.id.asc())
            .all()
        )
        return _group_by(modifiers, lambda modifier: modifier.product_id)

    def _options_by_modifier(
        self, modifier_ids: list[int]
    ) -> dict[int, list[tuple[ProductModifierOption, Product]]]:
        if not modifier_ids:
            return {}
        rows = (
            self.db.query(ProductModifierOption, Product)
            .join(Product, Product.id == ProductModifierOption.product_id)
            .filter(ProductModifierOption.product_modifier_id.in_(modifier_ids))
            .order_by(ProductModifierOption.id.asc())
            .all()
        )
        return _group_by(rows, lambda row: row[0].product_modifier_id)

    def _load_products(self, category_ids: list[int]) -> list[list[dict]]:
        """Products, modifiers and options for ``category_ids``.

        Returns one payload list per category id, in the order given.
        """
        products_by_category = self._products_by_category(category_ids)
        product_ids = [product.id for products in products_by_category.values() for product in products]

        modifiers_by_product = self._modifiers_by_product(product_ids)
        modifier_ids = [modifier.id for modifiers in modifiers_by_product.values() for modifier in modifiers]

        options_by_modifier = self._options_by_modifier(modifier_ids)

        return [
            [
                self._product_payload(product, modifiers_by_product, options_by_modifier)
                for product in products_by_category.get(category_id, [])
            ]
            for category_id in category_ids
        ]

    # -------------------------
    # payloads
    # -------------------------
    def _product_payload(self, product: Product, modifiers_by_product, options_by_modifier) -> dict:
        payload = product_to_dict(product)
        payload["modifiers"] = [
            {
                "id": modifier.id,
                "name": modifier.name,
                "description": modifier.description,
                "required": bool(modifier.required),
                "min_selections": modifier.min_selections,
                "max_selections": modifier.max_selections,
                "options": [
                    self._option_payload(option, option_product)
                    for option, option_product in options_by_modifier.get(modifier.id, [])
                ],
            }
            for modifier in modifiers_by_product.get(product.id, [])
        ]
        return payload

    @staticmethod
    def _option_payload(option: ProductModifierOption, product: Product) -> dict:
        return {
            "id": option.id,
            "product": {
                "id": product.id,
                "name": product.name,
                "description": product.description,
                "price": format_menu_price(product.price),
            },
            "additional_price": format_menu_price(option.additional_price),
            "default_selected": bool(option.default_selected),
        }

    # -------------------------
    # public API
    # -------------------------
    def assemble_full_menu(self) -> dict:
        roots = self.tree.root_categories()
        children = self.tree.children_of([root.id for root in roots])

        subcategory_ids = [child.id for root in roots for child in children.get(root.id, [])]
        products = dict(zip(subcategory_ids, self._load_products(subcategory_ids)))

        categories = []
        for root in roots:
            categories.append(
                {
                    "id": root.id,
                    "name": root.name,
                    "description": root.description,
                    "subcategories": [
                        {
                            "id": child.id,
                            "name": child.name,
                            "description": child.description,
                            "products": products.get(child.id, []),
                        }
                        for child in children.get(root.id, [])
                    ],
                }
            )

        logger.info(
            "%s full menu assembled roots=%s subcategories=%s",
            MENU_PREFIX,
            len(roots),
            len(subcategory_ids),
        )
        return {"menu": {"categories": categories}}

    def assemble_category_menu(self, category_id: int) -> dict:
        category = self.db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found", details={"id": category_id})

        (products,) = self._load_products([category.id])
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "products": products,
        }
