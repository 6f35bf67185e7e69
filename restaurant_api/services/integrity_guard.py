from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from restaurant_api.core.errors import ConflictError, ValidationError
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.schemas.catalog import ProductModifierCreate

logger = logging.getLogger(__name__)
INTEGRITY_PREFIX = "[INTEGRITY]"

_MODIFIER_DEFAULTS = ProductModifierCreate.model_fields


def _refuse(reason: str, message: str, **details: Any) -> ConflictError:
    logger.warning("%s refused reason=%s details=%s", INTEGRITY_PREFIX, reason, details)
    return ConflictError(message, reason=reason, details=details)


def _exists(db: Session, model: type, *criteria) -> bool:
    return db.query(model.id).filter(*criteria).first() is not None


class IntegrityGuard:
    """Pre-flight cross-entity checks. Reads only; never writes.

    Each ``check_*`` method returns nothing on success and raises a
    ``ConflictError`` whose ``reason`` names the violated rule. The checks
    are advisory: the store's constraints remain the final word under
    concurrent writes.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    # -------------------------
    # categories
    # -------------------------
    def check_category_delete(self, category: Category) -> None:
        if _exists(self.db, Product, Product.category_id == category.id):
            raise _refuse(
                "category_has_products",
                "Cannot delete category with products",
                category_id=category.id,
            )

    def check_category_parent(self, fields: Mapping[str, Any], current: Optional[Category] = None) -> None:
        parent_id = fields.get("parent_id")
        if parent_id is None:
            return
        if current is not None and parent_id == current.id:
            raise _refuse("invalid_parent", "Category cannot be its own parent", category_id=current.id)
        if not _exists(self.db, Category, Category.id == parent_id):
            raise _refuse("category_not_found", "Parent category not found", parent_id=parent_id)
        if current is not None and current.id in self._ancestor_ids(parent_id):
            raise _refuse(
                "invalid_parent",
                "Category cannot be moved under its own subcategory",
                category_id=current.id,
                parent_id=parent_id,
            )

    def _ancestor_ids(self, category_id: int) -> set[int]:
        # sobe a cadeia de parent_id; para se encontrar um ciclo já existente
        seen: set[int] = set()
        next_id: Optional[int] = category_id
        while next_id is not None and next_id not in seen:
            seen.add(next_id)
            row = self.db.query(Category.parent_id).filter(Category.id == next_id).first()
            next_id = row[0] if row else None
        return seen

    # -------------------------
    # products
    # -------------------------
    def check_product_category(self, fields: Mapping[str, Any]) -> None:
        category_id = fields.get("category_id")
        if category_id is None:
            return
        if not _exists(self.db, Category, Category.id == category_id):
            raise _refuse("category_not_found", "Category not found", category_id=category_id)

    def check_product_delete(self, product: Product) -> None:
        owns_modifiers = _exists(self.db, ProductModifier, ProductModifier.product_id == product.id)
        is_option = _exists(self.db, ProductModifierOption, ProductModifierOption.product_id == product.id)

        if owns_modifiers:
            raise _refuse(
                "product_has_modifiers",
                "Cannot delete product with associated modifiers",
                product_id=product.id,
                is_modifier_option=is_option,
            )
        if is_option:
            raise _refuse(
                "product_is_modifier_option",
                "Cannot delete product that is used as a modifier option",
                product_id=product.id,
            )

    # -------------------------
    # modifiers
    # -------------------------
    def check_modifier(self, fields: Mapping[str, Any], current: Optional[ProductModifier] = None) -> None:
        """Validate a modifier create (``current`` is None) or update.

        The selection range is checked first, so a bad range is reported
        even when other fields are also wrong.
        """
        min_selections = self._effective(fields, current, "min_selections")
        max_selections = self._effective(fields, current, "max_selections")
        if min_selections < 0 or max_selections < min_selections:
            raise _refuse(
                "invalid_selection_range",
                "Invalid selection constraints",
                min_selections=min_selections,
                max_selections=max_selections,
            )

        if current is None:
            missing = [name for name in ("name", "product_id") if fields.get(name) is None]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        product_id = fields.get("product_id")
        if product_id is not None and (current is None or product_id != current.product_id):
            self._require_product(product_id)

    @staticmethod
    def _effective(fields: Mapping[str, Any], current: Optional[ProductModifier], name: str) -> int:
        value = fields.get(name)
        if value is not None:
            return int(value)
        if current is not None:
            return int(getattr(current, name))
        return int(_MODIFIER_DEFAULTS[name].default)

    # -------------------------
    # modifier options
    # -------------------------
    def check_option(
        self,
        modifier: ProductModifier,
        fields: Mapping[str, Any],
        current: Optional[ProductModifierOption] = None,
    ) -> None:
        """Validate an option create (``current`` is None) or update within ``modifier``."""
        if current is not None:
            self.check_option_membership(modifier, current)

        product_id = fields.get("product_id")
        if current is None and product_id is None:
            raise ValidationError("Missing required field: product_id")
        if product_id is None or (current is not None and product_id == current.product_id):
            return

        self._require_product(product_id)

        criteria = [
            ProductModifierOption.product_modifier_id == modifier.id,
            ProductModifierOption.product_id == product_id,
        ]
        if current is not None:
            criteria.append(ProductModifierOption.id != current.id)
        if _exists(self.db, ProductModifierOption, *criteria):
            raise _refuse(
                "duplicate_option",
                "Option for this product already exists in this modifier",
                modifier_id=modifier.id,
                product_id=product_id,
            )

    def check_option_membership(self, modifier: ProductModifier, option: ProductModifierOption) -> None:
        if option.product_modifier_id != modifier.id:
            raise _refuse(
                "option_not_in_modifier",
                "Option does not belong to this modifier",
                option_id=option.id,
                modifier_id=modifier.id,
            )

    def _require_product(self, product_id: int) -> None:
        if not _exists(self.db, Product, Product.id == product_id):
            raise _refuse("product_not_found", "Product not found", product_id=product_id)
