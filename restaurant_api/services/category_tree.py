from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from sqlalchemy.orm import Session

from restaurant_api.models.category import Category
from restaurant_api.services.presenters import category_to_dict

CATEGORY_ORDER = (Category.sort_order.asc(), Category.name.asc())


def index_children(categories: Iterable[Category]) -> dict[int, list[Category]]:
    children: dict[int, list[Category]] = defaultdict(list)
    for category in categories:
        if category.parent_id is not None:
            children[category.parent_id].append(category)
    return children


class TreeBuilder:
    """Root categories with their direct subcategories (two levels only)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def root_categories(self) -> list[Category]:
        return self.db.query(Category).filter(Category.parent_id.is_(None)).order_by(*CATEGORY_ORDER).all()

    def children_of(self, parent_ids: list[int]) -> dict[int, list[Category]]:
        if not parent_ids:
            return {}
        subcategories = (
            self.db.query(Category)
            .filter(Category.parent_id.in_(parent_ids))
            .order_by(*CATEGORY_ORDER)
            .all()
        )
        return index_children(subcategories)

    def build_tree(self) -> list[dict]:
        roots = self.root_categories()
        children = self.children_of([root.id for root in roots])

        tree = []
        for root in roots:
            node = category_to_dict(root)
            node["subcategories"] = [category_to_dict(child) for child in children.get(root.id, [])]
            tree.append(node)
        return tree
