#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from restaurant_api.core.config import ADMIN_EMAIL, ADMIN_PASSWORD, IS_PROD  # noqa: E402
from restaurant_api.core.database import Base, SessionLocal, engine  # noqa: E402
from restaurant_api.models.category import Category  # noqa: E402
from restaurant_api.models.product import Product  # noqa: E402
from restaurant_api.models.product_modifier import ProductModifier  # noqa: E402
from restaurant_api.models.product_modifier_option import ProductModifierOption  # noqa: E402
from restaurant_api.models.user import User  # noqa: E402
from restaurant_api.services.auth import hash_password  # noqa: E402
from restaurant_api.services.catalog_store import CatalogStore  # noqa: E402

# (nome, pai, sort_order, descrição)
CATEGORIES = [
    ("Beverages", None, 1, "Drinks and refreshments"),
    ("Hot Drinks", "Beverages", 1, None),
    ("Cold Drinks", "Beverages", 2, None),
    ("Food", None, 2, "Main dishes and snacks"),
    ("Appetizers", "Food", 1, None),
    ("Main Courses", "Food", 2, None),
    ("Burgers", "Main Courses", 1, None),
    ("Pizza", "Main Courses", 2, None),
    ("Desserts", None, 3, "Sweet treats"),
]

# (nome, categoria, preço, descrição)
PRODUCTS = [
    ("Coffee", "Hot Drinks", "3.50", "Freshly brewed coffee"),
    ("Tea", "Hot Drinks", "3.00", "Selection of fine teas"),
    ("Soft Drink", "Cold Drinks", "2.50", "Coca-Cola, Pepsi, Sprite"),
    ("Fresh Juice", "Cold Drinks", "4.00", "Orange, Apple, or Mixed Berry"),
    ("Buffalo Wings", "Appetizers", "9.99", "Spicy chicken wings with blue cheese dip"),
    ("Loaded Nachos", "Appetizers", "8.50", "Tortilla chips with cheese, jalapeños, and salsa"),
    ("Classic Burger", "Burgers", "12.99", "Beef patty with lettuce, tomato, and pickle"),
    ("Cheeseburger", "Burgers", "14.99", "Classic burger with melted cheese"),
    ("Margherita Pizza", "Pizza", "16.99", "Fresh mozzarella, tomato sauce, and basil"),
    ("Pepperoni Pizza", "Pizza", "18.99", "Classic pepperoni with mozzarella cheese"),
    ("Ice Cream", "Desserts", "5.99", "Vanilla, chocolate, or strawberry"),
    ("Cheesecake", "Desserts", "7.99", "New York style cheesecake with berry sauce"),
]

# produtos que só existem como opção de modificador
TOPPINGS = [
    ("Extra Cheese", "1.50"),
    ("Bacon", "2.00"),
    ("Mushrooms", "1.00"),
    ("Onions", "0.50"),
    ("Pepperoni", "2.50"),
    ("Italian Sausage", "2.50"),
    ('Small (10")', "0.00"),
    ('Medium (12")', "3.00"),
    ('Large (14")', "6.00"),
]

BURGER_TOPPINGS = ["Extra Cheese", "Bacon", "Mushrooms", "Onions"]
PIZZA_SIZES = ['Small (10")', 'Medium (12")', 'Large (14")']

# (produto, nome, descrição, required, min, max, opções, opção padrão)
MODIFIERS = [
    ("Classic Burger", "Burger Toppings", "Add extra toppings to your burger", False, 0, 5, BURGER_TOPPINGS, None),
    ("Cheeseburger", "Burger Toppings", "Add extra toppings to your cheeseburger", False, 0, 5, BURGER_TOPPINGS, None),
    ("Margherita Pizza", "Pizza Size", "Choose your pizza size", True, 1, 1, PIZZA_SIZES, 'Small (10")'),
    (
        "Margherita Pizza",
        "Extra Toppings",
        "Add extra toppings to your pizza",
        False,
        0,
        8,
        ["Pepperoni", "Italian Sausage", "Mushrooms", "Onions", "Extra Cheese"],
        None,
    ),
    ("Pepperoni Pizza", "Pizza Size", "Choose your pizza size", True, 1, 1, PIZZA_SIZES, 'Small (10")'),
    (
        "Pepperoni Pizza",
        "Extra Toppings",
        "Add extra toppings to your pizza",
        False,
        0,
        8,
        ["Italian Sausage", "Mushrooms", "Onions", "Extra Cheese"],
        None,
    ),
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Popula o catálogo com dados de exemplo.")
    parser.add_argument("--email", default=ADMIN_EMAIL, help="Email do admin")
    parser.add_argument("--password", default=ADMIN_PASSWORD, help="Senha do admin")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Executa create_all antes de popular (apenas DEV)",
    )
    return parser.parse_args()


def seed(store: CatalogStore, *, admin_email: str, admin_password: str) -> dict:
    admin = store.create(
        User,
        {
            "email": admin_email,
            "password_hash": hash_password(admin_password),
            "name": "Restaurant Admin",
        },
    )

    categories: dict[str, Category] = {}
    for name, parent, sort_order, description in CATEGORIES:
        categories[name] = store.create(
            Category,
            {
                "name": name,
                "description": description,
                "parent_id": categories[parent].id if parent else None,
                "sort_order": sort_order,
            },
        )

    products: dict[str, Product] = {}
    for name, category, price, description in PRODUCTS:
        products[name] = store.create(
            Product,
            {
                "name": name,
                "description": description,
                "price": Decimal(price),
                "category_id": categories[category].id,
            },
        )
    for name, price in TOPPINGS:
        products[name] = store.create(
            Product,
            {"name": name, "price": Decimal(price), "can_be_sold_separately": False},
        )

    option_count = 0
    for product, name, description, required, min_sel, max_sel, options, default in MODIFIERS:
        modifier = store.create(
            ProductModifier,
            {
                "product_id": products[product].id,
                "name": name,
                "description": description,
                "required": required,
                "min_selections": min_sel,
                "max_selections": max_sel,
            },
        )
        for option_name in options:
            store.create(
                ProductModifierOption,
                {
                    "product_modifier_id": modifier.id,
                    "product_id": products[option_name].id,
                    "additional_price": products[option_name].price,
                    "default_selected": option_name == default,
                },
            )
            option_count += 1

    return {
        "admin": admin.email,
        "categories": len(categories),
        "products": len(products),
        "modifiers": len(MODIFIERS),
        "options": option_count,
    }


def main() -> int:
    args = parse_args()

    if args.create_tables:
        if IS_PROD:
            print("create_all desabilitado em produção. Use alembic upgrade head.")
            return 1
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        summary = seed(CatalogStore(db), admin_email=args.email, admin_password=args.password)
    finally:
        db.close()

    print(
        "Seed ok: "
        f"{summary['categories']} categories, {summary['products']} products, "
        f"{summary['modifiers']} modifiers, {summary['options']} options"
    )
    print(f"Admin: {summary['admin']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
