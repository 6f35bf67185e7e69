from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.routers.categories import router as categories_router
from tests.catalog_db import build_client, build_session, seed_catalog


def _build_client(authenticated: bool = True):
    db = build_session()
    seed_catalog(db)
    return build_client(db, categories_router, authenticated=authenticated), db


def test_list_categories_is_paginated_by_id():
    client, _db = _build_client()

    response = client.get("/categories", params={"page": 2, "per_page": 2})

    assert response.status_code == 200
    body = response.json()
    assert [category["id"] for category in body["data"]] == [10, 11]
    assert body["pagination"] == {
        "page": 2,
        "per_page": 2,
        "total": 5,
        "total_pages": 3,
        "has_next_page": True,
        "has_prev_page": True,
    }


def test_list_categories_clamps_per_page():
    client, _db = _build_client()

    response = client.get("/categories", params={"per_page": 1000, "page": 0})

    assert response.status_code == 200
    assert response.json()["pagination"]["per_page"] == 100
    assert response.json()["pagination"]["page"] == 1


def test_category_tree_route():
    client, _db = _build_client()

    response = client.get("/categories/tree")

    assert response.status_code == 200
    tree = response.json()
    assert [root["name"] for root in tree] == ["Beverages", "Food"]
    assert [child["name"] for child in tree[1]["subcategories"]] == ["Appetizers", "Burgers"]


def test_get_missing_category_returns_404():
    client, _db = _build_client()

    response = client.get("/categories/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Category not found", "reason": "not_found"}


def test_create_subcategory():
    client, _db = _build_client()

    response = client.post("/categories", json={"name": "Pizza", "parent_id": 1, "sort_order": 2})

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Pizza"
    assert body["parent_id"] == 1
    assert body["active"] is True
    assert body["created_at"]


def test_create_category_validation_errors():
    client, _db = _build_client()

    missing_name = client.post("/categories", json={"description": "no name"})
    missing_parent = client.post("/categories", json={"name": "Orphan", "parent_id": 999})

    assert missing_name.status_code == 422
    assert missing_name.json()["reason"] == "validation_error"
    assert "name" in missing_name.json()["error"]
    assert missing_parent.status_code == 422
    assert missing_parent.json()["reason"] == "category_not_found"


def test_malformed_json_returns_400():
    client, _db = _build_client()

    response = client.post(
        "/categories",
        content='{"name": "Broken"',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["reason"] == "parse_error"


def test_update_category():
    client, _db = _build_client()

    response = client.put("/categories/10", json={"name": "Smash Burgers", "sort_order": 5})

    assert response.status_code == 200
    assert response.json()["name"] == "Smash Burgers"
    assert response.json()["sort_order"] == 5
    assert response.json()["parent_id"] == 1


def test_update_category_cannot_be_its_own_parent():
    client, _db = _build_client()

    response = client.put("/categories/10", json={"parent_id": 10})

    assert response.status_code == 422
    assert response.json()["reason"] == "invalid_parent"


def test_update_category_cannot_move_under_its_subcategory():
    client, db = _build_client()

    response = client.put("/categories/1", json={"parent_id": 10})

    assert response.status_code == 422
    assert response.json() == {
        "error": "Category cannot be moved under its own subcategory",
        "reason": "invalid_parent",
    }
    assert db.get(Category, 1).parent_id is None
    assert [root["name"] for root in client.get("/categories/tree").json()] == ["Beverages", "Food"]


def test_delete_category_with_products_is_refused():
    client, db = _build_client()

    response = client.delete("/categories/10")

    assert response.status_code == 422
    assert response.json() == {"error": "Cannot delete category with products", "reason": "category_has_products"}
    assert db.get(Category, 10) is not None


def test_delete_empty_category():
    client, db = _build_client()

    response = client.delete("/categories/11")

    assert response.status_code == 200
    assert response.json() == {"message": "Category deleted successfully"}
    assert db.get(Category, 11) is None


def test_delete_root_cascades_to_subcategories_and_unassigns_their_products():
    client, db = _build_client()

    response = client.delete("/categories/2")

    assert response.status_code == 200
    assert db.get(Category, 12) is None
    assert db.get(Product, 102).category_id is None


def test_writes_require_a_token():
    client, _db = _build_client(authenticated=False)

    response = client.post("/categories", json={"name": "Pizza"})

    assert response.status_code == 401
    assert response.json() == {"error": "Missing authorization token", "reason": "missing_token"}
    assert client.get("/categories").status_code == 200
