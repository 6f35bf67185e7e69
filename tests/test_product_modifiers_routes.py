from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.routers.product_modifiers import router as product_modifiers_router
from tests.catalog_db import build_client, build_session, seed_catalog


def _build_client():
    db = build_session()
    seed_catalog(db)
    return build_client(db, product_modifiers_router), db


def _add_second_modifier(db) -> None:
    db.add(ProductModifier(id=51, product_id=101, name="Sauces", min_selections=0, max_selections=2))
    db.commit()


# =========================
# MODIFIERS
# =========================
def test_list_modifiers_embeds_product_and_options_count():
    client, db = _build_client()
    _add_second_modifier(db)

    response = client.get("/product-modifiers")

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 2
    toppings, sauces = body["data"]
    assert toppings["product"] == {"id": 100, "name": "Classic Burger"}
    assert toppings["options_count"] == 2
    assert sauces["options_count"] == 0


def test_list_modifiers_filtered_by_product():
    client, db = _build_client()
    _add_second_modifier(db)

    response = client.get("/product-modifiers", params={"product_id": 101})

    assert [modifier["name"] for modifier in response.json()["data"]] == ["Sauces"]


def test_get_modifier_detail_uses_two_decimal_prices():
    client, _db = _build_client()

    response = client.get("/product-modifiers/50")

    assert response.status_code == 200
    body = response.json()
    assert body["product"] == {"id": 100, "name": "Classic Burger", "category": "Burgers"}
    cheese, bacon = body["options"]
    assert cheese["product"] == {"id": 200, "name": "Cheese", "price": "1.50"}
    assert cheese["additional_price"] == "1.50"
    assert bacon["additional_price"] == "2.00"
    assert bacon["default_selected"] is True


def test_create_modifier():
    client, _db = _build_client()

    response = client.post(
        "/product-modifiers",
        json={"name": "Sauces", "product_id": 101, "required": True, "min_selections": 1, "max_selections": 2},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["product_id"] == 101
    assert body["required"] is True
    assert body["options"] == []
    assert body["product"]["name"] == "Cheeseburger"


def test_create_modifier_refusals():
    client, _db = _build_client()

    missing = client.post("/product-modifiers", json={"name": "Sauces"})
    unknown_product = client.post("/product-modifiers", json={"name": "Sauces", "product_id": 999})
    bad_range = client.post(
        "/product-modifiers",
        json={"name": "Sauces", "product_id": 101, "min_selections": 3, "max_selections": 1},
    )

    assert missing.status_code == 422
    assert missing.json()["error"] == "Missing required fields: product_id"
    assert unknown_product.status_code == 422
    assert unknown_product.json()["reason"] == "product_not_found"
    assert bad_range.status_code == 422
    assert bad_range.json() == {"error": "Invalid selection constraints", "reason": "invalid_selection_range"}


def test_create_modifier_reports_bad_range_even_without_name():
    client, _db = _build_client()

    response = client.post("/product-modifiers", json={"product_id": 101, "min_selections": 5, "max_selections": 3})

    assert response.status_code == 422
    assert response.json()["reason"] == "invalid_selection_range"


def test_update_modifier_checks_range_against_stored_values():
    client, _db = _build_client()

    bad = client.put("/product-modifiers/50", json={"min_selections": 5})
    good = client.put("/product-modifiers/50", json={"name": "Extras", "min_selections": 1})

    assert bad.status_code == 422
    assert bad.json()["reason"] == "invalid_selection_range"
    assert good.status_code == 200
    assert good.json()["name"] == "Extras"
    assert good.json()["min_selections"] == 1
    assert good.json()["max_selections"] == 3


def test_delete_modifier_removes_options():
    client, db = _build_client()

    response = client.delete("/product-modifiers/50")

    assert response.status_code == 200
    assert response.json() == {"message": "Product modifier deleted successfully"}
    assert db.query(ProductModifierOption).count() == 0
    assert client.get("/product-modifiers/50").status_code == 404


# =========================
# OPTIONS
# =========================
def test_list_options_includes_sellable_flag():
    client, _db = _build_client()

    response = client.get("/product-modifiers/50/options")

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 2
    assert body["data"][0]["product"] == {
        "id": 200,
        "name": "Cheese",
        "price": "1.50",
        "can_be_sold_separately": False,
    }


def test_list_options_for_missing_modifier_returns_404():
    client, _db = _build_client()

    response = client.get("/product-modifiers/999/options")

    assert response.status_code == 404
    assert response.json()["error"] == "Product modifier not found"


def test_create_option():
    client, _db = _build_client()

    response = client.post("/product-modifiers/50/options", json={"product_id": 102, "additional_price": 0.5})

    assert response.status_code == 201
    body = response.json()
    assert body["product_modifier_id"] == 50
    assert body["product"] == {"id": 102, "name": "Soft Drink", "price": "2.50"}
    assert body["additional_price"] == "0.50"
    assert body["default_selected"] is False


def test_create_option_with_null_fields_uses_defaults():
    client, _db = _build_client()

    response = client.post(
        "/product-modifiers/50/options",
        json={"product_id": 102, "additional_price": None, "default_selected": None},
    )

    assert response.status_code == 201
    assert response.json()["additional_price"] == "0.00"
    assert response.json()["default_selected"] is False


def test_create_option_refusals():
    client, _db = _build_client()

    duplicate = client.post("/product-modifiers/50/options", json={"product_id": 200})
    unknown = client.post("/product-modifiers/50/options", json={"product_id": 999})
    missing = client.post("/product-modifiers/50/options", json={"additional_price": 1})

    assert duplicate.status_code == 422
    assert duplicate.json() == {
        "error": "Option for this product already exists in this modifier",
        "reason": "duplicate_option",
    }
    assert unknown.status_code == 422
    assert unknown.json()["reason"] == "product_not_found"
    assert missing.status_code == 422
    assert missing.json()["error"] == "Missing required field: product_id"


def test_update_option():
    client, _db = _build_client()

    response = client.put("/product-modifiers/50/options/500", json={"additional_price": 2, "default_selected": True})

    assert response.status_code == 200
    assert response.json()["additional_price"] == "2.00"
    assert response.json()["default_selected"] is True


def test_update_option_through_wrong_modifier_is_refused():
    client, db = _build_client()
    _add_second_modifier(db)

    response = client.put("/product-modifiers/51/options/500", json={"additional_price": 2})

    assert response.status_code == 422
    assert response.json()["reason"] == "option_not_in_modifier"


def test_delete_option():
    client, db = _build_client()

    response = client.delete("/product-modifiers/50/options/501")

    assert response.status_code == 200
    assert response.json() == {"message": "Option deleted successfully"}
    assert db.get(ProductModifierOption, 501) is None
    assert db.get(ProductModifierOption, 500) is not None
