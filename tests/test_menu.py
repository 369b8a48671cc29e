from decimal import Decimal

from tiffin.data.seed import seed
from tiffin.domain.constants import MENU_CATEGORY_ORDER

from conftest import auth

NEW_ITEM = {
    "id": "mango-lassi",
    "category": "beverages",
    "name": "Mango Lassi",
    "description": "Sweet yogurt drink",
    "price": "3.50",
}


def test_menu_grouped_in_display_order(client, menu):
    resp = client.get("/menu")

    assert resp.status_code == 200
    body = resp.json()
    assert [c["name"] for c in body] == ["appetizers", "vegetarian main course", "breads"]
    assert body[0]["items"][0]["id"] == "samosa"
    assert Decimal(body[0]["items"][0]["price"]) == Decimal("4.99")


def test_admin_creates_item_in_new_category(client, admin, menu):
    resp = client.post("/menu/items", json=NEW_ITEM, headers=auth("chef-token"))

    assert resp.status_code == 201
    categories = [c["name"] for c in client.get("/menu").json()]
    assert categories[-1] == "beverages"


def test_create_requires_name_description_and_price(client, admin, menu):
    resp = client.post(
        "/menu/items",
        json=dict(NEW_ITEM, description="  ", price=None),
        headers=auth("chef-token"),
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Name, description, and price are required."


def test_create_rejects_duplicate_id(client, admin, menu):
    resp = client.post("/menu/items", json=dict(NEW_ITEM, id="naan"), headers=auth("chef-token"))

    assert resp.status_code == 400


def test_non_admin_cannot_edit_menu(client, admin, menu):
    assert client.post("/menu/items", json=NEW_ITEM, headers=auth()).status_code == 403
    assert client.delete("/menu/items/naan", headers=auth()).status_code == 403


def test_update_in_place(client, admin, menu):
    resp = client.put(
        "/menu/items/naan",
        json={"name": "Garlic Naan", "description": "With garlic butter", "price": "2.75"},
        headers=auth("chef-token"),
    )

    assert resp.status_code == 200
    assert resp.json()["id"] == "naan"
    assert Decimal(resp.json()["price"]) == Decimal("2.75")


def test_rename_moves_item_to_new_id(client, admin, menu):
    resp = client.put(
        "/menu/items/naan",
        json={"name": "Garlic Naan", "description": "With garlic butter", "price": "2.75", "new_id": "garlic-naan"},
        headers=auth("chef-token"),
    )

    assert resp.status_code == 200
    breads = next(c for c in client.get("/menu").json() if c["name"] == "breads")
    assert [i["id"] for i in breads["items"]] == ["garlic-naan"]


def test_update_missing_item(client, admin, menu):
    resp = client.put(
        "/menu/items/ghost",
        json={"name": "x", "description": "y", "price": "1"},
        headers=auth("chef-token"),
    )

    assert resp.status_code == 404


def test_delete_item(client, admin, menu):
    assert client.delete("/menu/items/samosa", headers=auth("chef-token")).status_code == 204
    assert client.delete("/menu/items/samosa", headers=auth("chef-token")).status_code == 404

    appetizers = next(c for c in client.get("/menu").json() if c["name"] == "appetizers")
    assert appetizers["items"] == []


def test_seed_fills_categories_once(db):
    assert seed(db) == len(MENU_CATEGORY_ORDER)
    assert seed(db) == 0
