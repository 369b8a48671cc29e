from datetime import datetime, timedelta, timezone
from decimal import Decimal

import redis
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from tiffin.data.models.cart import CartModel
from tiffin.data.models.order import OrderModel
from tiffin.repos.cart_repo import CartRepo
from tiffin.repos.order_repo import OrderRepo
from tiffin.services.order_guard import OrderGuard, build_guard_key

from conftest import ALICE, CHECKOUT_FORM, auth


def fill_cart(client, *item_ids, token="alice-token"):
    cart = None
    for item_id in item_ids:
        resp = client.post("/cart/items", json={"item_id": item_id}, headers=auth(token))
        assert resp.status_code == 200
        cart = resp.json()
    return cart


def stage(client, token="alice-token", form=CHECKOUT_FORM):
    return client.post("/checkout", json=form, headers=auth(token))


def test_full_checkout_creates_order_and_clears_cart(client, menu, db):
    cart = fill_cart(client, "samosa", "samosa", "paneer-tikka")

    staged = stage(client)
    assert staged.status_code == 200
    assert staged.json()["redirect_to"] == "/confirmed-order"
    assert Decimal(staged.json()["total"]) == Decimal("23.60")

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())
    assert resp.status_code == 201

    body = resp.json()
    order = body["order"]
    assert body["outcome"] == "created"
    assert order["status"] == "Order Placed"
    assert len(order["order_ref"]) == 8 and order["order_ref"].isdigit()
    assert 10_000_000 <= int(order["order_ref"]) <= 99_999_999
    assert Decimal(order["subtotal"]) == Decimal("22.48")
    assert Decimal(order["tax"]) == Decimal("1.12")
    assert Decimal(order["total"]) == Decimal("23.60")
    assert order["user_id"] == ALICE.uid
    assert order["user_email"] == ALICE.email
    assert order["customer_details"]["address"]["line2"] == "Unit 4"
    assert order["customer_details"]["contact"]["email"] == "asha@example.com"
    assert [(i["id"], i["quantity"]) for i in order["items"]] == [("samosa", 2), ("paneer-tikka", 1)]

    # koszyk po zamowieniu jest pusty (nowy)
    fresh = client.get("/cart", headers=auth()).json()
    assert fresh["cart_id"] != cart["cart_id"]
    assert fresh["items"] == []


def test_second_confirm_short_circuits(client, menu, db):
    cart = fill_cart(client, "naan")
    stage(client)

    first = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())
    second = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["outcome"] == "already_completed"
    assert second.json()["redirect_to"] == "/my-orders"
    assert second.json()["order"]["id"] == first.json()["order"]["id"]

    assert db.query(OrderModel).count() == 1


def test_short_circuit_survives_lost_guard_marker(client, menu, db, redis_client):
    cart = fill_cart(client, "naan")
    stage(client)
    client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    redis_client.flushall()

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())
    assert resp.json()["outcome"] == "already_completed"
    assert db.query(OrderModel).count() == 1


def test_empty_cart_cannot_stage(client, menu):
    resp = stage(client)

    assert resp.status_code == 409
    assert resp.json()["detail"]["redirect_to"] == "/menu"


def test_empty_cart_cannot_confirm(client, menu, db):
    cart = client.get("/cart", headers=auth()).json()

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 409
    assert resp.json()["detail"]["redirect_to"] == "/menu"
    assert db.query(OrderModel).count() == 0


def test_confirm_without_stashed_form_goes_back_to_checkout(client, menu, db):
    cart = fill_cart(client, "naan")

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 409
    assert resp.json()["detail"]["redirect_to"] == "/menu-checkout"
    assert db.query(OrderModel).count() == 0


def test_missing_fields_are_reported_together(client, menu):
    fill_cart(client, "naan")
    form = dict(CHECKOUT_FORM, first_name="", city="  ", email="")

    resp = stage(client, form=form)

    assert resp.status_code == 400
    assert set(resp.json()["detail"]["fields"]) == {"first_name", "city", "email"}


def test_address_line2_is_optional(client, menu):
    fill_cart(client, "naan")
    form = dict(CHECKOUT_FORM)
    form.pop("address_line2")

    assert stage(client, form=form).status_code == 200


def test_concurrent_submission_is_rejected(client, menu, db, redis_client):
    cart = fill_cart(client, "naan")
    stage(client)

    items = CartRepo(db).get_cart_items(cart["cart_id"])
    redis_client.set(build_guard_key(ALICE.uid, cart["cart_id"], items), "processing")

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 409
    assert db.query(OrderModel).count() == 0


def test_write_failure_releases_guard_and_allows_retry(client, menu, db, redis_client, monkeypatch):
    cart = fill_cart(client, "samosa")
    stage(client)

    def broken_add(self, order):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(OrderRepo, "add_order", broken_add)

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())
    assert resp.status_code == 502
    assert resp.json()["detail"]["redirect_to"] == "/menu-checkout"
    assert redis_client.keys("order:*") == []

    monkeypatch.undo()

    retry = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())
    assert retry.status_code == 201
    assert db.query(OrderModel).count() == 1


def test_cannot_confirm_someone_elses_cart(client, menu):
    cart = fill_cart(client, "naan")

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth("bob-token"))

    assert resp.status_code == 403


def test_unknown_cart(client, menu):
    resp = client.post("/checkout/confirm", json={"cart_id": 999}, headers=auth())

    assert resp.status_code == 404


def test_requires_authentication(client, menu):
    assert client.get("/cart").status_code == 401
    assert client.get("/cart", headers=auth("forged")).status_code == 401


def guard_key_for(db, cart_id):
    return build_guard_key(ALICE.uid, cart_id, CartRepo(db).get_cart_items(cart_id))


def test_expired_cart_cannot_be_confirmed(client, menu, db):
    cart = fill_cart(client, "naan")
    stage(client)

    stored = db.get(CartModel, cart["cart_id"])
    stored.expires_at = datetime.now(timezone.utc) - timedelta(hours=1)
    db.commit()

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 409
    assert resp.json()["detail"]["redirect_to"] == "/menu"
    assert db.query(OrderModel).count() == 0


def test_stored_order_with_same_key_wins_over_empty_guard(client, menu, db, redis_client):
    cart = fill_cart(client, "naan")
    stage(client)

    key = guard_key_for(db, cart["cart_id"])
    now = datetime.now(timezone.utc)
    db.add(OrderModel(
        order_ref="12345678", idempotency_key=key, cart_id=cart["cart_id"],
        user_id=ALICE.uid, user_email=ALICE.email,
        first_name="Asha", last_name="Patel", address_line1="12 Elm St",
        city="Calgary", zipcode="T2P 1J9", phone="403-555-0199", email="asha@example.com",
        items=[{"id": "naan", "name": "Butter Naan", "price": "2.25", "quantity": 1}],
        subtotal=Decimal("2.25"), tax=Decimal("0.11"), total=Decimal("2.36"),
        status="Order Placed", created_at=now, updated_at=now,
    ))
    db.commit()
    assert redis_client.get(key) is None

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 200
    assert resp.json()["outcome"] == "already_completed"
    assert resp.json()["order"]["order_ref"] == "12345678"
    assert db.query(OrderModel).count() == 1
    assert redis_client.get(key) == "completed"


def test_version_bump_during_confirm_is_a_conflict(client, menu, db, redis_client, monkeypatch):
    cart = fill_cart(client, "samosa")
    stage(client)

    original_add = OrderRepo.add_order

    def add_after_concurrent_edit(self, order):
        # inny request podbija wersje koszyka miedzy odczytem a zapisem
        self.db.execute(
            update(CartModel)
            .where(CartModel.id == order.cart_id)
            .values(version=CartModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        return original_add(self, order)

    monkeypatch.setattr(OrderRepo, "add_order", add_after_concurrent_edit)

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 409
    assert db.query(OrderModel).count() == 0
    assert redis_client.keys("order:*") == []


def test_redis_down_after_commit_still_returns_the_order(client, menu, db, redis_client, monkeypatch):
    cart = fill_cart(client, "naan")
    stage(client)

    def unreachable(self, key, ttl):
        raise redis.ConnectionError("redis down")

    monkeypatch.setattr(OrderGuard, "mark_completed", unreachable)

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 201
    assert resp.json()["outcome"] == "created"
    assert db.query(OrderModel).count() == 1
    assert redis_client.get(f"checkout:{ALICE.uid}") is None

    # FINALIZED koszyk wystarcza, zeby drugi confirm niczego nie zapisal
    monkeypatch.undo()
    again = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())
    assert again.json()["outcome"] == "already_completed"
    assert db.query(OrderModel).count() == 1


def test_redis_down_before_write_sends_user_back_to_checkout(client, menu, db, monkeypatch):
    cart = fill_cart(client, "naan")
    stage(client)

    def unreachable(self, key):
        raise redis.ConnectionError("redis down")

    monkeypatch.setattr(OrderGuard, "state", unreachable)

    resp = client.post("/checkout/confirm", json={"cart_id": cart["cart_id"]}, headers=auth())

    assert resp.status_code == 502
    assert resp.json()["detail"]["redirect_to"] == "/menu-checkout"
    assert db.query(OrderModel).count() == 0
