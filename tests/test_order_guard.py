from dataclasses import dataclass
from decimal import Decimal

import fakeredis
import pytest

from tiffin.services.checkout_stash import CheckoutStash
from tiffin.services.order_guard import COMPLETED, PROCESSING, OrderGuard, build_guard_key


@dataclass
class Line:
    menu_item_id: str
    name: str
    price: Decimal
    quantity: int


CART = [Line("samosa", "Samosa", Decimal("4.99"), 2), Line("naan", "Butter Naan", Decimal("2.25"), 1)]


@pytest.fixture
def guard():
    return OrderGuard(fakeredis.FakeRedis(decode_responses=True))


def test_key_is_deterministic_for_same_cart():
    assert build_guard_key("alice", 7, CART) == build_guard_key("alice", 7, list(CART))


def test_key_contains_user_cart_and_length():
    key = build_guard_key("alice", 7, CART)

    assert key.startswith("order:alice:7:2:")


def test_key_changes_with_contents_user_and_cart():
    base = build_guard_key("alice", 7, CART)
    more = build_guard_key("alice", 7, [CART[0], Line("naan", "Butter Naan", Decimal("2.25"), 2)])

    assert base != more
    assert base != build_guard_key("bob", 7, CART)
    assert base != build_guard_key("alice", 8, CART)


def test_processing_is_set_only_once(guard):
    key = build_guard_key("alice", 7, CART)

    assert guard.mark_processing(key, ttl=60) is True
    assert guard.mark_processing(key, ttl=60) is False
    assert guard.state(key) == PROCESSING
    assert not guard.is_completed(key)


def test_completed_and_release(guard):
    key = build_guard_key("alice", 7, CART)
    guard.mark_processing(key, ttl=60)
    guard.mark_completed(key, ttl=60)

    assert guard.state(key) == COMPLETED
    assert guard.is_completed(key)

    guard.release(key)
    assert guard.state(key) is None
    assert guard.mark_processing(key, ttl=60) is True


def test_stash_roundtrip_and_delete():
    stash = CheckoutStash(fakeredis.FakeRedis(decode_responses=True))

    assert stash.load("alice") is None

    stash.save("alice", {"first_name": "Asha"}, ttl=60)
    assert stash.load("alice") == {"first_name": "Asha"}
    assert stash.load("bob") is None

    stash.delete("alice")
    assert stash.load("alice") is None
