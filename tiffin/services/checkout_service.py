# tiffin/services/checkout_service.py
import random
from datetime import datetime, timezone
from typing import Dict, Any

import redis
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tiffin.data.models.order import OrderModel
from tiffin.domain.constants import ORDER_REF_MAX, ORDER_REF_MIN, OrderStatus
from tiffin.domain.errors import (
    CheckoutAborted,
    ConcurrencyConflict,
    DuplicateSubmission,
    NotFoundError,
    OrderWriteError,
    ValidationError,
)
from tiffin.domain.pricing import calculate_totals
from tiffin.repos.cart_repo import CartRepo
from tiffin.repos.order_repo import OrderRepo
from tiffin.services.cart_service import CartService, as_utc
from tiffin.services.checkout_stash import CheckoutStash
from tiffin.services.identity_client import CurrentUser
from tiffin.services.notification_service import NotificationService
from tiffin.services.order_guard import OrderGuard, build_guard_key
from tiffin.services.order_service import serialize_order
from tiffin.utils.settings import CHECKOUT_TTL_SECONDS, ORDER_GUARD_TTL_SECONDS
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_PATH = "/menu-checkout"
MENU_PATH = "/menu"
MY_ORDERS_PATH = "/my-orders"
CONFIRMED_PATH = "/confirmed-order"

REQUIRED_CHECKOUT_FIELDS = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "address_line1": "Street address is required",
    "city": "City is required",
    "zipcode": "Postal code is required",
    "phone": "Phone number is required",
    "email": "Email address is required",
}


def validate_checkout_form(form: Dict[str, Any]) -> Dict[str, str]:
    return {
        field: message
        for field, message in REQUIRED_CHECKOUT_FIELDS.items()
        if not str(form.get(field) or "").strip()
    }


def generate_order_ref() -> str:
    # referencja dla klienta, nie klucz - kolizje mozliwe
    return str(random.randint(ORDER_REF_MIN, ORDER_REF_MAX))


class CheckoutService:
    """
    Checkout w dwoch krokach:
    1. stage - walidacja formularza i odlozenie go w Redis (TTL)
    2. confirm - finalizacja: guard, zapis zamowienia, finalizacja koszyka
    """

    def __init__(
        self,
        db: Session,
        guard: OrderGuard,
        stash: CheckoutStash,
        notification_service: NotificationService | None = None,
    ):
        self.cart_service = CartService(db)
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)
        self.guard = guard
        self.stash = stash
        self.notification_service = notification_service or NotificationService()

    def stage(self, user: CurrentUser, form: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_checkout_form(form)
        if errors:
            raise ValidationError("Please fill in all required fields", errors)

        cart = self.cart_service.active_cart(user.uid)
        items = self.cart_repo.get_cart_items(cart.id)

        if not items:
            raise CheckoutAborted("Your cart is empty", redirect_to=MENU_PATH)

        self.stash.save(user.uid, form, ttl=CHECKOUT_TTL_SECONDS)
        logger.info(f"Checkout form stashed for user {user.uid}, cart {cart.id}")

        totals = calculate_totals(items)
        return {
            "cart_id": cart.id,
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "total": totals.total,
            "redirect_to": CONFIRMED_PATH,
        }

    def confirm(self, user: CurrentUser, cart_id: int) -> Dict[str, Any]:
        """
        Use Case: finalizacja zamowienia z koszyka.

        1. koszyk istnieje i nalezy do usera
        2. guard key z koszyka - jesli completed, nic nie zapisujemy
        3. koszyk aktywny i niepusty, formularz w stashu
        4. processing -> zapis zamowienia + FINALIZED koszyka -> completed
        5. przy bledzie zapisu guard zwalniany, klient wraca do checkoutu
        """
        cart = self.cart_repo.get_cart(cart_id)

        if not cart:
            raise NotFoundError("Cart not found")

        if cart.user_id != user.uid:
            raise PermissionError("Cart belongs to another user")

        items = self.cart_repo.get_cart_items(cart.id)
        key = build_guard_key(user.uid, cart.id, items)
        now = datetime.now(timezone.utc)

        try:
            if cart.status == "FINALIZED" or self.guard.is_completed(key):
                logger.info(f"Checkout {key} already completed, skipping write")
                return self._already_completed(key)

            if cart.status != "ACTIVE" or not items:
                raise CheckoutAborted("Your cart is empty", redirect_to=MENU_PATH)

            #wygasly koszyk jest porzucony, nawet zanim task go oznaczy
            if as_utc(cart.expires_at) < now:
                raise CheckoutAborted("Your cart has expired", redirect_to=MENU_PATH)

            form = self.stash.load(user.uid)
            if not form:
                raise CheckoutAborted("Checkout details missing", redirect_to=CHECKOUT_PATH)

            if not self.guard.mark_processing(key, ttl=ORDER_GUARD_TTL_SECONDS):
                raise DuplicateSubmission("This order is already being processed")

        except redis.RedisError as e:
            # przed zapisem, nic nie zostalo utworzone
            logger.error(f"Redis unavailable during checkout of cart {cart_id}: {e}")
            raise OrderWriteError("Checkout temporarily unavailable, please try again") from e

        totals = calculate_totals(items)

        order = OrderModel(
            order_ref=generate_order_ref(),
            idempotency_key=key,
            cart_id=cart.id,
            user_id=user.uid,
            user_email=user.email,
            first_name=form["first_name"],
            last_name=form["last_name"],
            address_line1=form["address_line1"],
            address_line2=form.get("address_line2") or None,
            city=form["city"],
            zipcode=form["zipcode"],
            phone=form["phone"],
            email=form["email"],
            items=[
                {
                    "id": i.menu_item_id,
                    "name": i.name,
                    "price": str(i.price),
                    "quantity": i.quantity,
                }
                for i in items
            ],
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            status=OrderStatus.ORDER_PLACED.value,
            created_at=now,
            updated_at=now,
        )

        try:
            self.order_repo.add_order(order)

            # zamowienie i FINALIZED koszyka w jednym commicie
            rowcount = self.cart_repo.update_cart_version(
                cart_id=cart.id,
                old_version=cart.version,
                new_data={"status": "FINALIZED", "version": cart.version + 1},
            )
            if rowcount == 0:
                raise ConcurrencyConflict("Cart changed during checkout, please retry")

            self.cart_repo.commit()

        except IntegrityError:
            # ktos inny zapisal zamowienie z tym samym kluczem
            self.cart_repo.rollback()
            logger.warning(f"Order with key {key} already stored")
            self._mark_completed(key)
            return self._already_completed(key)

        except ConcurrencyConflict:
            self.cart_repo.rollback()
            self._release(key)
            raise

        except SQLAlchemyError as e:
            self.cart_repo.rollback()
            logger.error(f"Order creation failed for cart {cart_id}: {e}")
            self._release(key)
            raise OrderWriteError("Order creation failed, please try again") from e

        # zamowienie jest juz w bazie, Redis tylko sprzata
        self._mark_completed(key)
        try:
            self.stash.delete(user.uid)
        except redis.RedisError as e:
            logger.warning(f"Failed to drop checkout stash for user {user.uid}: {e}")

        logger.info(f"Order {order.id} (#{order.order_ref}) created from cart {cart.id}")

        try:
            self.notification_service.send_order_notification(user.uid, order.order_ref)
        except Exception as e:
            logger.warning(f"Failed to queue notification for order {order.id}: {e}")

        return {
            "outcome": "created",
            "order": serialize_order(order),
            "redirect_to": None,
        }

    def _mark_completed(self, key: str) -> None:
        # po commicie FINALIZED koszyka i unique na idempotency_key i tak blokuja duplikat
        try:
            self.guard.mark_completed(key, ttl=ORDER_GUARD_TTL_SECONDS)
        except redis.RedisError as e:
            logger.warning(f"Failed to mark guard {key} completed: {e}")

    def _release(self, key: str) -> None:
        try:
            self.guard.release(key)
        except redis.RedisError as e:
            logger.warning(f"Failed to release guard {key}, it expires on its own: {e}")

    def _already_completed(self, key: str) -> Dict[str, Any]:
        existing = self.order_repo.get_by_idempotency_key(key)
        return {
            "outcome": "already_completed",
            "order": serialize_order(existing) if existing else None,
            "redirect_to": MY_ORDERS_PATH,
        }
