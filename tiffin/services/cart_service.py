# tiffin/services/cart_service.py
from datetime import datetime, timezone, timedelta
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tiffin.data.models.cart import CartModel
from tiffin.data.models.cart_item import CartItemModel
from tiffin.domain.errors import ConcurrencyConflict, NotFoundError
from tiffin.domain.pricing import calculate_totals
from tiffin.repos.cart_repo import CartRepo
from tiffin.repos.menu_repo import MenuRepo
from tiffin.utils.settings import CART_TTL_SECONDS
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


def as_utc(value: datetime) -> datetime:
    # sqlite oddaje naive datetime
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CartService:
    """
    Jeden aktywny koszyk na uzytkownika, jedno zrodlo prawdy dla wszystkich widokow.
    commands (add, remove, clear) modyfikuja stan i podbijaja version
    query (get) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.menu_repo = MenuRepo(db)

    def serialize(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)
        totals = calculate_totals(items)

        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "version": cart.version,
            "items": [
                {
                    "id": i.menu_item_id,
                    "name": i.name,
                    "price": i.price,
                    "quantity": i.quantity,
                }
                for i in items
            ],
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "total": totals.total,
            "expires_at": cart.expires_at,
        }

    def active_cart(self, user_id: str) -> CartModel:
        """Aktywny koszyk uzytkownika, nowy jesli nie ma albo stary wygasl."""
        cart = self.repo.get_active_cart_by_user(user_id)

        if cart and as_utc(cart.expires_at) < datetime.now(timezone.utc):
            rowcount = self.repo.update_cart_version(
                cart_id=cart.id,
                old_version=cart.version,
                new_data={"status": "EXPIRED", "version": cart.version + 1},
            )

            if rowcount == 0:
                # inny request zmienil koszyk w miedzyczasie, czytamy jeszcze raz
                self.repo.rollback()
                logger.info(f"Cart {cart.id} changed while expiring, reloading")
                return self.active_cart(user_id)

            self.repo.commit()
            logger.info(f"Cart {cart.id} expired, user {user_id} gets a new one")
            cart = None

        if cart:
            return cart

        expires = datetime.now(timezone.utc) + timedelta(seconds=CART_TTL_SECONDS)
        created = self.repo.create_cart(
            CartModel(
                user_id=user_id,
                status="ACTIVE",
                version=1,
                expires_at=expires,
            )
        )
        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    #query
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        return self.serialize(self.active_cart(user_id))

    #commands
    def add_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        menu_item = self.menu_repo.get_item(item_id)
        if not menu_item:
            raise NotFoundError(f"Menu item {item_id} not found")

        cart = self.active_cart(user_id)

        try:
            existing = self.repo.get_cart_item(cart.id, item_id)

            if existing:
                logger.info(
                    f"Item {item_id} already in cart {cart.id}, quantity "
                    f"{existing.quantity} -> {existing.quantity + 1}"
                )
                existing.quantity += 1
                self.repo.add_cart_item(existing)
            else:
                logger.info(f"Adding item {item_id} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        menu_item_id=menu_item.id,
                        name=menu_item.name,
                        price=menu_item.price,
                        quantity=1,
                    )
                )

            self._bump_version(cart)

        except IntegrityError as e:
            # rownolegle dodanie tej samej pozycji (u_cart_menu_item)
            logger.warning(f"Item {item_id} added concurrently to cart {cart.id}: {e}")
            self.repo.rollback()
            raise ConcurrencyConflict(
                "Cart was modified by another request, please retry"
            ) from e

        except Exception as e:
            logger.error(f"Failed to add item {item_id} to cart {cart.id}: {e}")
            self.repo.rollback()
            raise

        return self.serialize(self.repo.get_cart(cart.id))

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        cart = self.active_cart(user_id)
        existing = self.repo.get_cart_item(cart.id, item_id)

        #brak pozycji - nic do zrobienia
        if not existing:
            return self.serialize(cart)

        try:
            if existing.quantity > 1:
                existing.quantity -= 1
                self.repo.add_cart_item(existing)
            else:
                logger.info(f"Dropping item {item_id} from cart {cart.id}")
                self.repo.delete_cart_item(existing)

            self._bump_version(cart)

        except Exception as e:
            logger.error(f"Failed to remove item {item_id} from cart {cart.id}: {e}")
            self.repo.rollback()
            raise

        return self.serialize(self.repo.get_cart(cart.id))

    def clear(self, user_id: str) -> Dict[str, Any]:
        cart = self.active_cart(user_id)

        self.repo.delete_all_items(cart.id)
        self._bump_version(cart)
        logger.info(f"Cart {cart.id} cleared")

        return self.serialize(self.repo.get_cart(cart.id))

    def _bump_version(self, cart: CartModel) -> None:
        #kazda akcja przedluza koszyk o TTL
        new_expires = datetime.now(timezone.utc) + timedelta(seconds=CART_TTL_SECONDS)

        # UPDATE ... SET version = v+1 WHERE id = :id AND version = v
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "version": cart.version + 1,
                "expires_at": new_expires,
            },
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflict(
                "Cart was modified by another request, please retry"
            )

        self.repo.commit()
