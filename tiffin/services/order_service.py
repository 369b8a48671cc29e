# tiffin/services/order_service.py
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from tiffin.data.models.order import OrderModel
from tiffin.domain.constants import OrderStatus
from tiffin.domain.errors import NotFoundError, ValidationError
from tiffin.repos.order_repo import OrderRepo
from tiffin.services.admin_service import AdminService
from tiffin.services.identity_client import CurrentUser
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_STATUSES = tuple(s.value for s in OrderStatus)


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_ref": order.order_ref,
        "user_id": order.user_id,
        "user_email": order.user_email,
        "customer_details": {
            "first_name": order.first_name,
            "last_name": order.last_name,
            "address": {
                "line1": order.address_line1,
                "line2": order.address_line2,
                "city": order.city,
                "zipcode": order.zipcode,
            },
            "contact": {
                "phone": order.phone,
                "email": order.email,
            },
        },
        "items": list(order.items),
        "subtotal": order.subtotal,
        "tax": order.tax,
        "total": order.total,
        "status": order.status,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Zamowienia po utworzeniu: odczyt dla klienta i panel admina.
    Tworzenie jest w CheckoutService.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.admin_service = AdminService(db)

    def list_for_user(self, user: CurrentUser) -> List[Dict[str, Any]]:
        return [serialize_order(o) for o in self.repo.list_by_user(user.uid)]

    def get_order(self, order_id: int, user: CurrentUser) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user.uid and not self.admin_service.is_admin(user.email):
            raise PermissionError("Order belongs to another user")

        return serialize_order(order)

    def list_all(self, user: CurrentUser) -> List[Dict[str, Any]]:
        self.admin_service.require_admin(user)
        return [serialize_order(o) for o in self.repo.list_all()]

    def set_status(self, order_id: int, new_status: str, user: CurrentUser) -> Dict[str, Any]:
        """
        Use Case: zmiana statusu przez admina.
        Tylko wartosci z OrderStatus, inne odrzucamy zanim cokolwiek zapiszemy.
        Ostatni zapis wygrywa, brak wersjonowania.
        """
        self.admin_service.require_admin(user)

        if not new_status:
            raise ValidationError("Please select a valid status", {"status": "Status is required"})

        if new_status not in ALLOWED_STATUSES:
            raise ValidationError(
                f"Unknown order status: {new_status}",
                {"status": f"Must be one of: {', '.join(ALLOWED_STATUSES)}"},
            )

        order = self.repo.update_order_status(order_id, new_status)
        if not order:
            raise NotFoundError("Order not found")

        logger.info(f"Order {order_id} status -> {new_status} by {user.email}")
        return serialize_order(order)
