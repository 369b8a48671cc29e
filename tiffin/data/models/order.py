from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON
from datetime import datetime, timezone

from tiffin.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    # 8 cyfr dla klienta, nie jest kluczem i moze sie powtorzyc
    order_ref = Column(String(8), nullable=False, index=True)
    idempotency_key = Column(String(255), nullable=False, unique=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False)

    user_id = Column(String(128), nullable=False, index=True)
    user_email = Column(String, nullable=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    address_line1 = Column(String, nullable=False)
    address_line2 = Column(String, nullable=True)
    city = Column(String, nullable=False)
    zipcode = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=False)

    # [{"id", "name", "price", "quantity"}], price jako string
    items = Column(JSON, nullable=False)

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)

    status = Column(String, nullable=False, default="Order Placed")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)
