# tiffin/domain/constants.py
from decimal import Decimal
from enum import Enum


class OrderStatus(str, Enum):
    ORDER_PLACED = "Order Placed"
    PREPARING = "Preparing"
    PACKING = "Packing"
    DISPATCHED = "Dispatched"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class SubscriptionType(str, Enum):
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class CityQuarter(str, Enum):
    DOWNTOWN = "Downtown"
    NE = "NE"
    NW = "NW"
    SE = "SE"
    SW = "SW"


#cena planu jest stala, nie bierzemy jej od klienta
PLAN_PRICES = {
    SubscriptionType.WEEKLY: Decimal("70.00"),
    SubscriptionType.MONTHLY: Decimal("240.00"),
}

#dni dostaw (bez niedziel), soboty wliczone
PLAN_DELIVERY_DAYS = {
    SubscriptionType.WEEKLY: 6,
    SubscriptionType.MONTHLY: 24,
}

MENU_CATEGORY_ORDER = (
    "appetizers",
    "snacks",
    "vegetarian main course",
    "non vegetarian main course",
    "breads",
    "rices",
    "sides",
    "beverages",
)

ORDER_REF_MIN = 10_000_000
ORDER_REF_MAX = 99_999_999
