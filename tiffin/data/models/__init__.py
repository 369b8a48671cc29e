#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from tiffin.data.models.cart import CartModel
from tiffin.data.models.cart_item import CartItemModel
from tiffin.data.models.order import OrderModel
from tiffin.data.models.subscription import SubscriptionModel
from tiffin.data.models.admin import AdminModel
from tiffin.data.models.menu import MenuCategoryModel, MenuItemModel

__all__ = [
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "SubscriptionModel",
    "AdminModel",
    "MenuCategoryModel",
    "MenuItemModel",
]
