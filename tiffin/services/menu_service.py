# tiffin/services/menu_service.py
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from tiffin.data.models.menu import MenuCategoryModel, MenuItemModel
from tiffin.domain.constants import MENU_CATEGORY_ORDER
from tiffin.domain.errors import NotFoundError, ValidationError
from tiffin.domain.pricing import to_money
from tiffin.repos.menu_repo import MenuRepo
from tiffin.services.admin_service import AdminService
from tiffin.services.identity_client import CurrentUser
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


def _category_rank(name: str):
    # znane kategorie w stalej kolejnosci, reszta alfabetycznie na koncu
    if name in MENU_CATEGORY_ORDER:
        return (0, MENU_CATEGORY_ORDER.index(name), name)
    return (1, 0, name)


def serialize_item(item: MenuItemModel) -> Dict[str, Any]:
    return {
        "id": item.id,
        "category": item.category,
        "name": item.name,
        "description": item.description,
        "price": item.price,
    }


def _clean_item_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    name = str(data.get("name") or "").strip()
    description = str(data.get("description") or "").strip()
    price = data.get("price")

    try:
        price = to_money(price) if price not in (None, "") else None
    except InvalidOperation:
        price = None

    if not name or not description or not price or price <= Decimal("0"):
        raise ValidationError("Name, description, and price are required.")

    return {"name": name, "description": description, "price": price}


class MenuService:
    def __init__(self, db: Session):
        self.repo = MenuRepo(db)
        self.admin_service = AdminService(db)

    def list_menu(self) -> List[Dict[str, Any]]:
        categories = sorted(self.repo.list_categories(), key=lambda c: _category_rank(c.name))
        return [
            {"name": c.name, "items": [serialize_item(i) for i in self.repo.list_items(c.name)]}
            for c in categories
        ]

    def create_item(self, user: CurrentUser, data: Dict[str, Any]) -> MenuItemModel:
        self.admin_service.require_admin(user)
        fields = _clean_item_fields(data)

        if self.repo.get_item(data["id"]):
            raise ValidationError(f"Menu item {data['id']} already exists")

        if not self.repo.get_category(data["category"]):
            self.repo.create_category(MenuCategoryModel(name=data["category"]))

        item = self.repo.add_item(MenuItemModel(id=data["id"], category=data["category"], **fields))
        self.repo.commit()
        logger.info(f"Menu item {item.id} created in {item.category}")
        return item

    def update_item(self, user: CurrentUser, item_id: str, data: Dict[str, Any]) -> MenuItemModel:
        """
        Aktualizacja nazwy, opisu i ceny. Przy zmianie ID tworzymy nowy rekord
        i usuwamy stary (klucz glowny sie nie zmienia w miejscu).
        """
        self.admin_service.require_admin(user)
        item = self.repo.get_item(item_id)

        if not item:
            raise NotFoundError("Menu item not found")

        fields = _clean_item_fields(data)
        new_id = (data.get("new_id") or "").strip()

        if new_id and new_id != item.id:
            if self.repo.get_item(new_id):
                raise ValidationError(f"Menu item {new_id} already exists")

            category = item.category
            self.repo.delete_item(item)
            item = self.repo.add_item(MenuItemModel(id=new_id, category=category, **fields))
            logger.info(f"Menu item {item_id} renamed to {new_id}")
        else:
            for field, value in fields.items():
                setattr(item, field, value)

        self.repo.commit()
        return item

    def delete_item(self, user: CurrentUser, item_id: str) -> None:
        self.admin_service.require_admin(user)
        item = self.repo.get_item(item_id)

        if not item:
            raise NotFoundError("Menu item not found")

        self.repo.delete_item(item)
        self.repo.commit()
        logger.info(f"Menu item {item_id} deleted")
