# tiffin/repos/menu_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from tiffin.data.models.menu import MenuCategoryModel, MenuItemModel


class MenuRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[MenuCategoryModel]:
        return self.db.execute(select(MenuCategoryModel)).scalars().all()

    def get_category(self, name: str) -> MenuCategoryModel | None:
        return self.db.get(MenuCategoryModel, name)

    def create_category(self, category: MenuCategoryModel) -> MenuCategoryModel:
        self.db.add(category)
        self.db.commit()
        return category

    def list_items(self, category: str) -> List[MenuItemModel]:
        return self.db.execute(
            select(MenuItemModel)
            .where(MenuItemModel.category == category)
            .order_by(MenuItemModel.id)
        ).scalars().all()

    def get_item(self, item_id: str) -> MenuItemModel | None:
        return self.db.get(MenuItemModel, item_id)

    def add_item(self, item: MenuItemModel) -> MenuItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: MenuItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
