from sqlalchemy import Column, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from tiffin.data.database import Base


class MenuCategoryModel(Base):
    __tablename__ = "menu_categories"

    name = Column(String, primary_key=True)

    items = relationship(
        "MenuItemModel",
        back_populates="category_ref",
        cascade="all, delete-orphan",
        order_by="MenuItemModel.id",
    )


class MenuItemModel(Base):
    __tablename__ = "menu_items"

    id = Column(String(128), primary_key=True)
    category = Column(String, ForeignKey("menu_categories.name", ondelete="CASCADE"), nullable=False)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    category_ref = relationship("MenuCategoryModel", back_populates="items")
